"""Run the API server: ``python -m stockledger``."""

import uvicorn

from stockledger.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "stockledger.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )


if __name__ == "__main__":
    main()
