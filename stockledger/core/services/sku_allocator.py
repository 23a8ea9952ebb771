"""SKU allocator: PREFIX + zero-padded counter, monotonic per run."""

import re
from collections.abc import Iterable

_DIGITS = re.compile(r"\d+")


class SkuAllocator:
    """Hands out SKUs such as ``UQ001``, ``UQ002``.

    The counter is seeded from the largest number embedded in the existing
    SKUs and never moves backwards, even when items are deleted. Uniqueness
    against caller-chosen SKUs is still enforced by the catalog.
    """

    def __init__(self, prefix: str = "UQ", width: int = 3, start: int = 1):
        self.prefix = prefix
        self.width = width
        self._next = max(start, 1)

    def observe(self, skus: Iterable[str]) -> None:
        """Advance the counter past every number found in ``skus``."""
        for sku in skus:
            digits = "".join(_DIGITS.findall(sku))
            if digits:
                self._next = max(self._next, int(digits) + 1)

    def peek(self) -> str:
        return self._format(self._next)

    def allocate(self) -> str:
        sku = self._format(self._next)
        self._next += 1
        return sku

    def _format(self, number: int) -> str:
        return f"{self.prefix}{number:0{self.width}d}"
