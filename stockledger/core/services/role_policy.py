"""
Role policy: which role may perform which operation.

Pure lookups over a static table. Unknown roles or operations are
programming errors and raise ValueError rather than a business error.
"""

from stockledger.config import get_logger
from stockledger.core.entities.role import Operation, Role
from stockledger.core.exceptions import UnauthorizedError

logger = get_logger(__name__)

ROLE_PERMISSIONS: dict[Role, frozenset[Operation]] = {
    Role.ADMIN: frozenset(Operation),
    Role.MANAGER: frozenset(
        {
            Operation.CREATE_ITEM,
            Operation.RESTOCK,
            Operation.SELL,
            Operation.VIEW_REPORTS,
        }
    ),
    Role.STAFF: frozenset({Operation.SELL}),
}


def permits(role: Role | str, operation: Operation | str) -> bool:
    """Return True iff ``role`` may perform ``operation``.

    Raises:
        ValueError: if the role or operation is not part of the closed set.
    """
    return Operation(operation) in ROLE_PERMISSIONS[Role(role)]


def require(role: Role | str, operation: Operation | str) -> None:
    """Raise UnauthorizedError unless ``role`` may perform ``operation``."""
    if not permits(role, operation):
        role_value = Role(role).value
        operation_value = Operation(operation).value
        logger.warning("access_denied", role=role_value, operation=operation_value)
        raise UnauthorizedError(role_value, operation_value)


def allowed_operations(role: Role | str) -> list[Operation]:
    """List the operations a role may perform, in declaration order."""
    granted = ROLE_PERMISSIONS[Role(role)]
    return [op for op in Operation if op in granted]
