"""Role and operation vocabularies."""

from enum import Enum


class Role(str, Enum):
    """Roles supplied by the authentication layer."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    STAFF = "Staff"


class Operation(str, Enum):
    """Operations subject to the role policy."""

    CREATE_ITEM = "CreateItem"
    RESTOCK = "Restock"
    SELL = "Sell"
    DELETE_ITEM = "DeleteItem"
    VIEW_REPORTS = "ViewReports"
