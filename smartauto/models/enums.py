from enum import Enum


class Role(str, Enum):
    customer = "customer"
    owner = "owner"
    admin = "admin"


class RentalStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"
