"""
User role and account status enumerations.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Back-office staff running the admin console
        CUSTOMER: Shipper who tracks their own parcels (default role)
    """
    ADMIN = "admin"
    CUSTOMER = "customer"


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def enum_values(enum_cls):
    """Persist enum values (``"pending"``) rather than member names."""
    return [member.value for member in enum_cls]
