"""
Parcel status enumerations and lookup tables.
"""

import enum
from types import MappingProxyType


# Literal accepted by list filters to disable status filtering
STATUS_FILTER_ALL = "all"


class ParcelStatus(str, enum.Enum):
    """
    Parcel status enumeration.

    Transitions are unrestricted: any status may follow any other.
    """
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    PARTIAL = "partial"


class OperationalStatus(str, enum.Enum):
    """
    Warehouse-floor vocabulary used by the admin console and order sheets.

    These are finer-grained labels for the same lifecycle as ParcelStatus and
    are folded into it before anything is persisted.
    """
    ARRIVED_CN_WAREHOUSE = "arrived_cn_warehouse"
    CONTAINER_CLOSED = "container_closed"
    READY_TO_SHIP_TO_CUSTOMER = "ready_to_ship_to_customer"
    ARRIVED_TH_WAREHOUSE = "arrived_th_warehouse"
    SHIPPED_TO_CUSTOMER = "shipped_to_customer"
    DELIVERED_TO_CUSTOMER = "delivered_to_customer"
    WAREHOUSE_PENDING = "warehouse_pending"


OPERATIONAL_STATUS_MAP = MappingProxyType({
    OperationalStatus.ARRIVED_CN_WAREHOUSE: ParcelStatus.PENDING,
    OperationalStatus.WAREHOUSE_PENDING: ParcelStatus.PENDING,
    OperationalStatus.CONTAINER_CLOSED: ParcelStatus.SHIPPED,
    OperationalStatus.READY_TO_SHIP_TO_CUSTOMER: ParcelStatus.SHIPPED,
    OperationalStatus.ARRIVED_TH_WAREHOUSE: ParcelStatus.SHIPPED,
    OperationalStatus.SHIPPED_TO_CUSTOMER: ParcelStatus.DELIVERED,
    OperationalStatus.DELIVERED_TO_CUSTOMER: ParcelStatus.DELIVERED,
})


def to_core_status(value) -> ParcelStatus:
    """
    Resolve a core or operational status value to a ParcelStatus.

    Raises:
        ValueError: if the value belongs to neither vocabulary
    """
    if isinstance(value, ParcelStatus):
        return value
    try:
        return ParcelStatus(value)
    except ValueError:
        return OPERATIONAL_STATUS_MAP[OperationalStatus(value)]
