"""
Parcel Query Service.

Builds filtered, paginated parcel lists, applies status transitions and
shapes parcels into their JSON-safe response form. Routers call into this
module; it never raises HTTP errors itself except for the create/update
lookups, which raise ``AppException`` subclasses.
"""

import logging
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracker.app.core.exceptions import ConflictError, ResourceNotFoundError
from parcel_tracker.app.models.carrier import Carrier
from parcel_tracker.app.models.parcel import Parcel
from parcel_tracker.app.models.parcel_enums import ParcelStatus, STATUS_FILTER_ALL
from parcel_tracker.app.models.status_history import StatusHistory
from parcel_tracker.app.models.user import User
from parcel_tracker.app.schemas.parcel import (
    ParcelCreate, ParcelUpdate, ParcelListQuery, ParcelResponse, ParcelListResponse,
)
from parcel_tracker.app.services.notification_service import NotificationService

logger = logging.getLogger("parcel_tracker.parcels")

SYSTEM_ACTOR = "system"
CBM_QUANTUM = Decimal("0.0001")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored timestamp is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _iso(value: Optional[datetime]) -> Optional[str]:
    return _as_utc(value).isoformat() if value is not None else None


def _number(value) -> Optional[float]:
    return float(value) if value is not None else None


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _day_end(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def compute_cbm(length: int, width: int, height: int, pack: int = 1) -> Decimal:
    """Volume in cubic meters for ``pack`` boxes of the given size in centimeters."""
    return (Decimal(length * width * height) / Decimal(1_000_000) * pack).quantize(CBM_QUANTUM)


def build_parcel_filters(query: ParcelListQuery) -> list:
    """
    Translate a filter set into SQL predicates, all AND-combined.

    Predicates on ``customer_code`` reference the ``users`` table, so the
    statement they are applied to must join ``User``.
    """
    conditions = []

    if query.customer_code:
        conditions.append(User.customer_code == query.customer_code)

    if query.status and query.status != STATUS_FILTER_ALL:
        conditions.append(Parcel.status == query.status)

    if query.payment_status and query.payment_status != STATUS_FILTER_ALL:
        conditions.append(Parcel.payment_status == query.payment_status)

    # Inclusive by calendar day; a missing bound leaves that side open.
    # An inverted range is not rejected and simply matches nothing.
    if query.date_from:
        conditions.append(Parcel.receive_date >= _day_start(query.date_from))
    if query.date_to:
        conditions.append(Parcel.receive_date <= _day_end(query.date_to))

    if query.tracking_no:
        term = query.tracking_no
        conditions.append(
            or_(
                Parcel.tracking.icontains(term, autoescape=True),
                Parcel.th_tracking.icontains(term, autoescape=True),
                Parcel.parcel_ref.icontains(term, autoescape=True),
            )
        )

    return conditions


class ParcelService:

    @staticmethod
    async def find_many(db: AsyncSession, query: ParcelListQuery) -> Tuple[List[Parcel], int]:
        """
        Return one page of parcels matching ``query`` and the total match count.

        Results are always ordered newest first by ``created_at``; ``id``
        breaks ties so pages never overlap.
        """
        conditions = build_parcel_filters(query)

        count_query = select(func.count(Parcel.id))
        page_query = select(Parcel)
        if query.customer_code:
            count_query = count_query.join(User, Parcel.customer_id == User.id)
            page_query = page_query.join(User, Parcel.customer_id == User.id)

        total_result = await db.execute(count_query.where(*conditions))
        total = total_result.scalar_one()

        offset = (query.page - 1) * query.page_size
        page_query = (
            page_query.where(*conditions)
            .order_by(Parcel.created_at.desc(), Parcel.id.desc())
            .offset(offset)
            .limit(query.page_size)
        )
        result = await db.execute(page_query)
        parcels = list(result.scalars().all())

        return parcels, total

    @staticmethod
    async def get_by_id(db: AsyncSession, parcel_id: UUID) -> Optional[Parcel]:
        result = await db.execute(
            select(Parcel)
            .where(Parcel.id == parcel_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def update_status(
        db: AsyncSession,
        parcel_id: UUID,
        new_status: ParcelStatus,
        notify: bool = False,
        actor: Optional[str] = None,
    ) -> Optional[Parcel]:
        """
        Set the status of one parcel.

        Any status may follow any other, and re-applying the current status
        still refreshes ``updated_at``. Returns None when no parcel has
        ``parcel_id``. The notification side effect runs after the commit and
        cannot undo or fail the update.
        """
        parcel = await ParcelService.get_by_id(db, parcel_id)
        if parcel is None:
            return None

        previous_status = parcel.status
        now = datetime.now(timezone.utc)

        parcel.status = new_status
        parcel.updated_at = now
        db.add(StatusHistory(
            parcel_id=parcel.id,
            from_status=previous_status,
            to_status=new_status,
            updated_by=actor or SYSTEM_ACTOR,
            updated_at=now,
        ))
        await db.commit()

        if notify:
            await ParcelService._notify_status_change(db, parcel, previous_status)

        return parcel

    @staticmethod
    async def _notify_status_change(db: AsyncSession, parcel: Parcel, previous_status: ParcelStatus) -> None:
        logger.info(
            "Parcel %s (%s) status updated %s -> %s, notifying customer %s",
            parcel.id, parcel.parcel_ref, previous_status.value, parcel.status.value, parcel.customer_id,
        )

        # Keep the updated parcel readable if the notification rolls back
        for instance in (parcel, parcel.customer, parcel.carrier):
            if instance is not None and instance in db:
                db.expunge(instance)

        try:
            await NotificationService.notify_status_change(db, parcel, previous_status)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Notification for parcel %s failed; status update kept", parcel.id)

    @staticmethod
    async def count_by_status(db: AsyncSession) -> Dict[str, int]:
        result = await db.execute(
            select(Parcel.status, func.count(Parcel.id)).group_by(Parcel.status)
        )
        counts = {status.value: 0 for status in ParcelStatus}
        for status, count in result.all():
            counts[status.value] = count
        return counts

    @staticmethod
    async def get_history(db: AsyncSession, parcel_id: UUID) -> Sequence[StatusHistory]:
        result = await db.execute(
            select(StatusHistory)
            .where(StatusHistory.parcel_id == parcel_id)
            .order_by(StatusHistory.updated_at.desc())
        )
        return result.scalars().all()

    # --- Create / edit ---

    @staticmethod
    async def _resolve_customer(db: AsyncSession, customer_code: str) -> User:
        result = await db.execute(select(User).where(User.customer_code == customer_code))
        customer = result.scalar_one_or_none()
        if customer is None:
            raise ResourceNotFoundError("Customer", customer_code)
        return customer

    @staticmethod
    async def _resolve_carrier(db: AsyncSession, carrier_code: Optional[str]) -> Optional[Carrier]:
        if not carrier_code:
            return None
        result = await db.execute(select(Carrier).where(Carrier.code == carrier_code))
        carrier = result.scalar_one_or_none()
        if carrier is None:
            raise ResourceNotFoundError("Carrier", carrier_code)
        return carrier

    @staticmethod
    async def _ensure_refs_free(db: AsyncSession, refs: List[str]) -> None:
        seen = set()
        for ref in refs:
            if ref in seen:
                raise ConflictError(f"Parcel reference '{ref}' appears more than once", field="parcelRef")
            seen.add(ref)

        result = await db.execute(select(Parcel.parcel_ref).where(Parcel.parcel_ref.in_(refs)))
        taken = result.scalars().first()
        if taken:
            raise ConflictError(f"Parcel with reference '{taken}' already exists", field="parcelRef")

    @staticmethod
    async def _build(db: AsyncSession, data: ParcelCreate) -> Parcel:
        customer = await ParcelService._resolve_customer(db, data.customer_code)
        carrier = await ParcelService._resolve_carrier(db, data.carrier_code)

        fields = data.model_dump(exclude={"customer_code", "carrier_code"})
        if fields["cbm"] is None:
            fields["cbm"] = compute_cbm(data.length, data.width, data.height, data.pack)

        return Parcel(
            **fields,
            customer_id=customer.id,
            carrier_id=carrier.id if carrier else None,
        )

    @staticmethod
    async def create(db: AsyncSession, data: ParcelCreate) -> Parcel:
        await ParcelService._ensure_refs_free(db, [data.parcel_ref])
        parcel = await ParcelService._build(db, data)

        db.add(parcel)
        await db.commit()

        return await ParcelService.get_by_id(db, parcel.id)

    @staticmethod
    async def create_many(db: AsyncSession, items: List[ParcelCreate]) -> List[Parcel]:
        """Create every parcel in ``items`` in one commit, or none of them."""
        await ParcelService._ensure_refs_free(db, [item.parcel_ref for item in items])

        parcels = [await ParcelService._build(db, item) for item in items]
        db.add_all(parcels)
        await db.commit()

        created = []
        for parcel in parcels:
            created.append(await ParcelService.get_by_id(db, parcel.id))
        return created

    @staticmethod
    async def update(db: AsyncSession, parcel: Parcel, data: ParcelUpdate) -> Parcel:
        update_data = data.model_dump(exclude_unset=True)

        if "carrier_code" in update_data:
            carrier = await ParcelService._resolve_carrier(db, update_data.pop("carrier_code"))
            parcel.carrier_id = carrier.id if carrier else None

        for field, value in update_data.items():
            setattr(parcel, field, value)

        await db.commit()
        return await ParcelService.get_by_id(db, parcel.id)

    # --- Response shaping ---

    @staticmethod
    def to_response(parcel: Parcel) -> ParcelResponse:
        """Convert a Parcel row into its JSON-safe shape (numbers and ISO-8601 strings)."""
        return ParcelResponse(
            id=parcel.id,
            parcel_ref=parcel.parcel_ref,
            receive_date=_iso(parcel.receive_date),
            description=parcel.description,
            pack=parcel.pack,
            weight=_number(parcel.weight),
            length=parcel.length,
            width=parcel.width,
            height=parcel.height,
            cbm=_number(parcel.cbm),
            tracking=parcel.tracking,
            th_tracking=parcel.th_tracking,
            container_code=parcel.container_code,
            estimated_date=_iso(parcel.estimated_date),
            delivery_method=parcel.delivery_method,
            estimate=_number(parcel.estimate),
            freight=_number(parcel.freight),
            volume=_number(parcel.volume),
            status=parcel.status,
            payment_status=parcel.payment_status,
            customer_id=parcel.customer_id,
            customer_code=parcel.customer.customer_code,
            carrier_id=parcel.carrier_id,
            carrier_code=parcel.carrier.code if parcel.carrier else None,
            created_at=_iso(parcel.created_at),
            updated_at=_iso(parcel.updated_at),
        )

    @staticmethod
    def to_list_response(parcels: List[Parcel], total: int, page: int, page_size: int) -> ParcelListResponse:
        return ParcelListResponse(
            parcels=[ParcelService.to_response(p) for p in parcels],
            total=total,
            page=page,
            page_size=page_size,
        )
