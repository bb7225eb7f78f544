"""
Tests for the JSON shape of parcels.

Decimal columns must leave the API as JSON numbers and timestamps as
ISO-8601 strings that parse back to the same instant.
"""

import uuid
from datetime import datetime, timezone, timedelta
from decimal import Decimal

import pytest

from parcel_tracker.app.models.carrier import Carrier
from parcel_tracker.app.models.parcel import Parcel
from parcel_tracker.app.models.parcel_enums import ParcelStatus, PaymentStatus
from parcel_tracker.app.models.user import User
from parcel_tracker.app.services.parcel_service import ParcelService, compute_cbm

NUMERIC_FIELDS = ("weight", "cbm", "estimate", "freight", "volume")
DATE_FIELDS = ("receiveDate", "estimatedDate", "createdAt", "updatedAt")


def build_parcel(**fields) -> Parcel:
    """Transient parcel, never added to a session."""
    customer = User(id=uuid.uuid4(), customer_code="SHAPE1")
    stamp = datetime(2024, 5, 17, 8, 30, 15, 123456, tzinfo=timezone.utc)
    defaults = dict(
        id=uuid.uuid4(),
        parcel_ref="SHAPE-REF",
        receive_date=stamp,
        description="Shoes",
        pack=2,
        weight=Decimal("3.250"),
        length=40,
        width=30,
        height=20,
        cbm=Decimal("0.0480"),
        estimate=Decimal("1250.50"),
        freight=Decimal("99.99"),
        volume=Decimal("0.048"),
        estimated_date=stamp + timedelta(days=14),
        status=ParcelStatus.SHIPPED,
        payment_status=PaymentStatus.PARTIAL,
        customer_id=customer.id,
        customer=customer,
        created_at=stamp,
        updated_at=stamp,
    )
    defaults.update(fields)
    return Parcel(**defaults)


def test_decimals_become_floats():
    shaped = ParcelService.to_response(build_parcel()).model_dump(by_alias=True)

    assert shaped["weight"] == 3.25
    assert shaped["estimate"] == 1250.5
    assert shaped["freight"] == 99.99
    for field in NUMERIC_FIELDS:
        assert isinstance(shaped[field], float)


def test_dates_become_iso_strings():
    parcel = build_parcel()
    shaped = ParcelService.to_response(parcel).model_dump(by_alias=True)

    assert shaped["receiveDate"] == "2024-05-17T08:30:15.123456+00:00"
    assert datetime.fromisoformat(shaped["estimatedDate"]) == parcel.estimated_date


def test_naive_timestamps_are_read_as_utc():
    naive = datetime(2024, 1, 2, 3, 4, 5)
    shaped = ParcelService.to_response(build_parcel(created_at=naive))

    assert datetime.fromisoformat(shaped.created_at) == naive.replace(tzinfo=timezone.utc)


def test_optional_fields_stay_null():
    parcel = build_parcel(estimate=None, freight=None, volume=None, estimated_date=None, carrier=None)
    shaped = ParcelService.to_response(parcel)

    assert shaped.estimate is None
    assert shaped.freight is None
    assert shaped.volume is None
    assert shaped.estimated_date is None
    assert shaped.carrier_code is None


def test_carrier_code_is_included():
    carrier = Carrier(id=uuid.uuid4(), code="EK", name="EK Express")
    shaped = ParcelService.to_response(build_parcel(carrier=carrier, carrier_id=carrier.id))

    assert shaped.carrier_code == "EK"
    assert shaped.carrier_id == carrier.id


def test_list_response_reuses_single_item_shape():
    parcels = [build_parcel(parcel_ref=f"L-{i}") for i in range(3)]

    listed = ParcelService.to_list_response(parcels, total=7, page=2, page_size=3)

    assert listed.total == 7
    assert listed.page_size == 3
    assert [p.model_dump() for p in listed.parcels] == [
        ParcelService.to_response(p).model_dump() for p in parcels
    ]


@pytest.mark.parametrize(
    "dims, pack, expected",
    [
        ((50, 40, 30), 1, Decimal("0.0600")),
        ((50, 40, 30), 3, Decimal("0.1800")),
        ((33, 17, 9), 1, Decimal("0.0050")),
    ],
)
def test_compute_cbm(dims, pack, expected):
    assert compute_cbm(*dims, pack=pack) == expected


# Over HTTP: single item and list use the same shape
@pytest.mark.asyncio
async def test_api_returns_json_numbers_and_iso_dates(client, admin_headers, customer, make_parcel):
    receive = datetime(2024, 4, 1, 12, 0, 30, tzinfo=timezone.utc)
    parcel = await make_parcel(
        customer,
        receive_date=receive,
        weight=Decimal("7.125"),
        cbm=Decimal("0.1234"),
        estimate=Decimal("10.00"),
        freight=Decimal("2.50"),
        volume=Decimal("0.123"),
        estimated_date=receive + timedelta(days=10),
    )

    detail = (await client.get(f"/v1/admin/parcels/{parcel.id}", headers=admin_headers)).json()["resultData"]
    listed = (await client.get("/v1/admin/parcels", headers=admin_headers)).json()["resultData"]["parcels"][0]

    for shaped in (detail, listed):
        for field in NUMERIC_FIELDS:
            assert isinstance(shaped[field], (int, float)) and not isinstance(shaped[field], bool)
        for field in DATE_FIELDS:
            assert isinstance(shaped[field], str)
            assert datetime.fromisoformat(shaped[field]).tzinfo is not None
        assert shaped["weight"] == 7.125
        assert shaped["cbm"] == 0.1234
        assert datetime.fromisoformat(shaped["receiveDate"]) == receive

    assert detail == listed
