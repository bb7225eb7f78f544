"""
Integration tests for parcel status changes.

Covers unknown ids, idempotence, the notify side effect and status history.
"""

import uuid

import pytest
from sqlalchemy import select, func

from parcel_tracker.app.models.notification import Notification, NotificationType
from parcel_tracker.app.models.parcel import Parcel
from parcel_tracker.app.models.parcel_enums import ParcelStatus
from parcel_tracker.app.models.status_history import StatusHistory
from parcel_tracker.app.services.notification_service import NotificationService
from parcel_tracker.app.services.parcel_service import ParcelService


def status_url(parcel_id):
    return f"/v1/admin/parcels/{parcel_id}/status"


async def count_rows(session_factory, model):
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()


async def stored_status(session_factory, parcel_id):
    async with session_factory() as session:
        result = await session.execute(select(Parcel.status).where(Parcel.id == parcel_id))
        return result.scalar_one()


@pytest.mark.asyncio
async def test_update_status_success(client, admin_headers, customer, make_parcel, session_factory):
    parcel = await make_parcel(customer)

    response = await client.patch(status_url(parcel.id), json={"status": "shipped"}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["resultCode"] == 0
    assert body["resultData"]["status"] == "shipped"
    assert body["resultData"]["id"] == str(parcel.id)
    assert await stored_status(session_factory, parcel.id) == ParcelStatus.SHIPPED


@pytest.mark.asyncio
async def test_any_status_may_follow_any_other(client, admin_headers, customer, make_parcel):
    parcel = await make_parcel(customer, status=ParcelStatus.DELIVERED)

    response = await client.patch(status_url(parcel.id), json={"status": "pending"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["resultData"]["status"] == "pending"


# Unknown id
@pytest.mark.asyncio
async def test_unknown_parcel_returns_not_found(client, admin_headers, session_factory):
    missing_id = uuid.uuid4()

    response = await client.patch(status_url(missing_id), json={"status": "shipped"}, headers=admin_headers)

    assert response.status_code == 404
    body = response.json()
    assert body["resultCode"] == 1002
    assert body["resultStatus"] == "NOT_FOUND"
    assert await count_rows(session_factory, Parcel) == 0
    assert await count_rows(session_factory, StatusHistory) == 0


@pytest.mark.asyncio
async def test_service_returns_none_for_unknown_id(db_session):
    result = await ParcelService.update_status(db_session, uuid.uuid4(), ParcelStatus.SHIPPED)

    assert result is None


# Validation
@pytest.mark.asyncio
async def test_invalid_status_value_is_rejected(client, admin_headers, customer, make_parcel, session_factory):
    parcel = await make_parcel(customer)

    response = await client.patch(status_url(parcel.id), json={"status": "teleported"}, headers=admin_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["resultStatus"] == "VALIDATION_FAIL"
    assert "errors" in body["errorDetails"]
    assert await stored_status(session_factory, parcel.id) == ParcelStatus.PENDING


@pytest.mark.asyncio
async def test_missing_status_is_rejected(client, admin_headers, customer, make_parcel):
    parcel = await make_parcel(customer)

    response = await client.patch(status_url(parcel.id), json={"notify": True}, headers=admin_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_malformed_parcel_id_is_rejected(client, admin_headers):
    response = await client.patch(status_url("not-a-uuid"), json={"status": "shipped"}, headers=admin_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_customer_cannot_change_status(client, customer, customer_headers, make_parcel):
    parcel = await make_parcel(customer)

    response = await client.patch(status_url(parcel.id), json={"status": "delivered"}, headers=customer_headers)

    assert response.status_code == 403


# Idempotence
@pytest.mark.asyncio
async def test_repeating_a_status_is_idempotent(client, admin_headers, customer, make_parcel):
    parcel = await make_parcel(customer, status=ParcelStatus.SHIPPED)

    first = await client.patch(status_url(parcel.id), json={"status": "shipped"}, headers=admin_headers)
    second = await client.patch(status_url(parcel.id), json={"status": "shipped"}, headers=admin_headers)

    assert first.json()["resultData"]["status"] == "shipped"
    assert second.json()["resultData"]["status"] == "shipped"
    assert second.json()["resultData"]["updatedAt"] >= first.json()["resultData"]["updatedAt"]


# Notify flag
@pytest.mark.asyncio
async def test_notify_flag_does_not_change_persisted_status(client, admin_headers, customer, make_parcel, session_factory):
    quiet = await make_parcel(customer)
    loud = await make_parcel(customer)

    await client.patch(status_url(quiet.id), json={"status": "delivered", "notify": False}, headers=admin_headers)
    await client.patch(status_url(loud.id), json={"status": "delivered", "notify": True}, headers=admin_headers)

    assert await stored_status(session_factory, quiet.id) == ParcelStatus.DELIVERED
    assert await stored_status(session_factory, loud.id) == ParcelStatus.DELIVERED


@pytest.mark.asyncio
async def test_notify_creates_customer_notification(client, admin_headers, customer, customer_headers, make_parcel):
    parcel = await make_parcel(customer, parcel_ref="NOTE-1")

    await client.patch(status_url(parcel.id), json={"status": "shipped", "notify": True}, headers=admin_headers)

    response = await client.get("/v1/notifications", headers=customer_headers)
    notifications = response.json()["resultData"]
    assert len(notifications) == 1
    assert notifications[0]["type"] == NotificationType.PARCEL_UPDATE.value
    assert "NOTE-1" in notifications[0]["title"]
    assert notifications[0]["metadataPayload"]["to_status"] == "shipped"
    assert notifications[0]["isRead"] is False


@pytest.mark.asyncio
async def test_no_notification_without_notify(client, admin_headers, customer, make_parcel, session_factory):
    parcel = await make_parcel(customer)

    await client.patch(status_url(parcel.id), json={"status": "shipped"}, headers=admin_headers)

    assert await count_rows(session_factory, Notification) == 0


@pytest.mark.asyncio
async def test_notification_failure_does_not_fail_update(client, admin_headers, customer, make_parcel, session_factory, mocker):
    parcel = await make_parcel(customer)
    mocker.patch.object(
        NotificationService, "notify_status_change", side_effect=RuntimeError("mail relay down")
    )

    response = await client.patch(
        status_url(parcel.id), json={"status": "delivered", "notify": True}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["resultData"]["status"] == "delivered"
    assert await stored_status(session_factory, parcel.id) == ParcelStatus.DELIVERED
    assert await count_rows(session_factory, StatusHistory) == 1


# History
@pytest.mark.asyncio
async def test_each_transition_is_recorded(client, admin_headers, admin_user, customer, make_parcel):
    parcel = await make_parcel(customer)

    await client.patch(status_url(parcel.id), json={"status": "shipped"}, headers=admin_headers)
    await client.patch(status_url(parcel.id), json={"status": "delivered"}, headers=admin_headers)

    response = await client.get(f"/v1/admin/parcels/{parcel.id}/history", headers=admin_headers)

    assert response.status_code == 200
    history = response.json()["resultData"]
    transitions = sorted((h["fromStatus"], h["toStatus"]) for h in history)
    assert transitions == [("pending", "shipped"), ("shipped", "delivered")]
    assert {h["updatedBy"] for h in history} == {admin_user.customer_code}


@pytest.mark.asyncio
async def test_history_of_unknown_parcel(client, admin_headers):
    response = await client.get(f"/v1/admin/parcels/{uuid.uuid4()}/history", headers=admin_headers)

    assert response.status_code == 404


# Bulk update
@pytest.mark.asyncio
async def test_bulk_update_reports_missing_ids(client, admin_headers, customer, make_parcel, session_factory):
    first = await make_parcel(customer)
    second = await make_parcel(customer)
    missing = uuid.uuid4()

    response = await client.post(
        "/v1/admin/parcels/bulk-update-status",
        json={"parcelIds": [str(first.id), str(missing), str(second.id)], "status": "cancelled"},
        headers=admin_headers
    )

    assert response.status_code == 200
    data = response.json()["resultData"]
    assert data["status"] == "cancelled"
    assert data["updatedIds"] == [str(first.id), str(second.id)]
    assert data["notFoundIds"] == [str(missing)]
    assert await stored_status(session_factory, first.id) == ParcelStatus.CANCELLED
    assert await stored_status(session_factory, second.id) == ParcelStatus.CANCELLED


@pytest.mark.asyncio
async def test_bulk_update_requires_ids(client, admin_headers):
    response = await client.post(
        "/v1/admin/parcels/bulk-update-status",
        json={"parcelIds": [], "status": "shipped"},
        headers=admin_headers
    )

    assert response.status_code == 400
