"""
Integration tests for the authentication flow.

Verifies Login -> Me -> Logout, login auditing and consistent error envelopes.
"""

import pytest
from sqlalchemy import select

from parcel_tracker.app.core.jwt import decode_access_token
from parcel_tracker.app.models.audit_log import AuditLog
from parcel_tracker.app.models.enums import UserStatus


async def audit_actions(session_factory):
    async with session_factory() as session:
        result = await session.execute(select(AuditLog).order_by(AuditLog.id))
        return [log.action for log in result.scalars().all()]


# TEST 1: Login with customer code
@pytest.mark.asyncio
async def test_login_with_customer_code(client, customer, session_factory):
    response = await client.post("/v1/auth/login", json={
        "customerCode": "CUST01",
        "password": "password123"
    })

    assert response.status_code == 200
    data = response.json()["resultData"]
    assert data["customerCode"] == "CUST01"
    assert data["tokenType"] == "bearer"
    assert data["role"] == "customer"

    payload = decode_access_token(data["accessToken"])
    assert payload["sub"] == "CUST01"
    assert payload["user_id"] == str(customer.id)
    assert payload["role"] == "customer"

    assert await audit_actions(session_factory) == ["LOGIN_SUCCESS"]


# TEST 2: Login with email
@pytest.mark.asyncio
async def test_login_with_email(client, customer):
    response = await client.post("/v1/auth/login", json={
        "customerCode": customer.email,
        "password": "password123"
    })

    assert response.status_code == 200
    assert response.json()["resultData"]["userId"] == str(customer.id)


# TEST 3: Failed logins are rejected and audited
@pytest.mark.asyncio
async def test_wrong_password_is_rejected_and_audited(client, customer, session_factory):
    response = await client.post("/v1/auth/login", json={
        "customerCode": "CUST01",
        "password": "wrongpassword"
    })

    assert response.status_code == 401
    assert response.json()["resultStatus"] == "UNAUTHORIZED"
    assert await audit_actions(session_factory) == ["LOGIN_FAILED"]


@pytest.mark.asyncio
async def test_unknown_user_is_rejected(client):
    response = await client.post("/v1/auth/login", json={
        "customerCode": "NOBODY",
        "password": "password123"
    })

    assert response.status_code == 401
    assert response.json()["resultCode"] == 1004


@pytest.mark.asyncio
async def test_inactive_user_cannot_login(client, make_user):
    await make_user("SLEEPY", status=UserStatus.INACTIVE)

    response = await client.post("/v1/auth/login", json={
        "customerCode": "SLEEPY",
        "password": "password123"
    })

    assert response.status_code == 403


# TEST 4: Me
@pytest.mark.asyncio
async def test_me_returns_profile(client, customer, customer_headers):
    response = await client.get("/v1/auth/me", headers=customer_headers)

    assert response.status_code == 200
    data = response.json()["resultData"]
    assert data["id"] == str(customer.id)
    assert data["customerCode"] == "CUST01"
    assert data["status"] == "active"
    assert "hashedPassword" not in data


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(client):
    response = await client.get("/v1/auth/me", headers={"Authorization": "Bearer not.a.jwt"})

    assert response.status_code == 401
    assert response.json()["resultStatus"] == "UNAUTHORIZED"


# TEST 5: Logout revokes the token
@pytest.mark.asyncio
async def test_logout_revokes_token(client, customer):
    login = await client.post("/v1/auth/login", json={
        "customerCode": "CUST01",
        "password": "password123"
    })
    headers = {"Authorization": f"Bearer {login.json()['resultData']['accessToken']}"}

    response = await client.post("/v1/auth/logout", headers=headers)
    assert response.status_code == 200

    me_response = await client.get("/v1/auth/me", headers=headers)
    assert me_response.status_code == 401
    assert "revoked" in me_response.json()["developerMessage"].lower()


# TEST 6: Error envelope consistency
@pytest.mark.asyncio
async def test_error_responses_are_consistent(client):
    response = await client.get("/v1/auth/nonexistent")
    assert response.status_code == 404
    data = response.json()
    assert data["resultCode"] == 1002
    assert "developerMessage" in data

    response = await client.post("/v1/auth/login", json={"customerCode": "X"})
    assert response.status_code == 400
    data = response.json()
    assert data["resultCode"] == 1001
    assert data["errorDetails"]["errors"]


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()["resultData"]
    assert data["status"] == "healthy"
    assert data["redis"] == "up"
    assert "X-Correlation-ID" in response.headers
