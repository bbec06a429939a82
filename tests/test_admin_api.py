from datetime import timedelta

from hargeisa_vibes.core.security import create_admin_session_token

from tests.conftest import make_user


async def test_admin_sign_in(client, admin):
    response = await client.post("/api/admin/auth", json={"username": "admin", "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["username"] == "admin"
    assert body["user"]["permissions"] == ["*"]
    assert body["token"]
    assert body["expiresAt"]

    session = await client.get(
        "/api/admin/session", headers={"Authorization": f"Bearer {body['token']}"}
    )
    assert session.status_code == 200
    assert session.json()["user"]["id"] == admin.id


async def test_admin_sign_in_prefers_username_over_email(client, db):
    owner = await make_user(db, "ops@example.com", "owner@example.com", "admin", password="owner-pass")
    await make_user(db, "ops", "ops@example.com", "moderator", password="ops-pass")

    response = await client.post(
        "/api/admin/auth", json={"username": "ops@example.com", "password": "owner-pass"}
    )
    assert response.status_code == 200
    assert response.json()["user"]["id"] == owner.id


async def test_moderator_permissions(client, moderator):
    response = await client.post("/api/admin/auth", json={"username": "mod", "password": "secret123"})
    assert response.json()["user"]["permissions"] == ["read", "update"]


async def test_customers_cannot_sign_in_to_admin_panel(client, customer):
    response = await client.post("/api/admin/auth", json={"username": "amina", "password": "secret123"})
    assert response.status_code == 403


async def test_wrong_admin_password_is_401(client, admin):
    response = await client.post("/api/admin/auth", json={"username": "admin", "password": "nope"})
    assert response.status_code == 401


async def test_expired_admin_session_is_rejected(client, admin):
    token = create_admin_session_token({"sub": admin.id}, expires_delta=timedelta(seconds=-1))
    response = await client.get("/api/admin/session", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_customer_token_is_not_an_admin_session(client, customer_headers):
    assert (await client.get("/api/admin/statistics", headers=customer_headers)).status_code == 401


async def test_demoted_admin_loses_access(client, db, admin, admin_headers):
    admin.role = "customer"
    await db.commit()
    assert (await client.get("/api/admin/statistics", headers=admin_headers)).status_code == 403


async def test_statistics(client, service, admin_headers, customer):
    await client.post(
        "/api/bookings",
        json={"serviceId": "service-1", "customerName": "A", "customerEmail": "a@b.com", "numberOfPeople": 2},
    )
    body = (await client.get("/api/admin/statistics", headers=admin_headers)).json()
    assert body == {
        "totalUsers": 2,
        "totalBookings": 1,
        "totalRevenue": 0.0,
        "pendingBookings": 1,
        "activeServices": 1,
    }


async def test_notification_feed(client, service, admin_headers, customer):
    created = await client.post(
        "/api/bookings",
        json={"serviceId": "service-1", "customerName": "Big Group", "customerEmail": "g@b.com", "numberOfPeople": 4},
    )
    booking_id = created.json()["bookingId"]
    await client.patch(f"/api/bookings/{booking_id}/payment", json={"paymentStatus": "paid"})

    feed = (await client.get("/api/admin/notifications", headers=admin_headers)).json()
    by_title = {item["title"]: item for item in feed}
    assert by_title["New Booking"]["priority"] == "high"
    assert by_title["New Booking"]["relatedId"] == booking_id
    assert by_title["Payment Confirmed"]["type"] == "payment"
    assert by_title["New User Registration"]["type"] == "user"

    limited = (await client.get("/api/admin/notifications", params={"limit": 1}, headers=admin_headers)).json()
    assert len(limited) == 1


async def test_activity_feed(client, service, admin_headers, customer):
    await client.post(
        "/api/bookings",
        json={"serviceId": "service-1", "customerName": "A", "customerEmail": "a@b.com"},
    )
    feed = (await client.get("/api/admin/activities", params={"limit": 5}, headers=admin_headers)).json()
    assert 0 < len(feed) <= 5
    assert {item["type"] for item in feed} >= {"booking", "user"}


async def test_settings_defaults_and_update(client, admin_headers):
    settings = (await client.get("/api/admin/settings", headers=admin_headers)).json()
    assert set(settings) == {"general", "notifications", "security", "appearance", "email"}

    response = await client.put(
        "/api/admin/settings/general",
        json={"settings": {"siteName": "Hargeisa Vibes Travel"}},
        headers=admin_headers,
    )
    assert response.status_code == 200

    settings = (await client.get("/api/admin/settings", headers=admin_headers)).json()
    assert settings["general"] == {"siteName": "Hargeisa Vibes Travel"}


async def test_unknown_settings_category_is_400(client, admin_headers):
    response = await client.put("/api/admin/settings/billing", json={"settings": {}}, headers=admin_headers)
    assert response.status_code == 400


# ==================== USERS ====================


async def test_create_user_stores_super_admin_as_admin(client, admin_headers):
    response = await client.post(
        "/api/users",
        headers=admin_headers,
        json={"username": "boss", "email": "boss@example.com", "password": "secret123", "role": "super_admin"},
    )
    assert response.status_code == 201
    assert response.json()["role"] == "admin"

    duplicate = await client.post(
        "/api/users",
        headers=admin_headers,
        json={"username": "boss", "email": "other@example.com", "password": "secret123"},
    )
    assert duplicate.status_code == 409


async def test_get_user_by_username_and_update(client, admin_headers, customer):
    response = await client.get("/api/users/username/amina", headers=admin_headers)
    assert response.json()["id"] == customer.id

    response = await client.put(
        f"/api/users/{customer.id}", headers=admin_headers, json={"role": "moderator"}
    )
    assert response.status_code == 200
    assert response.json()["role"] == "moderator"
    assert response.json()["email"] == customer.email


async def test_moderator_cannot_delete_users(client, db, moderator_headers):
    user = await make_user(db, "victim", "victim@example.com", "customer")
    response = await client.delete(f"/api/users/{user.id}", headers=moderator_headers)
    assert response.status_code == 403


async def test_moderator_cannot_promote_themselves(client, moderator, moderator_headers, customer):
    response = await client.put(
        f"/api/users/{moderator.id}", headers=moderator_headers, json={"role": "admin"}
    )
    assert response.status_code == 403

    session = await client.get("/api/admin/session", headers=moderator_headers)
    assert session.json()["user"]["role"] == "moderator"
    assert (await client.delete(f"/api/users/{customer.id}", headers=moderator_headers)).status_code == 403


async def test_moderator_cannot_grant_or_touch_admin_accounts(client, admin, moderator_headers, customer):
    response = await client.put(
        f"/api/users/{customer.id}", headers=moderator_headers, json={"role": "super_admin"}
    )
    assert response.status_code == 403

    response = await client.post(
        "/api/users",
        headers=moderator_headers,
        json={"username": "boss", "email": "boss@example.com", "password": "secret123", "role": "admin"},
    )
    assert response.status_code == 403

    response = await client.put(
        f"/api/users/{admin.id}", headers=moderator_headers, json={"password": "taken-over"}
    )
    assert response.status_code == 403

    # Plain edits of customer accounts stay open to moderators
    response = await client.put(
        f"/api/users/{customer.id}", headers=moderator_headers, json={"firstName": "Amina"}
    )
    assert response.status_code == 200


async def test_admin_cannot_change_own_role(client, admin, admin_headers):
    response = await client.put(
        f"/api/users/{admin.id}", headers=admin_headers, json={"role": "customer"}
    )
    assert response.status_code == 403

    response = await client.put(f"/api/users/{admin.id}", headers=admin_headers, json={"phone": "+252 63 0000000"})
    assert response.status_code == 200


async def test_admin_deletes_user(client, admin_headers, customer):
    assert (await client.delete(f"/api/users/{customer.id}", headers=admin_headers)).status_code == 200
    assert (await client.get(f"/api/users/{customer.id}", headers=admin_headers)).status_code == 404
