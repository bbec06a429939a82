from hargeisa_vibes.services.notification_service import notification_service

from tests.conftest import make_user


async def test_register_returns_token_and_user(client):
    response = await client.post(
        "/api/auth/register",
        json={
            "email": "Hodan@Example.com",
            "password": "secret123",
            "firstName": "Hodan",
            "lastName": "Ali",
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    assert body["token"]
    assert body["user"]["email"] == "hodan@example.com"
    assert body["user"]["role"] == "customer"
    assert body["user"]["username"].startswith("hodan")
    assert "passwordHash" not in body["user"]


async def test_duplicate_registration_is_409(client, customer):
    response = await client.post(
        "/api/auth/register",
        json={"email": customer.email, "password": "secret123", "firstName": "A", "lastName": "B"},
    )
    assert response.status_code == 409


async def test_short_password_is_400(client):
    response = await client.post(
        "/api/auth/register",
        json={"email": "x@example.com", "password": "123", "firstName": "A", "lastName": "B"},
    )
    assert response.status_code == 400


async def test_login(client, customer):
    response = await client.post(
        "/api/auth/login", json={"email": customer.email, "password": "secret123"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == customer.id
    assert body["user"]["lastLogin"] is not None


async def test_login_with_wrong_password_is_401(client, customer):
    response = await client.post(
        "/api/auth/login", json={"email": customer.email, "password": "wrong-password"}
    )
    assert response.status_code == 401


async def test_inactive_account_cannot_login(client, db):
    user = await make_user(db, "sleepy", "sleepy@example.com", "customer", is_active=False)
    response = await client.post("/api/auth/login", json={"email": user.email, "password": "secret123"})
    assert response.status_code == 401


# ==================== SIGNED-IN CUSTOMER ====================


async def test_save_deal_and_list_saved(client, deal, customer_headers):
    response = await client.post("/api/user/save-deal", json={"dealId": "deal-42"}, headers=customer_headers)
    assert response.status_code == 201

    saved = (await client.get("/api/user/saved-deals", headers=customer_headers)).json()
    assert [s["dealId"] for s in saved] == ["deal-42"]
    assert saved[0]["title"] == "Berbera Beach Weekend"
    assert saved[0]["price"] == 120.0


async def test_saving_twice_is_409(client, deal, customer_headers):
    await client.post("/api/user/save-deal", json={"dealId": "deal-42"}, headers=customer_headers)
    response = await client.post("/api/user/save-deal", json={"dealId": "deal-42"}, headers=customer_headers)
    assert response.status_code == 409


async def test_saving_unknown_deal_is_404(client, customer_headers):
    response = await client.post("/api/user/save-deal", json={"dealId": "deal-0"}, headers=customer_headers)
    assert response.status_code == 404


async def test_user_endpoints_need_a_token(client):
    assert (await client.get("/api/user/saved-deals")).status_code == 401
    response = await client.get("/api/user/notifications", headers={"Authorization": "Bearer junk"})
    assert response.status_code == 401


async def test_notifications_and_mark_read(client, db, customer, customer_headers):
    notification = await notification_service.create_notification(
        db, customer.id, "Hot deal", "Berbera is 20% off", notification_service.DEAL
    )
    await db.commit()

    listed = (await client.get("/api/user/notifications", headers=customer_headers)).json()
    assert [n["id"] for n in listed] == [notification.id]
    assert listed[0]["isRead"] is False

    response = await client.patch(
        f"/api/user/notifications/{notification.id}/read", headers=customer_headers
    )
    assert response.status_code == 200
    listed = (await client.get("/api/user/notifications", headers=customer_headers)).json()
    assert listed[0]["isRead"] is True


async def test_mark_read_of_unknown_notification_is_404(client, customer_headers):
    response = await client.patch("/api/user/notifications/notif-0/read", headers=customer_headers)
    assert response.status_code == 404
