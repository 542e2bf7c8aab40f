from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from fresh_laundry.core.config import Settings
from fresh_laundry.main import create_app


def register(client, path="/api/register", name="Jane", email="jane@example.com", password="pw"):
    return client.post(path, json={"name": name, "email": email, "password": password})


def order_payload(user_id, items=None, total_price=24.0):
    return {
        "user_id": user_id,
        "pickup_date": "2026-10-20",
        "pickup_time": "09:00 - 11:00",
        "delivery_option": "express",
        "total_price": total_price,
        "items": items if items is not None else [
            {"categoryId": 2, "id": 11, "title": "Shirt", "quantity": 3, "pricePerUnit": 4.0},
            {"id": 12, "title": "Trousers", "quantity": 2, "pricePerUnit": 6.0},
        ],
    }


@pytest.fixture
def user_id(client):
    return register(client).json()["user"]["id"]


# ============================================================================
# Accounts
# ============================================================================

class TestRegistration:

    def test_register_user(self, client):
        res = register(client)
        assert res.status_code == 201
        body = res.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "jane@example.com"
        assert "password" not in body["user"]

    def test_register_admin(self, client):
        res = register(client, "/api/admin/register", name="Boss", email="boss@example.com")
        assert res.status_code == 201
        assert res.json()["message"] == "Admin registered successfully"
        assert res.json()["admin"]["name"] == "Boss"

    @pytest.mark.parametrize("path,message", [
        ("/api/register", "User already exists."),
        ("/api/admin/register", "Admin email already exists."),
    ])
    def test_duplicate_email(self, client, path, message):
        assert register(client, path).status_code == 201
        res = register(client, path)
        assert res.status_code == 409
        assert res.json() == {"message": message}

    @pytest.mark.parametrize("path", ["/api/register", "/api/admin/register"])
    def test_missing_field(self, client, path):
        res = client.post(path, json={"email": "jane@example.com", "password": "pw"})
        assert res.status_code == 400
        assert res.json()["message"] == "Please provide name, email, and password."

    @pytest.mark.parametrize("path", ["/api/register", "/api/admin/register"])
    def test_empty_email(self, client, path):
        res = register(client, path, email="")
        assert res.status_code == 400
        assert res.json() == {"message": "Please provide name, email, and password."}

    @pytest.mark.parametrize("email", ["Jane@Example.COM", "admin@localhost"])
    def test_email_echoed_as_sent(self, client, email):
        res = register(client, email=email)
        assert res.status_code == 201
        assert res.json()["user"]["email"] == email


class TestLogin:

    def test_user_login(self, client, app):
        register(client)
        res = client.post("/api/login", json={"email": "jane@example.com", "password": "pw"})
        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "Login successful"
        assert body["user"]["name"] == "Jane"
        claims = app.state.token_issuer.verify(body["token"])
        assert claims["email"] == "jane@example.com"
        assert "role" not in claims

    def test_admin_login_token_has_role(self, client, app):
        register(client, "/api/admin/register", email="boss@example.com")
        res = client.post("/api/admin/login", json={"email": "boss@example.com", "password": "pw"})
        assert res.status_code == 200
        assert res.json()["message"] == "Admin login successful"
        assert app.state.token_issuer.verify(res.json()["token"])["role"] == "admin"

    @pytest.mark.parametrize("path,message", [
        ("/api/login", "Invalid credentials"),
        ("/api/admin/login", "Invalid admin credentials"),
    ])
    def test_no_enumeration_signal(self, client, path, message):
        register(client, path.replace("login", "register"), email="a@example.com", password="right")
        wrong = client.post(path, json={"email": "a@example.com", "password": "wrong"})
        missing = client.post(path, json={"email": "missing@example.com", "password": "anything"})
        assert wrong.status_code == missing.status_code == 401
        assert wrong.json() == missing.json() == {"message": message}

    @pytest.mark.parametrize("path,message", [
        ("/api/login", "Invalid credentials"),
        ("/api/admin/login", "Invalid admin credentials"),
    ])
    def test_non_email_login_is_plain_unauthorized(self, client, path, message):
        register(client, path.replace("login", "register"), email="a@example.com", password="right")
        wrong = client.post(path, json={"email": "a@example.com", "password": "wrong"})
        odd = client.post(path, json={"email": "nobody", "password": "anything"})
        assert odd.status_code == 401
        assert odd.json() == wrong.json() == {"message": message}

    @pytest.mark.parametrize("path,seconds", [
        ("/api/login", 3600),
        ("/api/admin/login", 7200),
    ])
    def test_token_lifetime(self, client, app, path, seconds):
        register(client, path.replace("login", "register"), email="ttl@example.com")
        token = client.post(path, json={"email": "ttl@example.com", "password": "pw"}).json()["token"]
        remaining = app.state.token_issuer.verify(token)["exp"] - datetime.now(timezone.utc).timestamp()
        assert seconds - 60 < remaining <= seconds


# ============================================================================
# Orders
# ============================================================================

class TestOrders:

    def test_place_and_fetch(self, client, user_id):
        res = client.post("/api/place_order", json=order_payload(user_id))
        assert res.status_code == 201
        assert res.json()["message"] == "Order placed successfully"
        order_id = res.json()["orderId"]

        order = client.get(f"/api/orders/{order_id}").json()
        assert order["client_name"] == "Jane"
        assert order["status"] == "pending"
        assert order["pickup_date"] == "2026-10-20"
        assert order["total_price"] == 24.0
        assert order["items"] == [
            {"categoryId": 2, "id": 11, "title": "Shirt", "quantity": 3, "pricePerUnit": 4.0},
            {"categoryId": 1, "id": 12, "title": "Trousers", "quantity": 2, "pricePerUnit": 6.0},
        ]

    @pytest.mark.parametrize("items", [[], None])
    def test_empty_order(self, client, user_id, items):
        payload = order_payload(user_id)
        if items is None:
            del payload["items"]
        else:
            payload["items"] = items
        res = client.post("/api/place_order", json=payload)
        assert res.status_code == 400
        assert res.json() == {"message": "Cannot place an empty order."}
        assert client.get("/api/orders").json() == []

    def test_storage_failure_reports_rollback(self, client):
        res = client.post("/api/place_order", json=order_payload(4242))
        assert res.status_code == 500
        body = res.json()
        assert body["message"] == "Failed to place order. Database rollback occurred."
        assert body["error"]
        assert client.get("/api/orders").json() == []

    def test_list_newest_first(self, client, user_id):
        first = client.post("/api/place_order", json=order_payload(user_id)).json()["orderId"]
        second = client.post("/api/place_order", json=order_payload(user_id)).json()["orderId"]
        orders = client.get("/api/orders").json()
        assert [o["id"] for o in orders] == [second, first]
        assert all(len(o["items"]) == 2 for o in orders)

    def test_order_not_found(self, client):
        res = client.get("/api/orders/999")
        assert res.status_code == 404
        assert res.json() == {"message": "Order not found"}

    def test_update_status(self, client, user_id):
        order_id = client.post("/api/place_order", json=order_payload(user_id)).json()["orderId"]
        res = client.put(f"/api/orders/{order_id}/status", json={"status": "in wash"})
        assert res.status_code == 200
        assert res.json() == {"success": True, "message": "Order status updated to in wash"}
        assert client.get(f"/api/orders/{order_id}").json()["status"] == "in wash"

    def test_update_status_invalid(self, client, user_id):
        order_id = client.post("/api/place_order", json=order_payload(user_id)).json()["orderId"]
        res = client.put(f"/api/orders/{order_id}/status", json={"status": "bogus"})
        assert res.status_code == 400
        assert res.json() == {"message": "Invalid status value"}
        assert client.get(f"/api/orders/{order_id}").json()["status"] == "pending"

    def test_update_status_missing_order(self, client):
        res = client.put("/api/orders/999/status", json={"status": "finished"})
        assert res.status_code == 404


class TestDashboard:

    def test_stats(self, client, user_id):
        ids = [
            client.post("/api/place_order", json=order_payload(user_id, total_price=price)).json()["orderId"]
            for price in (10.0, 20.0, 40.0)
        ]
        client.put(f"/api/orders/{ids[1]}/status", json={"status": "cancelled"})
        client.put(f"/api/orders/{ids[2]}/status", json={"status": "finished"})

        res = client.get("/api/dashboard/stats")
        assert res.status_code == 200
        assert res.json() == {"pending": 1, "in_wash": 0, "finished": 1, "total_revenue": 50.0}

    def test_unexpected_error_is_generic(self, app, monkeypatch):
        def explode():
            raise RuntimeError("connection string leaked here")

        monkeypatch.setattr(app.state.stats_service, "get_stats", explode)
        with TestClient(app, raise_server_exceptions=False) as client:
            res = client.get("/api/dashboard/stats")
        assert res.status_code == 500
        assert res.json() == {"message": "Internal server error"}


def test_health(client):
    assert client.get("/").json() == {"status": "ok", "app": "Fresh Laundry API"}


# ============================================================================
# Opt-in admin token gate
# ============================================================================

class TestEnforcedAdminAuth:

    @pytest.fixture
    def client(self, tmp_path):
        settings = Settings(
            DATABASE_URL=f"sqlite:///{tmp_path / 'secured.db'}",
            SECRET_KEY="test-secret",
            BCRYPT_ROUNDS=4,
            ENFORCE_ADMIN_AUTH=True,
        )
        with TestClient(create_app(settings)) as c:
            yield c

    def login(self, client, path):
        register(client, path.replace("login", "register"), email="who@example.com")
        return client.post(path, json={"email": "who@example.com", "password": "pw"}).json()["token"]

    def test_missing_token(self, client):
        res = client.get("/api/orders")
        assert res.status_code == 401
        assert res.json() == {"message": "Missing token"}
        assert res.headers["WWW-Authenticate"] == "Bearer"

    def test_user_token_forbidden(self, client):
        token = self.login(client, "/api/login")
        res = client.get("/api/dashboard/stats", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 403

    def test_admin_token_allowed(self, client):
        token = self.login(client, "/api/admin/login")
        res = client.get("/api/orders", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 200
        assert res.json() == []

    def test_garbage_token(self, client):
        res = client.get("/api/orders", headers={"Authorization": "Bearer not.a.token"})
        assert res.status_code == 401
        assert res.headers["WWW-Authenticate"] == "Bearer"

    def test_place_order_stays_open(self, client):
        user_id = register(client).json()["user"]["id"]
        assert client.post("/api/place_order", json=order_payload(user_id)).status_code == 201
