from __future__ import annotations

import datetime as dt

import jwt
from fastapi.testclient import TestClient

from apps.api.config import AppConfig
from apps.api.db.models import MONTHLY_TARGET_KEY
from apps.api.db.session import SalesDatabase
from apps.api.main import create_app
from apps.api.stores import SettingsStore

SECRET = "test-secret"


def _create_test_client(tmp_path, **overrides) -> TestClient:
    config = AppConfig(
        db_path=tmp_path / "sales.db",
        jwt_secret=SECRET,
        backup_dir=tmp_path / "backups",
        backup_enabled=False,
        **overrides,
    )
    return TestClient(create_app(config))


def _login(client: TestClient, password: str = "admin123") -> dict:
    response = client.post("/api/auth/login", json={"username": "admin", "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


def test_login_and_verify(tmp_path):
    client = _create_test_client(tmp_path)

    response = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    assert response.status_code == 401

    response = client.post("/api/auth/login", json={"username": "", "password": ""})
    assert response.status_code == 400

    headers = _login(client)
    response = client.get("/api/auth/verify", headers=headers)
    assert response.status_code == 200
    assert response.json()["user"]["username"] == "admin"


def test_protected_routes_require_valid_token(tmp_path):
    client = _create_test_client(tmp_path)

    assert client.get("/api/profiles").status_code == 401

    response = client.get("/api/profiles", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 403

    now = dt.datetime.now(dt.timezone.utc)
    expired = jwt.encode(
        {"id": 1, "username": "admin", "exp": int((now - dt.timedelta(minutes=1)).timestamp())},
        SECRET,
        algorithm="HS256",
    )
    response = client.get("/api/profiles", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 403


def test_token_is_valid_for_seven_days(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)

    token = headers["Authorization"].split(" ", 1)[1]
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert payload["username"] == "admin"
    assert payload["exp"] - payload["iat"] == 7 * 24 * 3600


def test_sales_flow_from_entry_to_dashboard(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)

    response = client.get("/api/profiles", params={"active": "true"}, headers=headers)
    assert response.status_code == 200
    profiles = response.json()["profiles"]
    assert [p["name"] for p in profiles] == ["@judourado.shop", "@mariadourado.shop"]
    first, second = profiles[0]["id"], profiles[1]["id"]

    response = client.post(
        "/api/sales",
        json={
            "date": "2024-01-01",
            "sales": [{"profileId": first, "amount": 100}, {"profileId": second, "amount": "50.5"}],
            "notes": "promo",
        },
        headers=headers,
    )
    assert response.status_code == 200
    assert len(response.json()["ids"]) == 2

    response = client.post(
        "/api/sales",
        json={"date": "2024-01-01", "sales": [{"profileId": first, "amount": 120}]},
        headers=headers,
    )
    assert response.status_code == 200

    response = client.get(
        "/api/sales",
        params={"startDate": "2024-01-01", "endDate": "2024-01-31"},
        headers=headers,
    )
    assert response.status_code == 200
    sales = response.json()["sales"]
    assert [(s["profile_name"], s["amount"]) for s in sales] == [
        ("@judourado.shop", 120.0),
        ("@mariadourado.shop", 50.5),
    ]

    response = client.get("/api/sales/date/2024-01-01", headers=headers)
    assert len(response.json()["sales"]) == 2

    response = client.get(
        "/api/stats/dashboard",
        params={"startDate": "2024-01-01", "endDate": "2024-01-31"},
        headers=headers,
    )
    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["totalSales"] == 170.5
    assert stats["monthlyTarget"] == 15000.0
    assert [(p["name"], p["total"]) for p in stats["salesByProfile"]] == [
        ("@judourado.shop", 120.0),
        ("@mariadourado.shop", 50.5),
    ]

    entry_id = sales[1]["id"]
    assert client.delete(f"/api/sales/{entry_id}", headers=headers).status_code == 200
    assert client.delete(f"/api/sales/{entry_id}", headers=headers).status_code == 200


def test_sales_errors_map_to_status_codes(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)

    response = client.post(
        "/api/sales",
        json={"date": "2024-13-01", "sales": [{"profileId": 1, "amount": 1}]},
        headers=headers,
    )
    assert response.status_code == 400
    assert "error" in response.json()

    response = client.post(
        "/api/sales",
        json={"date": "2024-01-01", "sales": [{"profileId": 999, "amount": 1}]},
        headers=headers,
    )
    assert response.status_code == 404

    response = client.get("/api/sales", params={"startDate": "2024-01-01"}, headers=headers)
    assert response.status_code == 422


def test_profile_crud(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)

    response = client.post("/api/profiles", json={"name": " @new.shop ", "color": "#123456"}, headers=headers)
    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["name"] == "@new.shop"

    response = client.post("/api/profiles", json={"name": "@new.shop"}, headers=headers)
    assert response.status_code == 409

    response = client.post("/api/profiles", json={"name": ""}, headers=headers)
    assert response.status_code == 400

    response = client.put(f"/api/profiles/{profile['id']}", json={"name": "@renamed.shop"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["profile"]["color"] == "#123456"

    assert client.get("/api/profiles/999", headers=headers).status_code == 404
    assert client.put("/api/profiles/999", json={"name": "x"}, headers=headers).status_code == 404

    assert client.delete(f"/api/profiles/{profile['id']}", headers=headers).status_code == 200
    response = client.get("/api/profiles", params={"active": "true"}, headers=headers)
    assert "@renamed.shop" not in [p["name"] for p in response.json()["profiles"]]
    response = client.get(f"/api/profiles/{profile['id']}", headers=headers)
    assert response.json()["profile"]["active"] is False


def test_monthly_target_settings(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)

    assert client.get("/api/settings/target", headers=headers).json()["target"] == 15000.0

    response = client.post("/api/settings/target", json={"target": 0}, headers=headers)
    assert response.status_code == 400

    response = client.post("/api/settings/target", json={"target": 20000}, headers=headers)
    assert response.status_code == 200
    assert client.get("/api/settings/target", headers=headers).json()["target"] == 20000.0


def test_change_password(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)

    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "admin123", "newPassword": "123"},
        headers=headers,
    )
    assert response.status_code == 400

    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "wrong", "newPassword": "secret99"},
        headers=headers,
    )
    assert response.status_code == 401

    response = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "admin123", "newPassword": "secret99"},
        headers=headers,
    )
    assert response.status_code == 200
    _login(client, password="secret99")


def test_export_csv_download(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)
    client.post(
        "/api/sales",
        json={"date": "2024-01-01", "sales": [{"profileId": 1, "amount": 10}], "notes": 'a "b"'},
        headers=headers,
    )

    response = client.get(
        "/api/export/csv",
        params={"startDate": "2024-01-01", "endDate": "2024-01-31"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "sales_2024-01-01_2024-01-31.csv" in response.headers["content-disposition"]
    assert response.content.startswith(b"\xef\xbb\xbf")
    assert '"a ""b"""' in response.content.decode("utf-8-sig")


def test_manual_backup(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)

    response = client.post("/api/backup", headers=headers)

    assert response.status_code == 200
    assert (tmp_path / "backups" / response.json()["file"]).exists()


def test_rate_limit_applies_to_api_routes(tmp_path):
    client = _create_test_client(tmp_path, rate_limit_max=2)

    assert client.get("/api/profiles").status_code == 401
    assert client.get("/api/profiles").status_code == 401
    assert client.get("/api/profiles").status_code == 429
    assert client.get("/health").status_code == 200


def _store_target(tmp_path, value: str) -> None:
    SettingsStore(SalesDatabase(tmp_path / "sales.db")).set(MONTHLY_TARGET_KEY, value)


def test_zero_stored_target_maps_to_conflict(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)
    _store_target(tmp_path, "0")

    response = client.get("/api/stats/dashboard", headers=headers)

    assert response.status_code == 409
    assert "error" in response.json()


def test_amount_above_ceiling_is_rejected(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)

    response = client.post(
        "/api/sales",
        json={"date": "2024-01-01", "sales": [{"profileId": 1, "amount": "1e30"}]},
        headers=headers,
    )
    assert response.status_code == 400
    assert "error" in response.json()

    response = client.post("/api/settings/target", json={"target": "1e30"}, headers=headers)
    assert response.status_code == 400


def test_extreme_stored_targets_still_render(tmp_path):
    client = _create_test_client(tmp_path)
    headers = _login(client)

    _store_target(tmp_path, "1e30")
    response = client.get("/api/settings/target", headers=headers)
    assert response.status_code == 200
    assert response.json()["target"] == 1e30

    today = dt.date.today().isoformat()
    client.post("/api/sales", json={"date": today, "sales": [{"profileId": 1, "amount": 100}]}, headers=headers)
    _store_target(tmp_path, "1e-30")
    response = client.get("/api/stats/dashboard", headers=headers)
    assert response.status_code == 200
    assert response.json()["stats"]["targetProgressPercent"] == 1e34


def test_no_html_pages_are_served(tmp_path):
    client = _create_test_client(tmp_path)

    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").status_code == 404
    assert client.get("/login").status_code == 404
