import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import database
from backend.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=database.engine)
    Base.metadata.create_all(bind=database.engine)
    yield
    Base.metadata.drop_all(bind=database.engine)


def signup_and_login(client: TestClient, username: str) -> dict:
    response = client.post(
        "/api/auth/signup",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "secret1",
            "confirm_password": "secret1",
        },
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_catalog_requires_authentication():
    client = TestClient(app)
    assert client.get("/api/services").status_code == 401
    assert client.post("/api/packages", json={"name": "X", "price": "10.00"}).status_code == 401


def test_service_crud():
    client = TestClient(app)
    headers = signup_and_login(client, "svc")

    assert client.get("/api/services", headers=headers).json() == []
    created = client.post("/api/services", json={"name": "Logo Design", "unit_price": "150.00"}, headers=headers)
    assert created.status_code == 201
    service = created.json()
    assert service["name"] == "Logo Design"
    assert service["unit_price"] == "150.00"

    updated = client.put(f"/api/services/{service['id']}", json={"unit_price": "175.50"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["unit_price"] == "175.50"
    assert updated.json()["name"] == "Logo Design"

    deleted = client.delete(f"/api/services/{service['id']}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True}
    assert client.delete(f"/api/services/{service['id']}", headers=headers).status_code == 404


def test_service_rejects_non_positive_price():
    client = TestClient(app)
    headers = signup_and_login(client, "badprice")
    response = client.post("/api/services", json={"name": "Free", "unit_price": "0"}, headers=headers)
    assert response.status_code == 422


def test_services_are_owner_scoped():
    client = TestClient(app)
    headers_a = signup_and_login(client, "ownera")
    headers_b = signup_and_login(client, "ownerb")

    service = client.post("/api/services", json={"name": "A only", "unit_price": "10.00"}, headers=headers_a).json()
    client.post("/api/services", json={"name": "B only", "unit_price": "20.00"}, headers=headers_b)

    assert [s["name"] for s in client.get("/api/services", headers=headers_a).json()] == ["A only"]
    assert [s["name"] for s in client.get("/api/services", headers=headers_b).json()] == ["B only"]
    assert client.put(f"/api/services/{service['id']}", json={"name": "Stolen"}, headers=headers_b).status_code == 404
    assert client.delete(f"/api/services/{service['id']}", headers=headers_b).status_code == 404


def test_package_crud_keeps_bundle():
    client = TestClient(app)
    headers = signup_and_login(client, "pkg")
    created = client.post(
        "/api/packages",
        json={"name": "Starter", "price": "499.00", "services": [{"name": "Logo", "quantity": 1}, {"name": "Website"}]},
        headers=headers,
    )
    assert created.status_code == 201
    package = created.json()
    assert package["services"] == [{"name": "Logo", "quantity": 1}, {"name": "Website", "quantity": None}]

    updated = client.put(f"/api/packages/{package['id']}", json={"price": "549.00"}, headers=headers)
    assert updated.json()["price"] == "549.00"
    assert len(updated.json()["services"]) == 2
    assert client.delete(f"/api/packages/{package['id']}", headers=headers).json() == {"success": True}


def test_company_profile_crud():
    client = TestClient(app)
    headers = signup_and_login(client, "company")
    created = client.post(
        "/api/company-profiles",
        json={
            "name": "Studio LLC",
            "email": "billing@studio.example.com",
            "address": "1 Main Street",
            "custom_fields": [{"name": "VAT", "value": "GB123"}],
        },
        headers=headers,
    )
    assert created.status_code == 201
    profile = created.json()
    assert profile["custom_fields"] == [{"name": "VAT", "value": "GB123"}]

    bad_email = client.post("/api/company-profiles", json={"name": "X", "email": "not-an-email"}, headers=headers)
    assert bad_email.status_code == 422

    updated = client.put(f"/api/company-profiles/{profile['id']}", json={"tagline": "We ship"}, headers=headers)
    assert updated.json()["tagline"] == "We ship"
    assert client.get("/api/company-profiles", headers=headers).json()[0]["name"] == "Studio LLC"


def test_payment_methods_and_presets():
    client = TestClient(app)
    headers = signup_and_login(client, "payments")

    presets = {preset["type"]: preset["fields"] for preset in client.get("/api/payment-methods/presets").json()}
    assert presets["bank"] == ["Bank Name", "Account Name", "Account Number", "Routing Number"]
    assert presets["card"] == ["Cardholder Name", "Card Number", "Expiry Date"]
    assert presets["crypto"] == ["Wallet Type", "Wallet Address"]
    assert presets["custom"] == []

    created = client.post(
        "/api/payment-methods",
        json={"type": "bank", "name": "Main account", "fields": {"Bank Name": "First Bank"}},
        headers=headers,
    )
    assert created.status_code == 201
    method = created.json()
    assert method["type"] == "bank"

    invalid = client.post("/api/payment-methods", json={"type": "cheque", "name": "X"}, headers=headers)
    assert invalid.status_code == 422

    assert client.delete(f"/api/payment-methods/{method['id']}", headers=headers).json() == {"success": True}
    assert client.get("/api/payment-methods", headers=headers).json() == []


def test_null_for_required_field_is_rejected():
    client = TestClient(app)
    headers = signup_and_login(client, "nullname")
    service = client.post("/api/services", json={"name": "Hosting", "unit_price": "12.00"}, headers=headers).json()

    response = client.put(f"/api/services/{service['id']}", json={"name": None}, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"detail": "name cannot be empty"}
    assert client.get("/api/services", headers=headers).json()[0]["name"] == "Hosting"
