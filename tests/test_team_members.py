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


def register_owner(client: TestClient, username: str) -> dict:
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


def add_member(client: TestClient, owner_headers: dict, email: str, **flags) -> dict:
    response = client.post(
        "/api/team-members",
        json={"email": email, "password": "member1", "full_name": "Team Mate", **flags},
        headers=owner_headers,
    )
    assert response.status_code == 201
    return response.json()


def login_member(email: str) -> dict:
    response = TestClient(app).post("/api/auth/login", json={"email": email, "password": "member1"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _invoice_payload(client_name: str) -> dict:
    return {
        "client_name": client_name,
        "items": [{"type": "service", "name": "Support", "unit_price": "40.00"}],
    }


def test_owner_manages_team_members():
    client = TestClient(app)
    owner = register_owner(client, "teamowner")
    member = add_member(client, owner, "mate@example.com", can_create_invoices=True)
    assert member["role"] == "Member"
    assert member["can_create_invoices"] is True
    assert member["can_delete_invoices"] is False
    assert member["is_active"] is True

    updated = client.put(f"/api/team-members/{member['id']}", json={"role": "Accountant"}, headers=owner)
    assert updated.json()["role"] == "Accountant"
    assert len(client.get("/api/team-members", headers=owner).json()) == 1

    assert client.delete(f"/api/team-members/{member['id']}", headers=owner).json() == {"success": True}
    assert client.get("/api/team-members", headers=owner).json() == []


def test_member_email_must_be_unique():
    client = TestClient(app)
    owner = register_owner(client, "uniqueowner")
    add_member(client, owner, "dup@example.com")
    again = client.post("/api/team-members", json={"email": "dup@example.com", "password": "member1"}, headers=owner)
    assert again.status_code == 409
    owner_email = client.post(
        "/api/team-members",
        json={"email": "uniqueowner@example.com", "password": "member1"},
        headers=owner,
    )
    assert owner_email.status_code == 409


def test_member_acts_on_owner_data_with_capabilities():
    client = TestClient(app)
    owner = register_owner(client, "capowner")
    client.post("/api/services", json={"name": "Audit", "unit_price": "90.00"}, headers=owner)
    add_member(client, owner, "limited@example.com")
    member = login_member("limited@example.com")

    me = client.get("/api/auth/me", headers=member).json()
    assert me["team_member_id"] is not None
    assert me["account"]["username"] == "capowner"

    assert [s["name"] for s in client.get("/api/services", headers=member).json()] == ["Audit"]
    denied = client.post("/api/services", json={"name": "New", "unit_price": "5.00"}, headers=member)
    assert denied.status_code == 403
    assert client.post("/api/invoices", json=_invoice_payload("X"), headers=member).status_code == 403
    assert client.get("/api/team-members", headers=member).status_code == 403
    assert client.put("/api/auth/profile", json={"username": "hijack"}, headers=member).status_code == 403


def test_member_invoices_are_tagged_and_scoped():
    client = TestClient(app)
    owner = register_owner(client, "scopeowner")
    client.post("/api/invoices", json=_invoice_payload("Owner Client"), headers=owner)
    add_member(
        client,
        owner,
        "scoped@example.com",
        can_create_invoices=True,
        can_view_only_assigned_invoices=True,
    )
    member = login_member("scoped@example.com")

    created = client.post("/api/invoices", json=_invoice_payload("Member Client"), headers=member)
    assert created.status_code == 201
    assert created.json()["created_by"] == client.get("/api/auth/me", headers=member).json()["team_member_id"]

    assert [i["client_name"] for i in client.get("/api/invoices", headers=member).json()] == ["Member Client"]
    assert len(client.get("/api/invoices", headers=owner).json()) == 2

    owner_invoice = [i for i in client.get("/api/invoices", headers=owner).json() if i["client_name"] == "Owner Client"][0]
    assert client.get(f"/api/invoices/{owner_invoice['id']}", headers=member).status_code == 404
    assert client.delete(f"/api/invoices/{created.json()['id']}", headers=member).status_code == 403


def test_deactivated_member_cannot_log_in():
    client = TestClient(app)
    owner = register_owner(client, "deactowner")
    member = add_member(client, owner, "gone@example.com")
    member_headers = login_member("gone@example.com")

    client.put(f"/api/team-members/{member['id']}", json={"is_active": False}, headers=owner)
    response = TestClient(app).post("/api/auth/login", json={"email": "gone@example.com", "password": "member1"})
    assert response.status_code == 403
    assert client.get("/api/services", headers=member_headers).status_code == 401


def test_delegated_team_manager():
    client = TestClient(app)
    owner = register_owner(client, "delegowner")
    add_member(client, owner, "manager@example.com", can_manage_team_members=True)
    manager = login_member("manager@example.com")

    created = client.post("/api/team-members", json={"email": "new@example.com", "password": "member1"}, headers=manager)
    assert created.status_code == 201
    assert len(client.get("/api/team-members", headers=owner).json()) == 2
