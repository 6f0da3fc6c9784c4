import pytest
from decimal import Decimal

from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import database
from backend.app.main import app
from backend.app.models.invoice import Invoice
from backend.app.services import invoice_composer
from backend.app.services.billing import round_money


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=database.engine)
    Base.metadata.create_all(bind=database.engine)
    yield
    Base.metadata.drop_all(bind=database.engine)


def register_and_login(client: TestClient, username: str) -> dict:
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


def _create_service(client, headers, name="Web Design", price="200.00"):
    return client.post("/api/services", json={"name": name, "unit_price": price}, headers=headers).json()


def _invoice_payload(service_id, **overrides):
    payload = {
        "client_name": "Acme Corp",
        "client_email": "ap@acme.example.com",
        "items": [{"type": "service", "catalog_id": service_id, "quantity": 1}],
        "tax_percentage": "10",
        "discount_type": "percentage",
        "discount_value": "5",
    }
    payload.update(overrides)
    return payload


def _invoice_count():
    db = database.session()
    try:
        return db.query(Invoice).count()
    finally:
        db.close()


def test_create_invoice_computes_totals():
    client = TestClient(app)
    headers = register_and_login(client, "inv1")
    service = _create_service(client, headers)

    resp = client.post("/api/invoices", json=_invoice_payload(service["id"]), headers=headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["invoice_number"].startswith("INV-")
    assert data["subtotal"] == "200.00"
    assert data["tax_amount"] == "20.00"
    assert data["discount_amount"] == "10.00"
    assert data["total"] == "210.00"
    assert data["status"] == "draft"
    assert data["created_by"] is None
    assert data["items"][0]["name"] == "Web Design"
    assert data["items"][0]["total"] == "200.00"


def test_invoice_keeps_price_after_catalog_change():
    client = TestClient(app)
    headers = register_and_login(client, "inv2")
    service = _create_service(client, headers, price="50.00")
    invoice = client.post("/api/invoices", json=_invoice_payload(service["id"]), headers=headers).json()

    client.put(f"/api/services/{service['id']}", json={"unit_price": "75.00"}, headers=headers)
    reloaded = client.get(f"/api/invoices/{invoice['id']}", headers=headers).json()
    assert reloaded["items"][0]["unit_price"] == "50.00"
    assert reloaded["subtotal"] == "50.00"


def test_snapshot_lines_are_recomputed():
    client = TestClient(app)
    headers = register_and_login(client, "inv3")
    payload = {
        "client_name": "Snapshot Client",
        "items": [
            {"id": "service_abc", "type": "service", "name": "Hosting", "unit_price": "20.00", "quantity": 2, "total": "999"},
            {
                "type": "package",
                "name": "Bundle",
                "unit_price": "100.00",
                "time_period": 3,
                "package_services": [{"name": "Setup", "quantity": 1}],
            },
        ],
        "discount_type": "flat",
        "discount_value": "15",
    }
    data = client.post("/api/invoices", json=payload, headers=headers).json()
    assert data["items"][0]["id"] == "service_abc"
    assert data["items"][0]["total"] == "40.00"
    assert data["items"][1]["package_services"] == [{"name": "Setup", "quantity": 1}]
    assert data["subtotal"] == "340.00"
    assert data["total"] == "325.00"


def test_empty_items_rejected_without_write():
    client = TestClient(app)
    headers = register_and_login(client, "inv4")
    resp = client.post("/api/invoices", json={"client_name": "Nobody", "items": []}, headers=headers)
    assert resp.status_code == 400
    assert "detail" in resp.json()
    assert _invoice_count() == 0


def test_missing_client_name_rejected():
    client = TestClient(app)
    headers = register_and_login(client, "inv5")
    service = _create_service(client, headers)
    resp = client.post("/api/invoices", json=_invoice_payload(service["id"], client_name=""), headers=headers)
    assert resp.status_code == 400


def test_unknown_catalog_or_reference_is_404():
    client = TestClient(app)
    headers = register_and_login(client, "inv6")
    service = _create_service(client, headers)
    assert client.post("/api/invoices", json=_invoice_payload(9999), headers=headers).status_code == 404
    resp = client.post("/api/invoices", json=_invoice_payload(service["id"], template_id=9999), headers=headers)
    assert resp.status_code == 404
    assert _invoice_count() == 0


def test_duplicate_invoice_number_conflict():
    client = TestClient(app)
    headers = register_and_login(client, "inv7")
    service = _create_service(client, headers)
    payload = _invoice_payload(service["id"], invoice_number="INV-000777")
    assert client.post("/api/invoices", json=payload, headers=headers).status_code == 201
    second = client.post("/api/invoices", json=payload, headers=headers)
    assert second.status_code == 409
    assert _invoice_count() == 1


def test_list_invoices_filters_and_scoping():
    client = TestClient(app)
    headers = register_and_login(client, "inv8")
    other = register_and_login(client, "inv8other")
    service = _create_service(client, headers)
    other_service = _create_service(client, other)

    client.post("/api/invoices", json=_invoice_payload(service["id"], client_name="Globex", platform="Upwork"), headers=headers)
    client.post(
        "/api/invoices",
        json=_invoice_payload(service["id"], client_name="Initech", status="paid", invoice_number="INV-PAID01"),
        headers=headers,
    )
    client.post("/api/invoices", json=_invoice_payload(other_service["id"], client_name="Hidden"), headers=other)

    all_invoices = client.get("/api/invoices", headers=headers).json()
    assert [i["client_name"] for i in all_invoices] == ["Initech", "Globex"]

    assert [i["client_name"] for i in client.get("/api/invoices?status=paid", headers=headers).json()] == ["Initech"]
    assert [i["client_name"] for i in client.get("/api/invoices?search=upw", headers=headers).json()] == ["Globex"]
    assert [i["client_name"] for i in client.get("/api/invoices?search=paid01", headers=headers).json()] == ["Initech"]
    assert client.get("/api/invoices?start_date=2000-01-01&end_date=2000-01-31", headers=headers).json() == []
    assert len(client.get("/api/invoices?start_date=2000-01-01", headers=headers).json()) == 2

    hidden_id = client.get("/api/invoices", headers=other).json()[0]["id"]
    assert client.get(f"/api/invoices/{hidden_id}", headers=headers).status_code == 404


def test_update_invoice_overwrites_lines():
    client = TestClient(app)
    headers = register_and_login(client, "inv9")
    service = _create_service(client, headers, price="100.00")
    invoice = client.post("/api/invoices", json=_invoice_payload(service["id"]), headers=headers).json()

    payload = _invoice_payload(
        service["id"],
        client_name="Acme Renamed",
        items=[{"type": "service", "name": "Audit", "unit_price": "30.00", "quantity": 2}],
        tax_percentage="0",
        discount_value="0",
        status="sent",
    )
    resp = client.put(f"/api/invoices/{invoice['id']}", json=payload, headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["invoice_number"] == invoice["invoice_number"]
    assert data["client_name"] == "Acme Renamed"
    assert [item["name"] for item in data["items"]] == ["Audit"]
    assert data["total"] == "60.00"
    assert data["status"] == "sent"


def test_delete_invoice():
    client = TestClient(app)
    headers = register_and_login(client, "inv10")
    service = _create_service(client, headers)
    invoice = client.post("/api/invoices", json=_invoice_payload(service["id"]), headers=headers).json()

    resp = client.delete(f"/api/invoices/{invoice['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert client.get(f"/api/invoices/{invoice['id']}", headers=headers).status_code == 404
    assert client.delete(f"/api/invoices/{invoice['id']}", headers=headers).status_code == 404


def test_preview_renders_without_saving():
    client = TestClient(app)
    headers = register_and_login(client, "inv11")
    service = _create_service(client, headers)

    resp = client.post("/api/invoices/preview", json=_invoice_payload(service["id"]), headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["family"] == "professional"
    assert data["template_name"] == "Professional Grey"
    assert data["filename"] == "invoice-draft-Acme-Corp.pdf"
    assert _invoice_count() == 0


def test_document_uses_invoice_template_and_company_profile():
    client = TestClient(app)
    headers = register_and_login(client, "inv12")
    service = _create_service(client, headers)
    template = client.post(
        "/api/templates",
        json={"name": "Red", "family": "minimalist", "fields": [{"id": "1", "name": "description", "label": "Description"}]},
        headers=headers,
    ).json()
    profile = client.post(
        "/api/company-profiles",
        json={"name": "Studio LLC", "email": "hi@studio.example.com"},
        headers=headers,
    ).json()
    invoice = client.post(
        "/api/invoices",
        json=_invoice_payload(service["id"], template_id=template["id"], company_profile_id=profile["id"]),
        headers=headers,
    ).json()

    document = client.get(f"/api/invoices/{invoice['id']}/document", headers=headers)
    assert document.status_code == 200
    data = document.json()
    assert data["family"] == "minimalist"
    assert data["template_name"] == "Red"
    assert "Studio LLC" in document.text
    assert "No Company Profile Selected" not in document.text


def test_document_falls_back_to_default_template():
    client = TestClient(app)
    headers = register_and_login(client, "inv13")
    service = _create_service(client, headers)
    client.post("/api/templates", json={"name": "House style", "family": "minimalist", "is_default": True}, headers=headers)
    invoice = client.post("/api/invoices", json=_invoice_payload(service["id"]), headers=headers).json()

    data = client.get(f"/api/invoices/{invoice['id']}/document", headers=headers).json()
    assert data["template_name"] == "House style"
    assert "No Company Profile Selected" in str(data["root"])


def test_pdf_download():
    client = TestClient(app)
    headers = register_and_login(client, "inv14")
    service = _create_service(client, headers)
    invoice = client.post(
        "/api/invoices",
        json=_invoice_payload(service["id"], client_name="Jane Doe", invoice_number="INV-424242"),
        headers=headers,
    ).json()

    resp = client.get(f"/api/invoices/{invoice['id']}/pdf", headers=headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.headers["content-disposition"] == 'attachment; filename="invoice-INV-424242-Jane-Doe.pdf"'
    assert resp.content.startswith(b"%PDF")


def test_stored_amounts_match_stored_modifiers():
    client = TestClient(app)
    headers = register_and_login(client, "inv15")
    service = _create_service(client, headers, price="9999.99")
    payload = _invoice_payload(service["id"], tax_percentage="12.345", discount_value="3.333")
    payload["items"][0]["quantity"] = 10
    created = client.post("/api/invoices", json=payload, headers=headers).json()

    data = client.get(f"/api/invoices/{created['id']}", headers=headers).json()
    subtotal = Decimal(data["subtotal"])
    tax_rate = Decimal(data["tax_percentage"])
    discount_rate = Decimal(data["discount_value"])
    assert tax_rate == Decimal("12.35")
    assert discount_rate == Decimal("3.33")
    assert Decimal(data["tax_amount"]) == round_money(subtotal * tax_rate / 100)
    assert Decimal(data["discount_amount"]) == round_money(subtotal * discount_rate / 100)
    assert Decimal(data["total"]) == Decimal("109019.89")


def _numbers(*values):
    remaining = iter(values)
    return lambda: next(remaining)


def test_generated_number_collision_is_retried(monkeypatch):
    client = TestClient(app)
    headers = register_and_login(client, "inv16")
    service = _create_service(client, headers)
    monkeypatch.setattr(invoice_composer, "generate_invoice_number", _numbers("INV-500001", "INV-500001", "INV-500002"))

    first = client.post("/api/invoices", json=_invoice_payload(service["id"]), headers=headers)
    second = client.post("/api/invoices", json=_invoice_payload(service["id"], client_name="Globex"), headers=headers)
    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["invoice_number"] == "INV-500001"
    assert second.json()["invoice_number"] == "INV-500002"
    assert _invoice_count() == 2


def test_generated_number_collision_gives_up_after_retries(monkeypatch):
    client = TestClient(app)
    headers = register_and_login(client, "inv17")
    service = _create_service(client, headers)
    monkeypatch.setattr(invoice_composer, "generate_invoice_number", lambda: "INV-600001")

    assert client.post("/api/invoices", json=_invoice_payload(service["id"]), headers=headers).status_code == 201
    conflict = client.post("/api/invoices", json=_invoice_payload(service["id"]), headers=headers)
    assert conflict.status_code == 409
    assert conflict.json() == {"detail": "Invoice number INV-600001 already exists"}
    assert _invoice_count() == 1


def test_preview_without_number_shows_placeholder():
    client = TestClient(app)
    headers = register_and_login(client, "inv18")
    service = _create_service(client, headers)

    professional = client.post("/api/invoices/preview", json=_invoice_payload(service["id"]), headers=headers).json()
    assert "INVOICE NUMBER • Not specified" in str(professional["root"])

    template = client.post("/api/templates", json={"name": "Red", "family": "minimalist"}, headers=headers).json()
    minimalist = client.post(
        "/api/invoices/preview",
        json=_invoice_payload(service["id"], template_id=template["id"]),
        headers=headers,
    ).json()
    assert "INVOICE NO: Not specified" in str(minimalist["root"])

    numbered = client.post(
        "/api/invoices/preview",
        json=_invoice_payload(service["id"], invoice_number="INV-777001"),
        headers=headers,
    ).json()
    assert "INVOICE NO: INV-777001" in str(numbered["root"])
    assert "Not specified" not in str(numbered["root"])
