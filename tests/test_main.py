import inspect

from fastapi.routing import APIRoute
from fastapi.testclient import TestClient
from backend.app.main import app

client = TestClient(app)


def test_read_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"app": "Invoice Studio", "status": "ok"}


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route_returns_404():
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404


def test_api_handlers_are_synchronous():
    api_routes = [route for route in app.routes if isinstance(route, APIRoute) and route.path.startswith("/api")]
    assert any(route.path.startswith("/api/templates") for route in api_routes)
    assert [route.path for route in api_routes if inspect.iscoroutinefunction(route.endpoint)] == []
