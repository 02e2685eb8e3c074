# tests/test_health.py
from fastapi import status


def test_health_check(client) -> None:
    """The health endpoint reports the service as up."""
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_root_describes_service(client) -> None:
    """The root endpoint names the service and points at the docs."""
    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["name"] == "Niche Communities"
    assert data["docs"] == "/docs"
