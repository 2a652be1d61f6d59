# tests/test_health.py
from fastapi import status


def test_health(client) -> None:
    """The health endpoint reports ok."""
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_root_describes_service(client) -> None:
    """The root endpoint names the service and its docs."""
    data = client.get("/").json()
    assert data["name"] == "BrainScript Stage"
    assert data["docs"] == "/docs"
