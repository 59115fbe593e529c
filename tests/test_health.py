from unittest.mock import patch


def test_health_endpoint(client):
    """Test health check endpoint."""
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["service"] == "fitcoach-api"


def test_health_endpoint_database_down(client):
    """Test health check reports 503 when the database is unreachable."""
    with patch("fitcoach.api.endpoints.health.check_database_health", return_value=False):
        response = client.get("/api/v1/health")
    assert response.status_code == 503


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Welcome to FitCoach API"
