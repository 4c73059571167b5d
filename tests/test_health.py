"""
Health endpoint tests.
"""


def test_health_endpoint(client):
    """Test that the /health endpoint returns 200 OK."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["status"] == "healthy"
    assert data["data"]["service"] == "Clinic Queue"
    assert "timestamp" in data["data"]
    assert "version" in data["data"]
    assert "X-Process-Time" in response.headers


def test_health_ready_endpoint(client):
    """In-memory backend is always ready."""
    response = client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "ready"
    assert data["checks"] == {"backend": "memory", "database": "in_memory"}


def test_root_endpoint(client):
    """Test that the root endpoint returns API information."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["service"] == "Clinic Queue"
    assert data["health"] == "/health"
    assert "version" in data
