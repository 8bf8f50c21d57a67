def test_read_main(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "CreatorStays API"

def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

def test_request_id_header(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

def test_request_id_generated(client):
    response = client.get("/health")
    assert len(response.headers["X-Request-ID"]) == 36
