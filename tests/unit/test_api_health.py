from fastapi.testclient import TestClient


def test_health_endpoint_returns_service_metadata(test_client: TestClient) -> None:
    response = test_client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["service"]
    assert payload["status"] == "ok"
    assert payload["datastores"]["postgres"] == {"status": "ok"}
    assert "X-Request-ID" in response.headers


def test_request_id_is_echoed(test_client: TestClient) -> None:
    response = test_client.get("/health", headers={"X-Request-ID": "req-abc"})

    assert response.headers["X-Request-ID"] == "req-abc"
