"""Integration tests for status, probes, metrics and the availability gate."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from courier import __version__
from courier.application import create_app
from courier.core.responses import JSON_CONTENT_TYPE


@pytest.fixture
def client(local_settings, mock_store):
    """Running app (lifespan started) using the mock store."""
    app = create_app(local_settings, store=mock_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def maintenance_client(local_settings):
    """Running app started in maintenance mode."""
    settings = local_settings.model_copy(update={"maintenance": True})
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


# ===========================
# Status
# ===========================


def test_status_ok(client):
    """Test the status endpoint of a running server."""
    response = client.get("/v1/status")

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"] == JSON_CONTENT_TYPE
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == __version__
    assert data["uptime"].endswith("s")


def test_status_maintenance(maintenance_client):
    """Test the status endpoint reports maintenance with a 503."""
    response = maintenance_client.get("/v1/status")

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["status"] == "maintenance"


def test_maintenance_blocks_handlers(maintenance_client):
    """Test certificate endpoints are gated in maintenance mode."""
    response = maintenance_client.post(
        "/v1/certs/1234/pkcs12password", json={"password": "hunter2"}
    )

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["status"] == "maintenance"


def test_not_ready_reports_stopping(local_settings, mock_store):
    """Test a server that is not ready reports stopping and never reaches the handler."""
    app = create_app(local_settings, store=mock_store)
    client = TestClient(app)

    # Lifespan not started: the server never became ready
    response = client.post("/v1/certs/1234/pkcs12password", json={"password": "hunter2"})

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["status"] == "stopping"
    assert mock_store.calls == {}


def test_gate_lifts_when_ready(local_settings, mock_store):
    """Test requests pass through once the server becomes available."""
    app = create_app(local_settings, store=mock_store)
    client = TestClient(app)
    assert client.get("/v1/status").status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    app.state.server_state.set_ready(True)

    assert client.get("/v1/status").status_code == status.HTTP_200_OK


# ===========================
# Probes and metrics
# ===========================


@pytest.mark.parametrize("path", ["/healthz", "/livez", "/readyz"])
def test_probes_ok(client, path):
    """Test probes report OK on a running server."""
    response = client.get(path)

    assert response.status_code == status.HTTP_200_OK
    assert response.text == "OK"


def test_probes_bypass_maintenance(maintenance_client):
    """Test probes are answered in maintenance mode."""
    assert maintenance_client.get("/healthz").status_code == status.HTTP_200_OK


def test_probes_unavailable_before_start(local_settings, mock_store):
    """Test probes report 503 before startup."""
    client = TestClient(create_app(local_settings, store=mock_store))

    assert client.get("/readyz").status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert client.get("/healthz").text == "Service Unavailable"


def test_metrics(client):
    """Test prometheus metrics are exposed with courier counters."""
    client.post("/v1/certs/1234/pkcs12password", json={"password": "hunter2"})

    response = client.get("/metrics")

    assert response.status_code == status.HTTP_200_OK
    assert "trisa_courier_passwords_total" in response.text
    assert 'path="/v1/certs/{cert_id}/pkcs12password"' in response.text
    assert 'path="/{cert_id}/pkcs12password"' not in response.text


def test_metrics_full_templates(client):
    """Test every versioned route is labelled with its prefixed template."""
    client.get("/v1/status")
    client.post("/v1/certs/1234", json={"base64_certificate": ""})

    response = client.get("/metrics")

    assert 'path="/v1/status"' in response.text
    assert 'path="/v1/certs/{cert_id}"' in response.text
    assert 'path="/{cert_id}"' not in response.text


# ===========================
# Routing errors
# ===========================


def test_unknown_route(client):
    """Test unknown routes use the courier not found reply."""
    response = client.get("/v1/unknown")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"success": False, "error": "resource not found"}


def test_wrong_method(client):
    """Test wrong methods use the courier method not allowed reply."""
    response = client.get("/v1/certs/1234")

    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    assert response.json() == {"success": False, "error": "method not allowed"}


def test_trace_id_header(client):
    """Test responses carry a trace id."""
    response = client.get("/v1/status", headers={"X-Trace-ID": "trace-abc"})

    assert response.headers["X-Trace-ID"] == "trace-abc"
