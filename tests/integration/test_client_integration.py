"""
Integration tests driving the courier app with the courier client.

The client talks to the ASGI app in-process through httpx.ASGITransport.
"""

import base64

import httpx
import pytest

from courier.application import create_app
from courier.client import CourierClient, StatusError, zero_backoff
from courier.models import StoreCertificateRequest, StorePasswordRequest


@pytest.fixture
def app(local_settings, mock_store):
    """App marked ready without running the lifespan."""
    app = create_app(local_settings, store=mock_store)
    app.state.server_state.set_healthy(True)
    app.state.server_state.set_ready(True)
    return app


@pytest.fixture
async def client(app):
    courier = CourierClient(
        "http://courier.test",
        retries=1,
        backoff=zero_backoff,
        transport=httpx.ASGITransport(app=app),
    )
    yield courier
    await courier.close()


@pytest.mark.asyncio
async def test_status(client):
    """Test the client decodes the server status."""
    reply = await client.status()

    assert reply.status == "ok"


@pytest.mark.asyncio
async def test_status_stopping(app, client):
    """Test the client decodes a 503 status reply."""
    app.state.server_state.set_ready(False)

    reply = await client.status()

    assert reply.status == "stopping"


@pytest.mark.asyncio
async def test_deliver_certificate(client, mock_store, encrypted_pkcs12, pkcs12_password):
    """Test posting a password and an encrypted certificate through the client."""
    await client.store_certificate_password(
        StorePasswordRequest(id="1234", password=pkcs12_password)
    )
    await client.store_certificate(
        StoreCertificateRequest(
            id="1234", base64_certificate=base64.b64encode(encrypted_pkcs12).decode()
        )
    )

    assert mock_store.passwords["1234"] == pkcs12_password.encode()
    assert "1234" in mock_store.certificates


@pytest.mark.asyncio
async def test_server_error_reply_is_reported(client, mock_store):
    """Test the server error reply reaches the caller after retries."""
    with pytest.raises(StatusError) as excinfo:
        await client.store_certificate_password(StorePasswordRequest(id="1234", password=""))

    assert str(excinfo.value) == "[400]: missing password in request"
    assert mock_store.calls == {}
