"""
Unit tests for application lifecycle.
"""

from unittest.mock import patch

import pytest

from courier.application import create_app
from courier.infrastructure.implementations.local import LocalStore
from courier.lifespan import lifespan


@pytest.mark.asyncio
async def test_lifespan_opens_store_and_marks_ready(local_settings):
    """Test startup opens the configured store and marks the server ready."""
    app = create_app(local_settings)
    state = app.state.server_state

    async with lifespan(app):
        assert isinstance(app.state.store, LocalStore)
        assert state.ready
        assert state.healthy

    assert not state.ready
    assert not state.healthy


@pytest.mark.asyncio
async def test_lifespan_uses_injected_store(local_settings, mock_store):
    """Test an injected store is used and closed on shutdown."""
    app = create_app(local_settings, store=mock_store)

    async with lifespan(app):
        assert app.state.store is mock_store

    assert mock_store.closed


@pytest.mark.asyncio
async def test_lifespan_maintenance_skips_store(local_settings):
    """Test maintenance mode does not open the store."""
    settings = local_settings.model_copy(update={"maintenance": True})
    app = create_app(settings)

    with patch("courier.lifespan.open_store") as mock_open:
        async with lifespan(app):
            assert app.state.store is None
            assert app.state.server_state.healthy

    mock_open.assert_not_called()


@pytest.mark.asyncio
async def test_lifespan_close_error_propagates(local_settings, mock_store):
    """Test an error closing the store is logged and raised."""

    async def fail():
        raise RuntimeError("close failed")

    mock_store.close = fail
    app = create_app(local_settings, store=mock_store)

    with patch("courier.lifespan.logger") as mock_logger:
        with pytest.raises(RuntimeError, match="close failed"):
            async with lifespan(app):
                pass

        assert mock_logger.exception.called
    assert not app.state.server_state.ready
