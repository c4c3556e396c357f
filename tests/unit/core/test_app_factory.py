"""
Tests for the application factory wiring.
"""

import pytest
from fastapi.middleware.cors import CORSMiddleware

from marketplace.api.middleware import RequestLoggingMiddleware
from marketplace.core.app_factory import create_app


@pytest.mark.unit
def test_only_request_logging_middleware():
    app = create_app()

    middleware = [m.cls for m in app.user_middleware]

    assert middleware == [RequestLoggingMiddleware]
    assert CORSMiddleware not in middleware


@pytest.mark.unit
def test_webhook_routes_are_mounted_under_api_prefix():
    app = create_app()

    paths = {route.path for route in app.routes}

    assert "/api/v1/webhooks/mercadopago" in paths
    assert "/api/v1/webhooks/mercadopago/health" in paths
    assert "/health" in paths
