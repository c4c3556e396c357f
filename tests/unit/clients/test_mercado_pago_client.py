"""
Unit Tests for MercadoPagoClient (httpx.MockTransport)
"""

import httpx
import pytest

from marketplace.clients import (
    MercadoPagoAuthError,
    MercadoPagoClient,
    MercadoPagoConnectionError,
    MercadoPagoError,
    MercadoPagoHTTPError,
    MercadoPagoNotFoundError,
)


def _client(handler) -> MercadoPagoClient:
    return MercadoPagoClient(
        access_token="TEST-token",
        base_url="https://mp.test",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_payment_sends_bearer_token():
    # Arrange
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": 123, "status": "approved"})

    # Act
    async with _client(handler) as client:
        payment = await client.get_payment("123")

    # Assert
    assert payment == {"id": 123, "status": "approved"}
    assert seen[0].method == "GET"
    assert seen[0].url.path == "/v1/payments/123"
    assert seen[0].headers["Authorization"] == "Bearer TEST-token"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_merchant_order_path():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/merchant_orders/789"
        return httpx.Response(200, json={"id": 789, "payments": []})

    async with _client(handler) as client:
        merchant_order = await client.get_merchant_order("789")

    assert merchant_order["id"] == 789


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status_code,error_type",
    [
        (401, MercadoPagoAuthError),
        (404, MercadoPagoNotFoundError),
        (500, MercadoPagoHTTPError),
        (429, MercadoPagoHTTPError),
    ],
)
async def test_non_2xx_raises_typed_error(status_code, error_type):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"message": "nope"})

    async with _client(handler) as client:
        with pytest.raises(error_type) as exc_info:
            await client.get_payment("123")

    assert isinstance(exc_info.value, MercadoPagoError)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_network_failure_raises_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(MercadoPagoConnectionError):
            await client.get_payment("123")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_timeout_raises_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with _client(handler) as client:
        with pytest.raises(MercadoPagoConnectionError, match="timed out"):
            await client.get_payment("123")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_requires_context_manager():
    client = _client(lambda request: httpx.Response(200, json={}))

    with pytest.raises(MercadoPagoError) as exc_info:
        await client.get_payment("123")

    assert exc_info.value.error_code == "CLIENT_NOT_INITIALIZED"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_non_object_body_raises_http_error():
    async with _client(lambda request: httpx.Response(200, json=[1, 2])) as client:
        with pytest.raises(MercadoPagoHTTPError):
            await client.get_payment("123")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ids_are_encoded_as_a_single_path_segment():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    async with _client(handler) as client:
        await client.get_payment("1/../../users/me")
        await client.get_merchant_order("7?x=1")

    assert seen[0].url.raw_path == b"/v1/payments/1%2F..%2F..%2Fusers%2Fme"
    assert seen[1].url.raw_path == b"/merchant_orders/7%3Fx%3D1"
    assert seen[1].url.query == b""
