"""
Mercado Pago API Client

Async client for reading authoritative payment state using Bearer Token auth.
No retries and no caching: failures surface as MercadoPagoError so the
webhook answers 500 and the provider re-delivers later.

Connection Details:
    - Base URL: https://api.mercadopago.com
    - Auth: Bearer Token (Access Token)

Endpoints:
    - GET /v1/payments/{id} - Get payment details
    - GET /merchant_orders/{id} - Get merchant order (aggregate of payments)

Documentation:
    - https://www.mercadopago.com.ar/developers/en/reference/payments/_payments_id/get
    - https://www.mercadopago.com.ar/developers/en/reference/merchant_orders/_merchant_orders_id/get
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from marketplace.config.settings import get_settings

logger = logging.getLogger(__name__)


class MercadoPagoError(Exception):
    """
    Base exception for Mercado Pago errors.

    Attributes:
        error_code: Machine-readable error code
        error_message: Human-readable error description
    """

    def __init__(self, error_code: str, error_message: str):
        self.error_code = error_code
        self.error_message = error_message
        super().__init__(f"{error_code}: {error_message}")


class MercadoPagoAuthError(MercadoPagoError):
    """Authentication error (invalid access token)."""

    def __init__(self, message: str = "Invalid access token"):
        super().__init__("AUTH_ERROR", message)


class MercadoPagoNotFoundError(MercadoPagoError):
    """Requested resource does not exist."""

    def __init__(self, message: str):
        super().__init__("NOT_FOUND", message)


class MercadoPagoConnectionError(MercadoPagoError):
    """Network connectivity issues and timeouts."""

    def __init__(self, message: str):
        super().__init__("CONNECTION_ERROR", message)


class MercadoPagoHTTPError(MercadoPagoError):
    """Any other non-2xx response."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__("HTTP_ERROR", f"HTTP {status_code}: {message}")


def _path_segment(resource_id: str | int) -> str:
    """Percent-encode an ID so it stays a single path segment."""
    return quote(str(resource_id), safe="")


class MercadoPagoClient:
    """
    Async HTTP client for Mercado Pago API.

    Implements the payment gateway port (get_payment, get_merchant_order)
    using Bearer Token authentication over httpx.

    Environment Variables:
        MERCADO_PAGO_ACCESS_TOKEN: Bearer token for API auth
        MERCADO_PAGO_BASE_URL: API base URL (default: https://api.mercadopago.com)
        MERCADO_PAGO_TIMEOUT: Request timeout in seconds (default: 10)

    Example:
        async with MercadoPagoClient() as client:
            payment = await client.get_payment("123456789")
            payment["status"]  # "approved"
    """

    BASE_URL = "https://api.mercadopago.com"

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize Mercado Pago client.

        Args:
            access_token: Bearer token (defaults to settings)
            base_url: API base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        settings = get_settings()

        self._access_token = access_token if access_token is not None else settings.MERCADO_PAGO_ACCESS_TOKEN
        self._base_url = (base_url or settings.MERCADO_PAGO_BASE_URL or self.BASE_URL).rstrip("/")
        self._timeout = timeout or settings.MERCADO_PAGO_TIMEOUT
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if not self._access_token:
            logger.error("MERCADO_PAGO_ACCESS_TOKEN not configured")

    async def __aenter__(self) -> MercadoPagoClient:
        """Enter async context and create HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._access_token}",
                "Accept": "application/json",
            },
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args) -> None:
        """Exit async context and close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, path: str, resource: str) -> dict[str, Any]:
        """
        Perform an authenticated GET and return the parsed JSON object.

        Raises:
            MercadoPagoAuthError: 401 from provider
            MercadoPagoNotFoundError: 404 from provider
            MercadoPagoHTTPError: any other non-2xx or a non-object body
            MercadoPagoConnectionError: network error or timeout
        """
        if not self._client:
            raise MercadoPagoError("CLIENT_NOT_INITIALIZED", "Client not initialized. Use 'async with' context.")

        try:
            response = await self._client.get(path)
        except httpx.TimeoutException as e:
            logger.error(f"MP timeout error: {e}")
            raise MercadoPagoConnectionError(f"Mercado Pago request timed out: {e}") from e
        except httpx.TransportError as e:
            logger.error(f"MP connection error: {e}")
            raise MercadoPagoConnectionError(f"Could not connect to Mercado Pago: {e}") from e

        if response.status_code == 401:
            raise MercadoPagoAuthError("Invalid or expired access token")

        if response.status_code == 404:
            raise MercadoPagoNotFoundError(f"{resource} not found")

        if response.is_error:
            raise MercadoPagoHTTPError(response.status_code, response.text[:200])

        try:
            data = response.json()
        except ValueError as e:
            raise MercadoPagoHTTPError(response.status_code, f"Invalid JSON body for {resource}") from e

        if not isinstance(data, dict):
            raise MercadoPagoHTTPError(response.status_code, f"Unexpected body for {resource}")
        return data

    async def get_payment(self, payment_id: str) -> dict[str, Any]:
        """
        Get payment details by ID.

        Used to verify payment status after receiving a webhook notification.

        Args:
            payment_id: Mercado Pago payment ID

        Returns:
            dict with payment details including:
                - id: Payment ID
                - status: Payment status (approved, pending, rejected, etc.)
                - status_detail: Detailed status description
                - transaction_amount: Amount paid
                - external_reference: Our order reference for correlation
        """
        logger.info(f"Fetching MP payment: {payment_id}")
        data = await self._get_json(f"/v1/payments/{_path_segment(payment_id)}", f"Payment {payment_id}")
        logger.info(f"MP payment {payment_id} status: {data.get('status')}")
        return data

    async def get_merchant_order(self, merchant_order_id: str) -> dict[str, Any]:
        """
        Get merchant order by ID.

        Args:
            merchant_order_id: Mercado Pago merchant order ID

        Returns:
            dict with merchant order details including:
                - id: Merchant order ID
                - external_reference: Our order reference
                - preference_id: Checkout preference ID
                - payments: list of {id, status, ...}
        """
        logger.info(f"Fetching MP merchant order: {merchant_order_id}")
        path = f"/merchant_orders/{_path_segment(merchant_order_id)}"
        return await self._get_json(path, f"Merchant order {merchant_order_id}")
