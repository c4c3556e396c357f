"""
Resend E-mail API Client

Async client for transactional e-mail through the Resend HTTP API.

Connection Details:
    - Base URL: https://api.resend.com
    - Auth: Bearer Token (API key)

Endpoints:
    - POST /emails - Send an e-mail
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from marketplace.config.settings import get_settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """
    Raised when the e-mail provider rejects a message or is unreachable.

    Attributes:
        error_code: Machine-readable error code
        error_message: Human-readable error description
    """

    def __init__(self, error_code: str, error_message: str):
        self.error_code = error_code
        self.error_message = error_message
        super().__init__(f"{error_code}: {error_message}")


class ResendEmailClient:
    """
    Async HTTP client for the Resend API.

    Example:
        async with ResendEmailClient() as client:
            await client.send_email(
                to="buyer@example.com",
                subject="Pago aprobado",
                html="<p>...</p>",
            )
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        sender: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()

        self._api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self._base_url = (base_url or settings.RESEND_API_URL).rstrip("/")
        self._sender = sender or settings.EMAIL_FROM_PAYMENTS
        self._timeout = timeout or settings.EMAIL_TIMEOUT
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def __aenter__(self) -> ResendEmailClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def send_email(self, to: str, subject: str, html: str) -> dict[str, Any]:
        """
        Send one e-mail.

        Returns:
            Provider response (contains the message "id")

        Raises:
            EmailDeliveryError: non-2xx response or network failure
        """
        if not self._client:
            raise EmailDeliveryError("CLIENT_NOT_INITIALIZED", "Client not initialized. Use 'async with' context.")

        payload = {"from": self._sender, "to": [to], "subject": subject, "html": html}
        try:
            response = await self._client.post("/emails", json=payload)
        except httpx.HTTPError as e:
            raise EmailDeliveryError("CONNECTION_ERROR", f"Could not reach Resend: {e}") from e

        if response.is_error:
            raise EmailDeliveryError("HTTP_ERROR", f"HTTP {response.status_code}: {response.text[:200]}")

        return response.json()
