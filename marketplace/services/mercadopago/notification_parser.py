"""
Mercado Pago notification normalization.

Notifications arrive as JSON bodies (webhooks v1/v2, legacy topic bodies)
or as query strings (IPN). This module reduces every shape to a single
WebhookNotification(resource_id, topic) using ordered extraction rules;
the first rule yielding a value wins.

Supported shapes:
    {"type": "payment", "data": {"id": "456"}}
    {"id": "456", "type": "payment"}
    {"resource": "https://api.mercadopago.com/v1/payments/456", "topic": "payment"}
    ?id=456&topic=payment | ?payment_id=456&type=payment | ?data.id=456&type=payment
    ?topic=merchant_order&merchant_order_id=789
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from marketplace.domains.ecommerce.application.dto import MERCHANT_ORDER_TOPIC, WebhookNotification

logger = logging.getLogger(__name__)


class MPWebhookPayload(BaseModel):
    """
    Mercado Pago webhook body - supports both IPN v1 and topic formats.

    IPN v1 format (new):
        {"id": 123, "type": "payment", "action": "payment.created", "data": {"id": "456"}}

    Topic-based format (legacy):
        {"resource": "/v1/payments/456", "topic": "payment"}
    """

    model_config = ConfigDict(extra="ignore")

    # IPN v1 format fields
    action: str | None = None
    api_version: str | None = None
    data: dict[str, Any] | None = None
    date_created: str | None = None
    id: str | int | None = None
    live_mode: bool | None = None
    type: str | None = None
    user_id: str | int | None = None

    # Topic-based format fields (legacy)
    resource: str | None = None
    topic: str | None = None


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _resource_tail(resource: str | None) -> str | None:
    """Last path segment of a resource URL ("/v1/payments/456" -> "456")."""
    if not resource:
        return None
    return _clean(resource.rstrip("/").split("/")[-1].split("?")[0])


_BODY_ID_RULES: tuple[Callable[[MPWebhookPayload], Any], ...] = (
    lambda p: (p.data or {}).get("id"),
    lambda p: p.id,
    lambda p: _resource_tail(p.resource),
)

_BODY_TOPIC_RULES: tuple[Callable[[MPWebhookPayload], Any], ...] = (
    lambda p: p.type,
    lambda p: p.topic,
)

_QUERY_ID_KEYS = ("data.id", "id", "payment_id")
_QUERY_TOPIC_KEYS = ("topic", "type")
_QUERY_MERCHANT_ORDER_ID_KEYS = ("merchant_order_id",)

# Gateway IDs are numeric; anything outside this set is rejected as malformed
_RESOURCE_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def _first_from_body(payload: MPWebhookPayload | None, rules) -> str | None:
    if payload is None:
        return None
    for rule in rules:
        value = _clean(rule(payload))
        if value:
            return value
    return None


def _first_from_query(query: Mapping[str, str], keys) -> str | None:
    for key in keys:
        value = _clean(query.get(key))
        if value:
            return value
    return None


def parse_body(raw_body: bytes | str | None) -> MPWebhookPayload | None:
    """
    Parse a JSON webhook body.

    Returns None for empty or malformed bodies (including form-encoded IPN
    bodies), which makes every field fall back to the query string.
    """
    if not raw_body or not raw_body.strip():
        return None
    try:
        return MPWebhookPayload.model_validate_json(raw_body)
    except ValidationError as e:
        logger.warning(f"[MP-WEBHOOK] Unable to parse webhook body, using query string: {e.error_count()} errors")
        return None


def parse_notification(raw_body: bytes | str | None, query: Mapping[str, str]) -> WebhookNotification:
    """
    Normalize a webhook delivery into a WebhookNotification.

    Each field is taken from the JSON body when present there, otherwise
    from the query string. Merchant-order notifications additionally
    accept the merchant_order_id query parameter.

    Args:
        raw_body: Raw request body (may be empty)
        query: Query parameters (the 'secret' parameter is ignored)

    Returns:
        WebhookNotification; resource_id is None when no well-formed ID was found
    """
    payload = parse_body(raw_body)

    topic = _first_from_body(payload, _BODY_TOPIC_RULES) or _first_from_query(query, _QUERY_TOPIC_KEYS)
    topic = topic.lower() if topic else None
    resource_id = _first_from_body(payload, _BODY_ID_RULES) or _first_from_query(query, _QUERY_ID_KEYS)

    if not resource_id and topic == MERCHANT_ORDER_TOPIC:
        resource_id = _first_from_query(query, _QUERY_MERCHANT_ORDER_ID_KEYS)

    if resource_id and not _RESOURCE_ID_PATTERN.fullmatch(resource_id):
        logger.warning(f"[MP-WEBHOOK] Ignoring malformed resource id: {resource_id[:64]!r}")
        resource_id = None

    return WebhookNotification(resource_id=resource_id, topic=topic)
