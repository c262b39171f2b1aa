"""
Input sanitization and validation utilities.

Validates user text and tenant ids before any network call, and masks secrets
before anything is logged or traced.
"""

import logging
import re

from maximo_gateway.errors import ConfigurationError

logger = logging.getLogger(__name__)

MASK = "***"
_SECRET_HEADERS = {"apikey", "x-api-key", "authorization", "maxauth"}
_TENANT_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


def sanitize_user_text(text: str, max_length: int = 20_000) -> str:
    """
    Strip and validate the user's message.

    Raises:
        ConfigurationError: If text is empty after stripping
    """
    cleaned = (text or "").strip()
    if not cleaned:
        raise ConfigurationError("Message text cannot be empty", kind="invalid_request")

    if len(cleaned) > max_length:
        logger.warning(f"User text truncated from {len(cleaned)} to {max_length} characters")
        cleaned = cleaned[:max_length]
    return cleaned


def sanitize_tenant_id(tenant: str | None, default: str = "default") -> str:
    """
    Validate a tenant id (letters, digits, "_", ".", "-"; 1-64 chars).

    Raises:
        ConfigurationError: If the id has another shape
    """
    value = (tenant or "").strip() or default
    if not _TENANT_PATTERN.match(value):
        raise ConfigurationError(f"Invalid tenant id '{value}'", kind="invalid_request")
    return value


def mask_headers(headers: dict[str, str]) -> dict[str, str]:
    """Copy headers with credential values replaced by ***."""
    return {k: (MASK if k.lower() in _SECRET_HEADERS else v) for k, v in headers.items()}
