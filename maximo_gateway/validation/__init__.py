"""Input validation and sanitization utilities."""

from .sanitize import MASK, mask_headers, sanitize_tenant_id, sanitize_user_text

__all__ = [
    "MASK",
    "mask_headers",
    "sanitize_tenant_id",
    "sanitize_user_text",
]
