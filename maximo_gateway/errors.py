"""
Gateway error taxonomy.

Every error carries a short ``kind`` tag and a diagnostic ``detail`` string so the
entry points can render it as ``{"error": kind, "detail": detail}``. Tool-level
failures are not represented here: they travel as ToolResult data.
"""

PROVIDER_DETAIL_LIMIT = 400


def truncate(text: str, limit: int) -> str:
    """Cut text to at most limit characters."""
    return text if len(text) <= limit else text[:limit]


class GatewayError(Exception):
    """Base class for errors surfaced to gateway callers."""

    status: int = 500
    default_kind: str = "agent_failed"

    def __init__(self, detail: str, kind: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.kind = kind or self.default_kind

    def to_payload(self) -> dict:
        """Render as the JSON error payload returned to callers."""
        return {"error": self.kind, "detail": self.detail}


class ConfigurationError(GatewayError):
    """Missing or malformed configuration, detected before any network call."""

    status = 400
    default_kind = "invalid_request"


class ProviderCallError(GatewayError):
    """An LLM provider call failed (non-2xx, malformed JSON, or transport error)."""

    status = 502
    default_kind = "provider_failed"

    def __init__(
        self,
        provider: str,
        detail: str,
        upstream_status: int | None = None,
    ) -> None:
        super().__init__(
            f"{provider}: {truncate(detail, PROVIDER_DETAIL_LIMIT)}",
        )
        self.provider = provider
        self.upstream_status = upstream_status


class MaximoCallError(GatewayError):
    """A Maximo REST call failed at the transport level."""

    status = 502
    default_kind = "maximo_failed"


CONFIGURATION_KINDS = frozenset(
    {
        "invalid_request",
        "missing_api_key",
        "missing_base",
        "missing_project",
        "missing_registry_url",
        "tenant_not_configured",
        "unsupported_provider",
    }
)


def status_for(payload: dict) -> int:
    """HTTP status matching a response payload (200 unless it carries an error kind)."""
    kind = payload.get("error")
    if not kind:
        return 200
    if kind in CONFIGURATION_KINDS:
        return ConfigurationError.status
    if kind == ProviderCallError.default_kind:
        return ProviderCallError.status
    if kind == MaximoCallError.default_kind:
        return MaximoCallError.status
    return GatewayError.status
