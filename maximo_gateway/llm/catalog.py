"""Model listing: live lookup where the provider allows it, curated lists otherwise."""

import logging
import re

import httpx

from maximo_gateway.config.schema import GatewayConfig

from .openai_compat import api_root

logger = logging.getLogger(__name__)

CURATED_MODELS: dict[str, list[str]] = {
    "openai": ["gpt-4o-mini", "gpt-4.1-mini", "gpt-4o", "gpt-4.1"],
    "mistral": ["mistral-large-latest", "mistral-small-latest", "open-mistral-nemo"],
    "deepseek": ["deepseek-chat", "deepseek-reasoner"],
    "anthropic": ["claude-3-5-sonnet-latest", "claude-3-5-haiku-latest"],
    "gemini": ["gemini-1.5-pro", "gemini-1.5-flash", "gemini-2.0-flash"],
    "watsonx": ["ibm/granite-20b-multilingual", "ibm/granite-13b-chat-v2"],
}

_CHAT_MODEL = re.compile(r"gpt|o\d|chat", re.IGNORECASE)
_MAX_MODELS = 200


async def list_models(
    provider: str,
    config: GatewayConfig,
    api_key: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict:
    """
    List models for provider.

    Only OpenAI is queried live (GET /v1/models). Any failure falls back to the
    curated list with a "warning" entry; this never raises.

    Returns:
        {"models": [...], "warning"?: str, "detail"?: str}
    """
    provider = provider.strip().lower()
    curated = CURATED_MODELS.get(provider, CURATED_MODELS["openai"])
    if provider != "openai":
        return {"models": curated}

    key = api_key or config.providers.openai.api_key
    if not key:
        return {"models": curated}

    url = f"{api_root(config.providers.openai.base_url)}/models"
    try:
        async with httpx.AsyncClient(timeout=10.0, transport=transport) as http:
            response = await http.get(url, headers={"authorization": f"Bearer {key}"})
    except httpx.HTTPError as e:
        logger.warning(f"OpenAI model listing failed: {e!r}")
        return {"models": curated, "warning": f"OpenAI /v1/models failed: {type(e).__name__}"}

    if not response.is_success:
        return {
            "models": curated,
            "warning": f"OpenAI /v1/models failed ({response.status_code})",
            "detail": response.text[:200],
        }
    try:
        data = response.json()
    except ValueError:
        return {"models": curated, "warning": "OpenAI returned non-JSON model list"}

    entries = data.get("data") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        logger.warning(f"OpenAI model list has unexpected shape: {type(data).__name__}")
        return {"models": curated, "warning": "OpenAI returned an unexpected model list"}

    ids = [m["id"] for m in entries if isinstance(m, dict) and isinstance(m.get("id"), str)]
    chat_ids = [i for i in ids if _CHAT_MODEL.search(i)][:_MAX_MODELS]
    return {"models": chat_ids or curated}
