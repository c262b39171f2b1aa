"""
agent_chat tool implementation.

The orchestration entry point: validates the request, builds the provider and
registry clients, runs the tool loop, and always returns a JSON-ready dict:
{"reply": ...} on success or {"error": kind, "detail": ...} on failure.
"""

import logging

from maximo_gateway.config.schema import GatewayConfig
from maximo_gateway.errors import ConfigurationError, GatewayError
from maximo_gateway.llm.factory import create_chat_client
from maximo_gateway.models.requests import AgentChatRequest
from maximo_gateway.models.responses import AgentChatResponse, ErrorResponse
from maximo_gateway.orchestration.loop import ToolOrchestrator
from maximo_gateway.registry.client import RegistryClient
from maximo_gateway.trace import TraceKind, TraceSink
from maximo_gateway.validation.sanitize import sanitize_tenant_id, sanitize_user_text

logger = logging.getLogger(__name__)


async def agent_chat(
    request: AgentChatRequest,
    config: GatewayConfig,
    trace: TraceSink,
) -> dict:
    """
    Run one user message through the orchestration loop.

    Args:
        request: Parsed chat request
        config:  Gateway configuration
        trace:   Process trace sink

    Returns:
        AgentChatResponse or ErrorResponse as dict
    """
    tenant = (request.tenant or config.maximo.default_tenant).strip()
    trace.append(
        TraceKind.RX_AGENT,
        request.user_text,
        meta={"provider": request.provider, "model": request.model},
        tenant=tenant,
    )
    route = {"provider": request.provider}
    try:
        result = await _run(request, config, trace, route)
    except GatewayError as e:
        logger.warning(f"agent_chat failed: {e.kind}: {e.detail}")
        result = ErrorResponse(error=e.kind, detail=e.detail).model_dump()
    except Exception as e:
        logger.exception("agent_chat failed unexpectedly")
        result = ErrorResponse(error="agent_failed", detail=str(e)).model_dump()

    trace.append(TraceKind.TX_AGENT, result, meta=route, tenant=tenant)
    return result


async def _run(
    request: AgentChatRequest, config: GatewayConfig, trace: TraceSink, route: dict
) -> dict:
    """Resolve clients and run the loop; route collects the resolved provider/model/tools."""
    user_text = sanitize_user_text(request.user_text, config.orchestration.max_user_text)
    tenant = sanitize_tenant_id(request.tenant, config.maximo.default_tenant)
    provider = request.provider.strip().lower()

    chat = create_chat_client(
        provider,
        config,
        api_key=request.api_key,
        base_url=request.base_url,
        trace=trace,
        tenant=tenant,
    )

    explicit = request.tools_enabled is not None
    tools_requested = request.tools_enabled if explicit else config.registry.enable_tools
    registry_url = (request.tool_registry_url or config.registry.url or "").strip()
    registry = None
    tools_ignored = bool(tools_requested and not chat.supports_tools)

    if tools_requested and chat.supports_tools:
        if registry_url:
            registry = RegistryClient(
                registry_url,
                timeout=config.registry.timeout,
                list_timeout=config.registry.list_timeout,
                trace=trace,
            )
        elif explicit:
            raise ConfigurationError(
                "Tools enabled but no tool-registry URL configured", kind="missing_registry_url"
            )
        else:
            logger.warning("Tools enabled in config but registry.url is empty; no tools offered")

    model = request.model.strip() or config.providers.get(provider).default_model
    temperature = (
        request.temperature
        if request.temperature is not None
        else config.orchestration.default_temperature
    )
    route.update(
        provider=provider, model=model, tools=registry is not None, tools_ignored=tools_ignored
    )

    orchestrator = ToolOrchestrator(
        chat,
        registry=registry,
        max_iterations=config.orchestration.max_iterations,
        parallel_tool_calls=config.orchestration.parallel_tool_calls,
        trace=trace,
    )
    run = await orchestrator.run(
        user_text,
        model=model,
        system_prompt=request.system_prompt.strip(),
        temperature=temperature,
        tenant=tenant,
        enable_tools=registry is not None,
    )
    return AgentChatResponse(reply=run.reply).model_dump()
