"""
CLI interface for maximo-gateway.

Thin presentation layer over the tools/ service layer.
All commands delegate to the same functions the server wraps.
"""

import asyncio
import json
import logging

import httpx
import typer

app = typer.Typer(
    name="maximo-gateway",
    help="LLM chat gateway with Maximo tool orchestration.",
    no_args_is_help=True,
)


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


def _load():
    from maximo_gateway.config.loader import load_config

    return load_config()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level")):
    """Human-readable logging to stderr for CLI mode."""
    from maximo_gateway.logging_config import configure_logging

    configure_logging(json_output=False, level=logging.DEBUG if verbose else logging.WARNING)


@app.command()
def chat(
    text: str = typer.Argument(..., help="Message to send"),
    provider: str = typer.Option("openai", "--provider", "-p", help="LLM provider id"),
    model: str = typer.Option("", "--model", "-m", help="Model id (provider default if empty)"),
    system: str = typer.Option("", "--system", "-s", help="System prompt"),
    temperature: float = typer.Option(None, "--temperature", "-t", help="Sampling temperature"),
    tools: bool = typer.Option(None, "--tools/--no-tools", help="Enable registry tools"),
    registry_url: str = typer.Option(None, "--registry-url", help="Tool-registry base URL"),
    tenant: str = typer.Option(None, "--tenant", help="Maximo tenant id"),
    show_trace: bool = typer.Option(False, "--trace", help="Print the trace after the reply"),
):
    """Send one message through the orchestration loop and print the reply."""
    from maximo_gateway.models.requests import AgentChatRequest
    from maximo_gateway.tools.agent_chat import agent_chat
    from maximo_gateway.trace import TraceSink

    config = _load()
    sink = TraceSink(
        capacity=config.trace.capacity, max_payload_chars=config.trace.max_payload_chars
    )
    request = AgentChatRequest(
        provider=provider,
        model=model,
        system_prompt=system,
        temperature=temperature,
        user_text=text,
        tenant=tenant,
        tools_enabled=tools,
        tool_registry_url=registry_url,
    )

    try:
        result = _run(agent_chat(request, config, sink))
    except KeyboardInterrupt:
        typer.echo("\nCancelled.", err=True)
        raise typer.Exit(130)

    if show_trace:
        for event in sink.read_recent():
            typer.echo(
                typer.style(f"[{event.kind.value}] ", fg=typer.colors.BRIGHT_BLACK)
                + json.dumps(event.payload, ensure_ascii=False, default=str),
                err=True,
            )

    if "error" in result:
        message = f"Error ({result['error']}): {result['detail']}"
        typer.echo(typer.style(message, fg=typer.colors.RED), err=True)
        raise typer.Exit(1)
    typer.echo(result["reply"])


@app.command("tools")
def list_tools(
    registry_url: str = typer.Option(None, "--registry-url", help="Tool-registry base URL"),
    tenant: str = typer.Option(None, "--tenant", help="Maximo tenant id"),
):
    """List the tools the registry offers, as the model would see them."""
    from rich.console import Console
    from rich.table import Table

    from maximo_gateway.registry.client import RegistryClient

    config = _load()
    url = registry_url or config.registry.url
    if not url:
        typer.echo("No tool-registry URL. Pass --registry-url or set MCP_URL.", err=True)
        raise typer.Exit(1)

    client = RegistryClient(url, list_timeout=config.registry.list_timeout)
    try:
        tools = _run(client.list_tools(tenant or config.maximo.default_tenant))
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not tools:
        typer.echo("No tools offered.")
        return

    table = Table("NAME", "DESCRIPTION", "PARAMETERS")
    for tool in tools:
        params = ", ".join(tool.parameters_schema.get("properties", {}).keys()) or "-"
        table.add_row(tool.name, tool.description, params)
    Console().print(table)


@app.command()
def models(provider: str = typer.Option("openai", "--provider", "-p", help="LLM provider id")):
    """List model ids for a provider."""
    from maximo_gateway.errors import GatewayError
    from maximo_gateway.tools.list_models import list_models

    try:
        result = _run(list_models(provider, _load()))
    except GatewayError as e:
        typer.echo(f"Error: {e.detail}", err=True)
        raise typer.Exit(1)

    if result.get("warning"):
        typer.echo(typer.style(f"Warning: {result['warning']}", fg=typer.colors.YELLOW), err=True)
    for model_id in result["models"]:
        typer.echo(model_id)


@app.command()
def trace(
    limit: int = typer.Option(50, "--limit", "-n", help="Events to show"),
    kind: str = typer.Option(None, "--kind", "-k", help="Only events of this kind"),
    url: str = typer.Option(None, "--url", help="Server URL (default from config)"),
):
    """Show recent trace events from a running server."""
    from rich.console import Console
    from rich.table import Table

    config = _load()
    if url is None:
        host = "127.0.0.1" if config.server.host in ("0.0.0.0", "::") else config.server.host
        url = f"http://{host}:{config.server.port}"

    params = {"limit": limit}
    if kind:
        params["kind"] = kind
    try:
        response = httpx.get(f"{url.rstrip('/')}/api/logs", params=params, timeout=10.0)
        response.raise_for_status()
    except httpx.HTTPError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    events = response.json().get("events", [])
    if not events:
        typer.echo("No events.")
        return

    table = Table("TIME", "KIND", "TENANT", "PAYLOAD")
    for event in events:
        payload = event.get("payload")
        text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        table.add_row(
            event.get("timestamp", ""), event.get("kind", ""), event.get("tenant", ""), text[:120]
        )
    Console().print(table)


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", help="Bind port (default from config)"),
):
    """Start the HTTP server (REST routes + MCP tools)."""
    from maximo_gateway.__main__ import main as serve_main

    try:
        _run(serve_main(host=host, port=port))
    except KeyboardInterrupt:
        pass


@app.command()
def config():
    """Print the config file path."""
    from maximo_gateway.config.loader import get_config_path

    typer.echo(str(get_config_path()))


if __name__ == "__main__":
    app()
