"""
Entry point for the maximo-gateway HTTP server.

CRITICAL: Server imports configure_logging() first to prevent stdout pollution.
"""

import asyncio
import logging

# Import server (which configures logging before anything else)
from maximo_gateway.server import get_config, mcp

logger = logging.getLogger(__name__)


async def main(host: str | None = None, port: int | None = None) -> None:
    """Serve MCP tools and REST routes over HTTP until interrupted."""
    config = get_config()
    host = host or config.server.host
    port = port or config.server.port

    logger.info(f"Starting maximo-gateway on {host}:{port}")
    await mcp.run_http_async(host=host, port=port)


if __name__ == "__main__":
    asyncio.run(main())
