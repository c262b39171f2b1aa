"""Service layer shared by the REST routes, MCP tools, and CLI."""
