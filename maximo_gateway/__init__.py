"""maximo-gateway: LLM chat gateway with Maximo tool orchestration."""

__version__ = "0.1.0"
