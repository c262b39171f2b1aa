"""
Configuration loading with auto-creation of defaults.

Uses platformdirs for cross-platform config directory management. Environment
variables (the same names the container deployment sets) override file values.
"""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from platformdirs import user_config_path

from .schema import SUPPORTED_PROVIDERS, GatewayConfig

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1")


def get_config_path() -> Path:
    """Get path to config file, ensuring config directory exists."""
    config_dir = user_config_path("maximo-gateway", ensure_exists=True)
    return config_dir / "config.yaml"


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> GatewayConfig:
    """
    Load configuration from YAML file, then apply environment overrides.

    If config file doesn't exist, creates it with defaults.
    Returns validated Pydantic model.
    """
    config_path = config_path or get_config_path()
    environ = os.environ if environ is None else environ

    if not config_path.exists():
        config = GatewayConfig()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w") as f:
            yaml.safe_dump(
                config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False
            )
        logger.info(f"Created default config at {config_path}")
    else:
        with config_path.open("r") as f:
            config_data = yaml.safe_load(f) or {}
        config = GatewayConfig(**config_data)
        logger.info(f"Loaded config from {config_path}")

    return apply_env_overrides(config, environ)


def apply_env_overrides(config: GatewayConfig, environ: Mapping[str, str]) -> GatewayConfig:
    """Return a copy of config with values taken from environment variables."""
    data = config.model_dump()

    for provider in SUPPORTED_PROVIDERS:
        prefix = provider.upper()
        section = data["providers"][provider]
        if environ.get(f"{prefix}_API_KEY"):
            section["api_key"] = environ[f"{prefix}_API_KEY"]
        if environ.get(f"{prefix}_BASE"):
            section["base_url"] = environ[f"{prefix}_BASE"]
    if environ.get("WATSONX_PROJECT"):
        data["providers"]["watsonx"]["project_id"] = environ["WATSONX_PROJECT"]

    if environ.get("MCP_URL"):
        data["registry"]["url"] = environ["MCP_URL"]
    if "ENABLE_MCP_TOOLS" in environ:
        data["registry"]["enable_tools"] = environ["ENABLE_MCP_TOOLS"].lower() in _TRUTHY

    maximo = data["maximo"]
    if environ.get("MAXIMO_TENANT"):
        maximo["default_tenant"] = environ["MAXIMO_TENANT"]
    if environ.get("DEFAULT_SITEID"):
        maximo["default_site"] = environ["DEFAULT_SITEID"]

    default_tenant = dict(maximo["tenants"].get("default") or {})
    for env_name, field in (
        ("MAXIMO_URL", "base_url"),
        ("MAXIMO_APIKEY", "api_key"),
        ("MAXIMO_USER", "user"),
        ("MAXIMO_PASSWORD", "password"),
    ):
        if environ.get(env_name):
            default_tenant[field] = environ[env_name]
    if default_tenant:
        maximo["tenants"]["default"] = default_tenant

    if environ.get("TENANTS_JSON"):
        try:
            tenants = json.loads(environ["TENANTS_JSON"])
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring malformed TENANTS_JSON: {e}")
        else:
            if isinstance(tenants, dict):
                maximo["tenants"].update(
                    {str(k): v for k, v in tenants.items() if isinstance(v, dict)}
                )
            else:
                logger.warning("Ignoring TENANTS_JSON: expected a JSON object")

    if environ.get("LOG_MAX", "").isdigit():
        data["trace"]["capacity"] = int(environ["LOG_MAX"])
    if environ.get("PORT", "").isdigit():
        data["server"]["port"] = int(environ["PORT"])

    return GatewayConfig.model_validate(data)
