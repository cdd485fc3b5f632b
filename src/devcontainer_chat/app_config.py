from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from devcontainer_chat.errors import ConfigurationError

SUPPORTED_PROVIDERS = ("openai", "anthropic", "gemini", "openrouter")

_PROVIDER_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

_DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-20250514",
    "openrouter": "anthropic/claude-sonnet-4",
    "gemini": "gemini-1.5-pro",
}


@dataclass
class RuntimeEnv:
    provider_api_key: str
    provider_env_var: str


@dataclass
class AppConfig:
    provider_name: str
    base_url: str | None
    model: str
    temperature: float
    max_output_tokens: int
    workspace_root: str
    per_container_workspace: bool
    max_file_bytes: int
    max_sessions: int
    session_idle_ttl_seconds: float | None
    container_id: str
    log_level: str
    log_consumers: list | None


def load_json_config() -> dict:
    config_path = Path.cwd() / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}


def _to_bool(value: object, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return bool(value)


def _optional_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def parse_app_config(config: dict) -> AppConfig:
    provider_name = str(config.get("Provider", "openai")).strip().lower()
    if provider_name not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(
            f"Unsupported AI provider: {provider_name!r}. Supported: {', '.join(SUPPORTED_PROVIDERS)}"
        )

    temperature = float(config.get("Temperature", 0.7))
    if not 0.0 <= temperature <= 1.0:
        raise ConfigurationError(f"Temperature must be between 0.0 and 1.0, got {temperature}")

    return AppConfig(
        provider_name=provider_name,
        base_url=str(config.get("BaseUrl", "")).strip() or None,
        model=str(config.get("Model", "")).strip() or _DEFAULT_MODELS[provider_name],
        temperature=temperature,
        max_output_tokens=int(config.get("MaxOutputTokens", 8192)),
        workspace_root=str(config.get("WorkspaceRoot", "./workspaces")),
        per_container_workspace=_to_bool(config.get("PerContainerWorkspace", True), default=True),
        max_file_bytes=int(config.get("MaxFileBytes", 200_000)),
        max_sessions=int(config.get("MaxSessions", 256)),
        session_idle_ttl_seconds=_optional_float(config.get("SessionIdleTtlSeconds")),
        container_id=str(config.get("ContainerId", "default")).strip() or "default",
        log_level=config.get("LogLevel", "INFO"),
        log_consumers=config.get("LogConsumers"),
    )


def resolve_runtime_env(provider_name: str, config: dict | None = None) -> RuntimeEnv:
    provider_env_var = _PROVIDER_ENV_VARS.get(provider_name, "OPENAI_API_KEY")
    provider_api_key = os.environ.get(provider_env_var, "")
    if not provider_api_key and config:
        provider_api_key = str(config.get("ApiKey", "")).strip()

    return RuntimeEnv(
        provider_api_key=provider_api_key,
        provider_env_var=provider_env_var,
    )
