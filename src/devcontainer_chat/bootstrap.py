from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from devcontainer_chat.app_config import AppConfig, RuntimeEnv
from devcontainer_chat.chat_service import ChatService
from devcontainer_chat.errors import ConfigurationError
from devcontainer_chat.file_tree import LocalFileTreeSource
from devcontainer_chat.logging_config import setup_logging
from devcontainer_chat.provider import create_provider
from devcontainer_chat.sessions import SessionStore, reset_session_store


@dataclass
class AppRuntime:
    service: ChatService
    file_tree_source: LocalFileTreeSource
    log_descriptions: list[str]


def bootstrap_runtime(app: AppConfig, env: RuntimeEnv) -> AppRuntime:
    log_descriptions = setup_logging(level=app.log_level, consumers=app.log_consumers)

    if not env.provider_api_key:
        raise ConfigurationError(
            f"No API key for provider {app.provider_name!r}. Set {env.provider_env_var} or ApiKey in config.json."
        )

    provider = create_provider(app, env.provider_api_key)
    file_tree_source = LocalFileTreeSource(
        app.workspace_root,
        per_container=app.per_container_workspace,
        max_file_bytes=app.max_file_bytes,
    )
    store = reset_session_store(SessionStore(
        max_sessions=app.max_sessions,
        idle_ttl_seconds=app.session_idle_ttl_seconds,
    ))

    logger.info(f"Chat runtime ready: provider={app.provider_name}, model={app.model}")

    return AppRuntime(
        service=ChatService(provider, file_tree_source, store),
        file_tree_source=file_tree_source,
        log_descriptions=log_descriptions,
    )
