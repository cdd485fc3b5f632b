import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

_CONSOLE_FORMAT = "<level>{level:<8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"


def _add_console(level: str, *, stream: Any = None) -> str:
    logger.add(stream or sys.stderr, level=level, format=_CONSOLE_FORMAT)
    return f"console ({level})"


def _add_file(level: str, *, path: str = "chat.log", rotation: str = "10 MB", retention: int = 3) -> str:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    logger.add(path, level=level, format=_FILE_FORMAT, rotation=rotation, retention=retention)
    return f"file ({path}, {level})"


_SINKS: dict[str, Callable[..., str]] = {
    "console": _add_console,
    "file": _add_file,
}

# Streamed replies share the terminal with stderr, so the console only gets warnings.
_DEFAULT_CONSUMERS: list[dict[str, Any]] = [
    {"type": "console", "level": "WARNING"},
    {"type": "file", "path": "chat.log"},
]


def setup_logging(
    level: str = "INFO",
    consumers: list[dict[str, Any]] | None = None,
) -> list[str]:
    """Replace loguru's sinks with the configured consumers.

    Each consumer is ``{"type": "console" | "file", "level": ..., **options}``;
    ``level`` defaults to the global level. Returns one description per sink
    that was added.
    """
    logger.remove()

    descriptions: list[str] = []
    unknown: list[str] = []

    for config in consumers if consumers is not None else _DEFAULT_CONSUMERS:
        sink_type = config.get("type", "")
        add_sink = _SINKS.get(sink_type)
        if add_sink is None:
            unknown.append(sink_type)
            continue
        options = {k: v for k, v in config.items() if k not in ("type", "level")}
        descriptions.append(add_sink(config.get("level", level), **options))

    # Warn after the loop so the message reaches the sinks that were added.
    for sink_type in unknown:
        logger.warning(f"Unknown log consumer type: {sink_type!r}")

    return descriptions
