from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loguru import logger

DEFAULT_IGNORED_DIRS = frozenset({
    ".git",
    ".next",
    ".turbo",
    ".cache",
    "node_modules",
    "dist",
    "build",
    "__pycache__",
    ".venv",
})

DEFAULT_MAX_FILE_BYTES = 200_000


@runtime_checkable
class FileTreeSource(Protocol):
    async def get_file_content_tree(self, container_id: str) -> Any:
        """Return a JSON-serializable snapshot of the project's files."""
        ...


class LocalFileTreeSource:
    """Reads project files from a directory on the local filesystem.

    With ``per_container`` enabled each container's project is expected at
    ``<root>/<container_id>``; otherwise ``root`` itself is the project.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        per_container: bool = True,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
        ignored_dirs: frozenset[str] = DEFAULT_IGNORED_DIRS,
    ):
        self._root = Path(root)
        self._per_container = per_container
        self._max_file_bytes = max_file_bytes
        self._ignored_dirs = ignored_dirs

    def project_dir(self, container_id: str) -> Path:
        if self._per_container:
            return self._root / container_id
        return self._root

    async def get_file_content_tree(self, container_id: str) -> list[dict]:
        return await asyncio.to_thread(self._build_tree, self.project_dir(container_id))

    def _build_tree(self, directory: Path) -> list[dict]:
        if not directory.is_dir():
            logger.warning(f"Project directory not found: {directory}")
            return []
        return self._walk(directory, directory)

    def _walk(self, base: Path, directory: Path) -> list[dict]:
        nodes: list[dict] = []
        for entry in sorted(directory.iterdir(), key=lambda p: (not p.is_dir(), p.name)):
            relative = entry.relative_to(base).as_posix()
            if entry.is_dir():
                if entry.name in self._ignored_dirs:
                    continue
                nodes.append({
                    "name": entry.name,
                    "path": relative,
                    "type": "directory",
                    "children": self._walk(base, entry),
                })
            elif entry.is_file():
                content = self._read_text(entry)
                if content is None:
                    continue
                nodes.append({
                    "name": entry.name,
                    "path": relative,
                    "type": "file",
                    "content": content,
                })
        return nodes

    def _read_text(self, path: Path) -> str | None:
        if path.stat().st_size > self._max_file_bytes:
            logger.debug(f"Skipping large file: {path}")
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.debug(f"Skipping binary file: {path}")
            return None


def serialize_code_context(tree: Any) -> str:
    return json.dumps(tree, indent=2, ensure_ascii=False)
