"""File-store interface and the local vault implementation."""

from __future__ import annotations

import json
import logging
import posixpath
from pathlib import Path
from typing import Any, Mapping, Protocol

from .errors import FileAlreadyExistsError, StorageError
from .models import FileHandle
from .utils import sha256_hex

logger = logging.getLogger(__name__)

ATTACHMENT_FOLDER_KEY = "attachmentFolderPath"
CONFIG_DIR = ".obsidian"
TRASH_DIR = ".trash"


class FileStore(Protocol):
    """Operations the pipeline needs from the user's file store."""

    def config_value(self, key: str) -> str | None:
        ...

    def create_text(self, path: str, content: str) -> FileHandle:
        ...

    def create_binary(self, path: str, data: bytes) -> FileHandle:
        ...

    def list_files(self) -> list[FileHandle]:
        ...

    def trash(self, handle: FileHandle) -> None:
        ...


def join_path(folder: str | None, name: str) -> str:
    """Vault-relative POSIX path of ``name`` inside ``folder`` (blank = vault root)."""
    folder = (folder or "").strip().strip("/")
    joined = posixpath.normpath(posixpath.join(folder, name)) if folder else posixpath.normpath(name)
    if joined.startswith("../") or joined == ".." or posixpath.isabs(joined):
        raise StorageError("Path escapes the vault", path=joined)
    return joined


class VaultFileStore:
    """Obsidian-style vault rooted at a local directory."""

    def __init__(self, root: Path, overrides: Mapping[str, Any] | None = None) -> None:
        self.root = Path(root)
        self.overrides = dict(overrides or {})

    def config_value(self, key: str) -> str | None:
        if self.overrides.get(key) is not None:
            return self.overrides[key]
        return self._vault_config().get(key)

    def create_text(self, path: str, content: str) -> FileHandle:
        return self._create(path, content.encode("utf-8"))

    def create_binary(self, path: str, data: bytes) -> FileHandle:
        return self._create(path, bytes(data))

    def list_files(self) -> list[FileHandle]:
        if not self.root.exists():
            return []
        try:
            handles = []
            for file_path in sorted(self.root.rglob("*")):
                relative = file_path.relative_to(self.root)
                if relative.parts[0] in (CONFIG_DIR, TRASH_DIR) or not file_path.is_file():
                    continue
                handles.append(FileHandle(relative.as_posix()))
            return handles
        except OSError as exc:
            raise StorageError(f"Unable to list vault files: {exc}") from exc

    def trash(self, handle: FileHandle) -> None:
        """Move ``handle`` into the vault's local trash folder."""
        source = self._resolve(handle.path)
        trash_dir = self.root / TRASH_DIR
        target = trash_dir / handle.name
        counter = 1
        while target.exists():
            stem, dot, suffix = handle.name.rpartition(".")
            target = trash_dir / (f"{stem} {counter}.{suffix}" if dot else f"{handle.name} {counter}")
            counter += 1
        try:
            trash_dir.mkdir(parents=True, exist_ok=True)
            source.rename(target)
        except FileNotFoundError as exc:
            raise StorageError(f"Cannot trash missing file {handle.path}", path=handle.path) from exc
        except OSError as exc:
            raise StorageError(f"Unable to trash {handle.path}: {exc}", path=handle.path) from exc
        logger.info("Moved %s to %s", handle.path, target.relative_to(self.root).as_posix())

    def _create(self, path: str, data: bytes) -> FileHandle:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Unable to create folder for {path}: {exc}", path=path) from exc
        try:
            with target.open("xb") as handle:
                handle.write(data)
        except FileExistsError as exc:
            raise FileAlreadyExistsError("File already exists", path=path) from exc
        except OSError as exc:
            raise StorageError(f"Unable to create {path}: {exc}", path=path) from exc
        logger.info("Created %s (%s bytes, sha256=%s)", path, len(data), sha256_hex(data))
        return FileHandle(path)

    def _resolve(self, path: str) -> Path:
        return self.root / join_path(None, path)

    def _vault_config(self) -> dict:
        config_path = self.root / CONFIG_DIR / "app.json"
        if not config_path.exists():
            return {}
        try:
            return json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Unable to read vault config {config_path}: {exc}") from exc
