from __future__ import annotations

import pytest

from slack_vault.errors import FileAlreadyExistsError, StorageError
from slack_vault.models import FileHandle
from slack_vault.notifications import RecordingNotifier


class MemoryStore:
    """In-memory file store that records every call in order."""

    def __init__(self, config: dict | None = None, files: dict | None = None) -> None:
        self.config = config if config is not None else {"attachmentFolderPath": "att"}
        self.files: dict[str, bytes | str] = dict(files or {})
        self.trashed: list[str] = []
        self.calls: list[tuple] = []
        self.fail_on: dict[str, Exception] = {}

    def config_value(self, key):
        self.calls.append(("config_value", key))
        return self.config.get(key)

    def create_text(self, path, content):
        self.calls.append(("create_text", path, content))
        return self._create(path, content)

    def create_binary(self, path, data):
        self.calls.append(("create_binary", path, data))
        return self._create(path, data)

    def list_files(self):
        self.calls.append(("list_files",))
        return [FileHandle(path) for path in self.files]

    def trash(self, handle):
        self.calls.append(("trash", handle.path))
        self.trashed.append(handle.path)
        del self.files[handle.path]

    def writes(self) -> list[tuple]:
        return [call for call in self.calls if call[0] in ("create_text", "create_binary")]

    def _create(self, path, content):
        if path in self.fail_on:
            raise self.fail_on[path]
        if path in self.files:
            raise FileAlreadyExistsError("File already exists", path=path)
        self.files[path] = content
        return FileHandle(path)


class FakeFetcher:
    def __init__(self, payloads: dict[str, bytes] | None = None, errors: dict | None = None) -> None:
        self.payloads = payloads or {}
        self.errors = errors or {}
        self.calls: list[tuple[str, str]] = []

    def fetch(self, remote_ref, auth_cookie):
        self.calls.append((remote_ref, auth_cookie))
        if remote_ref in self.errors:
            raise self.errors[remote_ref]
        return self.payloads[remote_ref]


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def storage_error() -> StorageError:
    return StorageError("disk full", path="att/msg1.json")
