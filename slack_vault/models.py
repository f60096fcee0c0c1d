"""Typed containers shared across the pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Union


class PairMap(Mapping):
    """Read-only ordered key/value collection.

    Serialized as ``{"kind": "map", "entries": [[k, v], ...]}`` rather than as a
    JSON object, so keys of any JSON type survive a round trip.
    """

    def __init__(self, entries=()) -> None:
        if isinstance(entries, Mapping):
            entries = entries.items()
        self._entries: dict[Any, Any] = dict(entries)

    def __getitem__(self, key):
        return self._entries[key]

    def __iter__(self) -> Iterator:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PairMap({list(self._entries.items())!r})"


@dataclass(frozen=True)
class Failure:
    """Failure signal returned by the fetch function instead of a result."""

    message: str


@dataclass(frozen=True)
class NoAttachments:
    pass


@dataclass(frozen=True)
class RemoteAttachments:
    """Attachment name -> Slack private file URL, in download order."""

    refs: dict[str, str]


@dataclass(frozen=True)
class InlineAttachments:
    """Attachment name -> already fetched content (str is written as text)."""

    data: dict[str, Union[bytes, str]]


AttachmentSource = Union[NoAttachments, RemoteAttachments, InlineAttachments]


@dataclass(frozen=True)
class Structured:
    """A successfully fetched conversation."""

    payload: dict[str, Any]
    file_name: str
    attachments: AttachmentSource = field(default_factory=NoAttachments)


Result = Union[Failure, Structured]


@dataclass(frozen=True)
class FileHandle:
    """A file in the store, addressed by its vault-relative POSIX path."""

    path: str

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class AttachmentJob:
    name: str
    url: str


class PipelineState(str, Enum):
    START = "start"
    CLASSIFIED = "classified"
    PRIMARY_WRITTEN = "primary_written"
    ATTACHMENTS_WRITTEN = "attachments_written"
    DONE = "done"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class Outcome:
    """Final report of one pipeline run."""

    status: OutcomeStatus
    message: str
    # DONE on success, otherwise the last state completed before the run stopped
    state: PipelineState = PipelineState.START
    file_name: str | None = None
    written: list[FileHandle] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS
