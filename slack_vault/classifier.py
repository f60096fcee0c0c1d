"""Turn whatever the fetch function returned into a tagged result."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .errors import InvalidResultError
from .models import (
    AttachmentSource,
    Failure,
    InlineAttachments,
    NoAttachments,
    RemoteAttachments,
    Result,
    Structured,
)

logger = logging.getLogger(__name__)

ATTACHMENT_REFS_KEY = "attachment_refs"
ATTACHMENT_DATA_KEY = "attachment_data"


def classify(result: Any) -> Result:
    """Classify a raw fetch result as ``Failure`` or ``Structured``.

    Strings are failure messages. Mappings must carry a non-empty ``file_name``
    and at most one of ``attachment_refs`` / ``attachment_data``.
    """
    if isinstance(result, str):
        return Failure(result)
    if isinstance(result, (Failure, Structured)):
        return result
    if not isinstance(result, Mapping):
        raise InvalidResultError(
            f"Unsupported result type {type(result).__name__}; expected a string or a mapping"
        )

    file_name = result.get("file_name")
    if not isinstance(file_name, str) or not file_name.strip():
        raise InvalidResultError("Result is missing a file_name", details={"keys": sorted(map(str, result))})

    attachments = _attachment_source(result)
    payload = {
        key: value
        for key, value in result.items()
        if key not in (ATTACHMENT_REFS_KEY, ATTACHMENT_DATA_KEY)
    }
    logger.debug(
        "Classified structured result %s with %s", file_name, type(attachments).__name__
    )
    return Structured(payload=payload, file_name=file_name, attachments=attachments)


def _attachment_source(result: Mapping) -> AttachmentSource:
    refs = result.get(ATTACHMENT_REFS_KEY)
    data = result.get(ATTACHMENT_DATA_KEY)

    if refs and data:
        raise InvalidResultError(
            "Result carries both attachment_refs and attachment_data; expected at most one"
        )
    if refs:
        if not isinstance(refs, Mapping):
            raise InvalidResultError("attachment_refs must map attachment names to URLs")
        for name, url in refs.items():
            if not isinstance(url, str) or not url:
                raise InvalidResultError(
                    "attachment_refs entry has no URL", details={"name": name}
                )
        return RemoteAttachments(refs={str(name): url for name, url in refs.items()})
    if data:
        if not isinstance(data, Mapping):
            raise InvalidResultError("attachment_data must map attachment names to content")
        for name, content in data.items():
            if not isinstance(content, (bytes, bytearray, str)):
                raise InvalidResultError(
                    "attachment_data entry is neither bytes nor text",
                    details={"name": name, "type": type(content).__name__},
                )
        return InlineAttachments(
            data={
                str(name): bytes(content) if isinstance(content, bytearray) else content
                for name, content in data.items()
            }
        )
    return NoAttachments()
