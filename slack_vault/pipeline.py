"""Persist a fetched Slack conversation and its attachments into the vault."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .classifier import classify
from .config import Settings
from .errors import FileAlreadyExistsError, StorageError
from .fetcher import AttachmentFetcher, HttpAttachmentFetcher
from .file_store import ATTACHMENT_FOLDER_KEY, FileStore, join_path
from .models import (
    AttachmentJob,
    Failure,
    FileHandle,
    InlineAttachments,
    Outcome,
    OutcomeStatus,
    PipelineState,
    RemoteAttachments,
    Structured,
)
from .notifications import DesktopNotifier, NotificationSink
from .serializer import canonical_record, serialize
from .utils import describe_error, redact

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = (
    "Successfully downloaded slack message and saved to attachment folder. "
    "File name saved to clipboard"
)
FAILURE_PREFIX = "There was a problem saving message results: "
MISSING_CREDENTIALS_MESSAGE = (
    "apiToken or cookie or url was null, undefined, or empty. Aborting operation"
)

FetchFunc = Callable[[str, str, str, dict], Any]


class PersistenceOrchestrator:
    """Writes one result: primary record first, then attachments in order.

    Not safe to share between runs; ``state`` and ``written`` describe the
    progress of the most recent ``run`` even when it raised.
    """

    def __init__(self, store: FileStore, fetcher: AttachmentFetcher, auth_cookie: str) -> None:
        self.store = store
        self.fetcher = fetcher
        self.auth_cookie = auth_cookie
        self.state = PipelineState.START
        self.written: list[FileHandle] = []

    def run(self, result: Any) -> Outcome:
        self.state = PipelineState.START
        self.written = []

        classified = classify(result)
        if isinstance(classified, Failure):
            logger.warning("Fetch returned a failure: %s", classified.message)
            return Outcome(OutcomeStatus.FAILURE, classified.message, state=self.state)
        self.state = PipelineState.CLASSIFIED

        folder = self.store.config_value(ATTACHMENT_FOLDER_KEY)
        self._write_primary(classified, folder)
        self.state = PipelineState.PRIMARY_WRITTEN

        self._write_attachments(classified, folder)
        self.state = PipelineState.ATTACHMENTS_WRITTEN
        logger.debug("Wrote %s files for %s", len(self.written), classified.file_name)

        self.state = PipelineState.DONE

        return Outcome(
            OutcomeStatus.SUCCESS,
            SUCCESS_MESSAGE,
            state=self.state,
            file_name=classified.file_name,
            written=list(self.written),
        )

    def _write_primary(self, structured: Structured, folder: str | None) -> None:
        text = serialize(canonical_record(structured))
        path = join_path(folder, structured.file_name)
        self._create(path, lambda p: self.store.create_text(p, text))

    def _write_attachments(self, structured: Structured, folder: str | None) -> None:
        attachments = structured.attachments
        if isinstance(attachments, RemoteAttachments):
            for name, url in attachments.refs.items():
                job = AttachmentJob(name=name, url=url)
                data = self.fetcher.fetch(job.url, self.auth_cookie)
                path = join_path(folder, job.name)
                self._create(path, lambda p: self.store.create_binary(p, data))
        elif isinstance(attachments, InlineAttachments):
            for name, content in attachments.data.items():
                path = join_path(folder, name)
                if isinstance(content, str):
                    self._create(path, lambda p: self.store.create_text(p, content))
                else:
                    self._create(path, lambda p: self.store.create_binary(p, content))

    def _create(self, path: str, create: Callable[[str], FileHandle]) -> FileHandle:
        """Create ``path``; on collision trash the existing file and retry once.

        Files written earlier in this run are never trashed.
        """
        if any(handle.path == path for handle in self.written):
            raise StorageError("Two files of this result resolve to the same path", path=path)
        try:
            handle = create(path)
        except FileAlreadyExistsError:
            existing = self._find_existing(path)
            logger.info("%s already exists; moving it to trash before recreating", existing.path)
            self.store.trash(existing)
            handle = create(path)
        self.written.append(handle)
        return handle

    def _find_existing(self, path: str) -> FileHandle:
        handles = self.store.list_files()
        for handle in handles:
            if handle.path == path:
                return handle
        candidates = [handle for handle in handles if handle.path.endswith("/" + path)]
        if len(candidates) == 1:
            return candidates[0]
        if candidates:
            raise StorageError(
                "File reported as existing matches several vault files",
                path=path,
                details={"candidates": [handle.path for handle in candidates]},
            )
        raise StorageError(
            "File reported as existing but was not found in the vault", path=path
        )


def process(
    auth_cookie: str,
    result: Any,
    store: FileStore,
    *,
    fetcher: AttachmentFetcher | None = None,
    notifier: NotificationSink | None = None,
) -> Outcome:
    """Save ``result`` and report the outcome; never raises."""
    notifier = notifier or DesktopNotifier()
    orchestrator = PersistenceOrchestrator(store, fetcher or HttpAttachmentFetcher(), auth_cookie)

    try:
        outcome = orchestrator.run(result)
    except Exception as exc:
        message = FAILURE_PREFIX + describe_error(exc)
        logger.exception("Saving failed after reaching state %s", orchestrator.state.value)
        outcome = Outcome(
            OutcomeStatus.FAILURE,
            message,
            state=orchestrator.state,
            written=list(orchestrator.written),
        )

    return report(outcome, notifier)


def report(outcome: Outcome, notifier: NotificationSink) -> Outcome:
    """Clipboard + notice on success, a single alert otherwise."""
    if outcome.ok:
        try:
            notifier.copy_to_clipboard(outcome.file_name)
        except Exception as exc:
            logger.exception("Copying %s to the clipboard failed", outcome.file_name)
            outcome.status = OutcomeStatus.FAILURE
            outcome.message = FAILURE_PREFIX + describe_error(exc)
            _deliver(notifier.alert, outcome.message)
            return outcome
        _deliver(notifier.notice, outcome.message)
    else:
        _deliver(notifier.alert, outcome.message)
    return outcome


def _deliver(send: Callable[[str], None], message: str) -> None:
    try:
        send(message)
    except Exception:
        logger.exception("Unable to show message to the user: %s", message)


def fetch_and_process(
    api_token: str | None,
    cookie: str | None,
    url: str | None,
    fetch_func: FetchFunc,
    settings: Settings,
    store: FileStore,
    *,
    fetcher: AttachmentFetcher | None = None,
    notifier: NotificationSink | None = None,
) -> Outcome | None:
    """Fetch the conversation behind ``url`` and save it.

    Returns ``None`` when there was nothing to do (empty URL).
    """
    notifier = notifier or DesktopNotifier()
    if not api_token or not cookie:
        _deliver(notifier.alert, MISSING_CREDENTIALS_MESSAGE)
        return Outcome(OutcomeStatus.FAILURE, MISSING_CREDENTIALS_MESSAGE)
    if not url:
        logger.debug("No URL given; nothing to fetch")
        return None

    logger.info("Fetching %s with token %s", url, redact(api_token))
    try:
        result = fetch_func(api_token, cookie, url, settings.feature_flags)
    except Exception as exc:
        logger.exception("Fetching %s failed", url)
        result = f"There was a problem getting slack messages. Error message: {describe_error(exc)}"

    if fetcher is None:
        fetcher = HttpAttachmentFetcher(timeout=settings.http_timeout)
    return process(cookie, result, store, fetcher=fetcher, notifier=notifier)


def planned_paths(result: Any, store: FileStore) -> list[str]:
    """Vault paths a run would create, without touching the store or network."""
    classified = classify(result)
    if isinstance(classified, Failure):
        return []
    folder = store.config_value(ATTACHMENT_FOLDER_KEY)
    paths = [join_path(folder, classified.file_name)]
    if isinstance(classified.attachments, RemoteAttachments):
        paths.extend(join_path(folder, name) for name in classified.attachments.refs)
    elif isinstance(classified.attachments, InlineAttachments):
        paths.extend(join_path(folder, name) for name in classified.attachments.data)
    return paths
