"""Entry point that saves a fetched Slack conversation into an Obsidian vault."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from slack_vault.config import Settings
from slack_vault.errors import SlackVaultError
from slack_vault.fetcher import HttpAttachmentFetcher
from slack_vault.file_store import VaultFileStore
from slack_vault.notifications import DesktopNotifier
from slack_vault.pipeline import MISSING_CREDENTIALS_MESSAGE, planned_paths, process
from slack_vault.serializer import deserialize

load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Save a fetched Slack message and its files to a vault.")
    parser.add_argument(
        "--result",
        required=True,
        help="JSON file holding the fetch result (an object, or a string on failure); '-' reads stdin",
    )
    parser.add_argument("--vault", type=Path, help="Vault root directory (overrides VAULT_PATH)")
    parser.add_argument(
        "--attachment-folder",
        help="Folder inside the vault for saved files (overrides the vault's attachmentFolderPath)",
    )
    parser.add_argument("--dry-run", action="store_true", help="List the files that would be written")
    return parser


def load_result(source: str):
    try:
        if source == "-":
            return deserialize(sys.stdin.read())
        with open(source, encoding="utf-8") as handle:
            return deserialize(handle.read())
    except (OSError, TypeError, ValueError) as exc:
        raise SystemExit(f"Unable to read result from {source}: {exc}") from exc


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    settings = Settings()
    configure_logging(settings.log_level)

    overrides = settings.store_overrides
    if args.attachment_folder is not None:
        overrides["attachmentFolderPath"] = args.attachment_folder
    store = VaultFileStore(args.vault or settings.vault_path, overrides=overrides)
    result = load_result(args.result)

    if args.dry_run:
        try:
            paths = planned_paths(result, store)
        except SlackVaultError as exc:
            raise SystemExit(f"[DRY-RUN] Result would be rejected: {exc}") from exc
        if not paths:
            logging.info("[DRY-RUN] Result is a failure message; nothing would be written")
        for path in paths:
            logging.info("[DRY-RUN] Would write %s", path)
        return

    notifier = DesktopNotifier()
    if not settings.slack_api_token or not settings.slack_cookie:
        notifier.alert(MISSING_CREDENTIALS_MESSAGE)
        raise SystemExit(1)

    outcome = process(
        settings.slack_cookie,
        result,
        store,
        fetcher=HttpAttachmentFetcher(timeout=settings.http_timeout),
        notifier=notifier,
    )
    logging.info(
        "Run complete: status=%s files_written=%s",
        outcome.status.value,
        len(outcome.written),
    )
    if not outcome.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
