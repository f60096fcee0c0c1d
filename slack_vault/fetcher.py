"""Authenticated download of Slack file attachments."""

from __future__ import annotations

import logging
from typing import Protocol

import requests

from .errors import TransportError

logger = logging.getLogger(__name__)


class AttachmentFetcher(Protocol):
    def fetch(self, remote_ref: str, auth_cookie: str) -> bytes:
        ...


def build_request(url: str, auth_cookie: str) -> dict:
    """Request parameters for a cookie-authenticated GET."""
    return {"url": url, "method": "GET", "headers": {"cookie": f"d={auth_cookie}"}}


class HttpAttachmentFetcher:
    """Downloads ``url_private`` style links with the user's ``d`` cookie."""

    def __init__(self, session: requests.Session | None = None, timeout: float = 30) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self, remote_ref: str, auth_cookie: str) -> bytes:
        params = build_request(remote_ref, auth_cookie)
        logger.debug("Downloading attachment %s", remote_ref)
        try:
            resp = self.session.request(timeout=self.timeout, **params)
        except requests.RequestException as exc:
            raise TransportError(f"Download of {remote_ref} failed: {exc}", url=remote_ref) from exc

        if not 200 <= resp.status_code < 300:
            logger.error("Attachment request failed (%s): %s", resp.status_code, remote_ref)
            raise TransportError(
                f"Download of {remote_ref} returned HTTP {resp.status_code}",
                url=remote_ref,
                status_code=resp.status_code,
            )
        return resp.content
