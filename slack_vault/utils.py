"""Utility helpers shared across modules."""

from __future__ import annotations

from hashlib import sha256

from .errors import SlackVaultError


def sha256_hex(payload: bytes) -> str:
    """Convenience wrapper for hex digests."""
    return sha256(payload).hexdigest()


def describe_error(exc: BaseException) -> str:
    """Human readable cause for an alert."""
    if isinstance(exc, SlackVaultError):
        return str(exc)
    text = str(exc)
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


def redact(secret: str | None, keep: int = 4) -> str:
    """Show only the first characters of a credential for log lines."""
    if not secret:
        return "<empty>"
    return f"{secret[:keep]}…" if len(secret) > keep else "…"
