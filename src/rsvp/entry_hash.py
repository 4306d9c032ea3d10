import hashlib
import json
import logging

from src.config.settings import settings

logger = logging.getLogger(__name__)


def canonical_entry(
    *,
    token: str | None,
    members: list[dict],
    extras: list[str],
    timestamp: str,
    event_id: str | None = None,
) -> str:
    """Compact JSON in the same key order and spacing a browser's JSON.stringify emits."""
    return json.dumps(
        {
            "event": event_id or settings.event_id,
            "token": token or None,
            "timestamp": timestamp,
            "members": members,
            "extras": extras,
        },
        ensure_ascii=False,
        separators=(",", ":"),
    )


def compute_entry_hash(
    *,
    token: str | None,
    members: list[dict],
    extras: list[str] | None = None,
    timestamp: str,
    event_id: str | None = None,
) -> str:
    """SHA-256 of the canonical entry as lowercase hex.

    Interpreters built without SHA-256 get the canonical JSON itself back, so
    callers must not assume a fixed length.
    """
    payload = canonical_entry(
        token=token,
        members=members,
        extras=extras or [],
        timestamp=timestamp,
        event_id=event_id,
    )
    try:
        digest = hashlib.new("sha256")
    except ValueError:
        logger.warning("sha256 unavailable, using canonical entry as hash")
        return payload
    digest.update(payload.encode("utf-8"))
    return digest.hexdigest()
