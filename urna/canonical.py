"""URNA v1.0: Canonical Serialization.

Provides deterministic JSON serialization for every value written to the
ledger, and the null-byte separated hash used by the audit chain.

Identical logical content always produces byte-identical values, so
stored records can be hashed or diffed by downstream auditors.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

# ─── Canonical JSON ───────────────────────────────────────────────


def canonical_json(obj: Any) -> str:
    """Deterministic JSON: sorted keys, no whitespace, ASCII-safe.

    ``sort_keys`` applies at every nesting level, so nested objects are
    ordered too.

    Args:
        obj: Any JSON-serializable object.

    Returns:
        Canonical JSON string.
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"),
        ensure_ascii=True, default=str,
    )


def encode_value(obj: Any) -> bytes:
    """Encode an entity dict into the bytes stored under its key."""
    return canonical_json(obj).encode("utf-8")


def decode_value(raw: bytes) -> Any:
    """Decode stored bytes back into JSON data.

    Raises:
        ValueError: If the bytes are not valid UTF-8 JSON.
    """
    return json.loads(raw.decode("utf-8"))


# ─── Audit Hash ──────────────────────────────────────────────────

GENESIS_HASH = "GENESIS"


def compute_entry_hash(
    prev_hash: str,
    action: str,
    actor: str,
    detail_json: str,
    timestamp: str,
) -> str:
    """Compute an audit entry hash using null-byte separated canonical form.

    Uses \\x00 as field separator so fields containing dashes or colons
    cannot shift the boundary between two fields.

    Args:
        prev_hash: Hash of the previous entry, or ``GENESIS``.
        action: Operation name (register_admin, cast_vote, ...).
        actor: DID (or election ID) the operation acted on.
        detail_json: Canonical JSON string of the entry detail.
        timestamp: ISO 8601 UTC timestamp.

    Returns:
        SHA-256 hex digest of the canonical input.
    """
    h_input = (
        f"{prev_hash}\x00{action}\x00{actor}"
        f"\x00{detail_json}\x00{timestamp}"
    )
    return hashlib.sha256(h_input.encode("utf-8")).hexdigest()
