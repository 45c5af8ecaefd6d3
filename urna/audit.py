"""
URNA v1.0: Audit Trail.

Hash-chained log of every committed ledger mutation. Entries are stored
as ``log-<seq>`` records next to the entities they describe and are
written inside the same transaction, so an operation and its audit entry
commit together or not at all. The chain head is kept under
``meta-audit-head`` to avoid a scan per append.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from urna.canonical import (
    GENESIS_HASH,
    canonical_json,
    compute_entry_hash,
    decode_value,
    encode_value,
)
from urna.exceptions import StorageError
from urna.keys import AUDIT_HEAD_KEY, Kind, kind_prefix, make_key
from urna.metrics import metrics
from urna.models import AuditEntry, RawRecord, decode_record
from urna.storage import KeyValueStore, scan_prefix
from urna.temporal import now_iso

logger = logging.getLogger("urna.audit")

SEQ_WIDTH = 12


def entry_key(seq: int) -> str:
    # Zero-padded so lexicographic order equals numeric order.
    return make_key(Kind.LOG, f"{seq:0{SEQ_WIDTH}d}")


class AuditTrail:
    """Append-only, tamper-evident log over a KeyValueStore."""

    def __init__(self, store: KeyValueStore, clock: Callable[[], str] = now_iso):
        self.store = store
        self._clock = clock

    def _head(self) -> tuple[int, str]:
        """Return ``(seq, hash)`` of the last sealed entry.

        Raises:
            StorageError: If the head record cannot be decoded.
        """
        raw = self.store.get(AUDIT_HEAD_KEY)
        if raw is None:
            return 0, GENESIS_HASH
        try:
            head = decode_value(raw)
            return int(head["seq"]), str(head["hash"])
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Corrupt audit head under %s", AUDIT_HEAD_KEY)
            raise StorageError("audit head is corrupt") from e

    def append(self, action: str, actor: str, detail: Optional[dict[str, Any]] = None) -> AuditEntry:
        """Seal one entry onto the chain. Call inside the operation's transaction."""
        seq, prev_hash = self._head()
        seq += 1
        detail = detail or {}
        timestamp = self._clock()
        entry_hash = compute_entry_hash(prev_hash, action, actor, canonical_json(detail), timestamp)
        entry = AuditEntry(
            seq=seq,
            action=action,
            actor=actor,
            detail=detail,
            timestamp=timestamp,
            prev_hash=prev_hash,
            hash=entry_hash,
        )
        self.store.put(entry_key(seq), encode_value(entry.to_dict()))
        self.store.put(AUDIT_HEAD_KEY, encode_value({"seq": seq, "hash": entry_hash}))
        logger.debug("Audit #%d %s(%s) %s", seq, action, actor, entry_hash[:12])
        return entry

    def entries(self, actor: Optional[str] = None) -> list[Union[AuditEntry, RawRecord]]:
        """Every entry in sequence order, optionally only those for ``actor``."""
        result: list[Union[AuditEntry, RawRecord]] = []
        for key, raw in scan_prefix(self.store, kind_prefix(Kind.LOG)):
            record = decode_record(AuditEntry, key, raw)
            if actor is not None and (isinstance(record, RawRecord) or record.actor != actor):
                continue
            result.append(record)
        return result

    def verify(self) -> dict:
        """Walk the whole chain and recompute every hash."""
        violations: list[dict] = []
        expected_prev = GENESIS_HASH
        checked = 0

        for key, raw in scan_prefix(self.store, kind_prefix(Kind.LOG)):
            checked += 1
            record = decode_record(AuditEntry, key, raw)
            if isinstance(record, RawRecord):
                violations.append({"key": key, "type": "corrupt_entry"})
                expected_prev = None
                continue

            if expected_prev is not None and record.prev_hash != expected_prev:
                violations.append({
                    "seq": record.seq,
                    "type": "chain_break",
                    "expected": expected_prev,
                    "actual": record.prev_hash,
                })

            computed = compute_entry_hash(
                record.prev_hash,
                record.action,
                record.actor,
                canonical_json(record.detail),
                record.timestamp,
            )
            if computed != record.hash:
                violations.append({
                    "seq": record.seq,
                    "type": "hash_mismatch",
                    "computed": computed,
                    "stored": record.hash,
                })
            expected_prev = record.hash

        try:
            head_seq, head_hash = self._head()
        except StorageError:
            violations.append({"key": AUDIT_HEAD_KEY, "type": "corrupt_head"})
        else:
            if head_seq != checked or (checked and head_hash != expected_prev):
                violations.append({
                    "type": "head_mismatch",
                    "head_seq": head_seq,
                    "entries": checked,
                })

        metrics.set_gauge("urna_audit_entries", checked)
        if violations:
            metrics.inc("urna_audit_violations_total", value=len(violations))
            logger.warning("Audit trail verification found %d violation(s)", len(violations))

        return {
            "valid": not violations,
            "violations": violations,
            "entries_checked": checked,
        }
