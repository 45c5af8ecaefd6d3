"""URNA Contract: package init."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from urna.audit import AuditTrail
from urna.contract.admin_mixin import AdminMixin
from urna.contract.base import ContractBase
from urna.contract.candidate_mixin import CandidateMixin
from urna.contract.election_mixin import ElectionMixin
from urna.contract.voter_mixin import VoterMixin
from urna.contract.voting_mixin import VotingMixin
from urna.models import AuditEntry, RawRecord
from urna.storage import open_store

logger = logging.getLogger("urna")


class LedgerContract(
    AdminMixin,
    VoterMixin,
    CandidateMixin,
    ElectionMixin,
    VotingMixin,
    ContractBase,
):
    """The election ledger state machine (composite of operation mixins)."""

    # ─── Audit Trail ──────────────────────────────────────────────

    def _require_audit(self) -> AuditTrail:
        if self.audit is None:
            raise RuntimeError("Audit trail is disabled (URNA_AUDIT=0)")
        return self.audit

    def get_audit_log(self, actor: Optional[str] = None) -> list[Union[AuditEntry, RawRecord]]:
        with self._operation("get_audit_log", write=False):
            return self._require_audit().entries(actor)

    def verify_audit_trail(self) -> dict:
        with self._operation("verify_audit_trail", write=False):
            return self._require_audit().verify()

    # ─── Lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def open_contract(
    db_path: Optional[Union[str, Path]] = None,
    mode: Optional[str] = None,
    audit: Optional[bool] = None,
) -> LedgerContract:
    """Open a contract over the configured store."""
    store = open_store(mode, db_path)
    logger.debug("Ledger contract opened on %s", type(store).__name__)
    return LedgerContract(store, audit=audit)


__all__ = ["LedgerContract", "open_contract"]
