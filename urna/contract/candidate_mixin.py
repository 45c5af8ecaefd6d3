"""Candidate mixin: creation gated on an open election, patching, deletion, listings."""

from __future__ import annotations

import logging
from typing import Optional, Union

from urna.exceptions import AlreadyExists, NoOpenElection, NotAuthenticated
from urna.keys import Kind, make_key
from urna.models import ROLE_CANDIDATE, Candidate, Election, RawRecord

logger = logging.getLogger("urna.contract")


class CandidateMixin:
    def create_candidate(
        self,
        admin_did: str,
        did: str,
        name: str,
        dob: str,
        logo: str,
        birthplace: str,
    ) -> Candidate:
        key = make_key(Kind.CANDIDATE, did)
        with self._operation("create_candidate"):
            self._verify_admin(admin_did)
            if not self._has_open_election():
                raise NoOpenElection("Cannot create a candidate: no election is open")
            if self._exists(key):
                raise AlreadyExists(f"Candidate {did} already exists")

            candidate = Candidate(did=did, name=name, dob=dob, logo=logo, birthplace=birthplace)
            self._save(key, candidate)
            self._record("create_candidate", did, {"admin": admin_did})

        logger.info("Candidate %s registered by %s", did, admin_did)
        return candidate

    def update_candidate(
        self,
        did: str,
        name: Optional[str] = None,
        dob: Optional[str] = None,
        logo: Optional[str] = None,
        birthplace: Optional[str] = None,
    ) -> Candidate:
        """Patch the supplied fields. ``votes`` is never touched."""
        key = make_key(Kind.CANDIDATE, did)
        changes = {"name": name, "dob": dob, "logo": logo, "birthplace": birthplace}
        with self._operation("update_candidate"):
            candidate = self._load(Candidate, key, "Candidate")
            changed = []
            for attr, value in changes.items():
                if value is not None:
                    setattr(candidate, attr, value)
                    changed.append(attr)
            self._save(key, candidate)
            self._record("update_candidate", did, {"fields": sorted(changed)})
            return candidate

    def delete_candidate(self, admin_did: str, candidate_did: str) -> None:
        """Remove a candidate. Votes tallied on the record go with it."""
        key = make_key(Kind.CANDIDATE, candidate_did)
        with self._operation("delete_candidate"):
            self._verify_admin(admin_did)
            self._load_or_raw(Candidate, key, "Candidate")
            self.store.delete(key)
            self._record("delete_candidate", candidate_did, {"admin": admin_did})
        logger.info("Candidate %s deleted by %s", candidate_did, admin_did)

    def get_all_candidates(self, did: str) -> list[Union[Candidate, RawRecord]]:
        """Admin listing; corrupt records come back as RawRecord."""
        with self._operation("get_all_candidates", write=False):
            _require_caller(did)
            self._verify_admin(did)
            return self._scan(Candidate, Kind.CANDIDATE)

    def get_all_candidates_users(self, did: str) -> list[Union[Candidate, RawRecord]]:
        """Listing for any authenticated caller."""
        with self._operation("get_all_candidates_users", write=False):
            _require_caller(did)
            return self._scan(Candidate, Kind.CANDIDATE)

    def see_vote_count(self) -> list[dict]:
        """Public tally: ``{did, name, votes}`` per candidate."""
        with self._operation("see_vote_count", write=False):
            return [
                {"did": c.did, "name": c.name, "votes": c.votes}
                for c in self._scan_entities(Candidate, Kind.CANDIDATE)
                if c.role == ROLE_CANDIDATE
            ]

    def _has_open_election(self) -> bool:
        return any(e.is_open() for e in self._scan_entities(Election, Kind.ELECTION))


def _require_caller(did: Optional[str]) -> None:
    if did is None or not str(did).strip():
        raise NotAuthenticated("A caller DID is required")
