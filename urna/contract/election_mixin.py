"""Election mixin: lifecycle (open → closed → reset), winner declaration and lookup."""

from __future__ import annotations

import logging
from typing import Optional, Union

from urna.exceptions import (
    AlreadyClosed,
    AlreadyExists,
    ElectionNotClosed,
    InvalidInput,
    NotFound,
    WinnerNotDeclared,
)
from urna.keys import SEPARATOR, Kind, kind_prefix, make_key
from urna.models import (
    ELECTION_STATUSES,
    ROLE_ADMIN,
    ROLE_CANDIDATE,
    STATUS_CLOSED,
    STATUS_OPEN,
    Candidate,
    Election,
    RawRecord,
    VoteReceipt,
    decode_record,
    peek_role,
)
from urna.storage import scan_prefix

logger = logging.getLogger("urna.contract")


class ElectionMixin:
    def create_election(
        self,
        election_id: str,
        status: str = STATUS_OPEN,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Election:
        key = make_key(Kind.ELECTION, election_id)
        if status not in ELECTION_STATUSES:
            raise InvalidInput(f"Unknown election status {status!r}")

        with self._operation("create_election"):
            if self._exists(key):
                raise AlreadyExists(f"Election {election_id} already exists")
            election = Election(
                election_id=election_id,
                status=status,
                start_date=start_date or self._clock(),
                end_date=end_date,
            )
            self._save(key, election)
            self._record("create_election", election_id, {"status": status})

        logger.info("Election %s created (%s)", election_id, status)
        return election

    def close_election(self, election_id: str) -> Election:
        """One-way open → closed transition."""
        key = make_key(Kind.ELECTION, election_id)
        with self._operation("close_election"):
            election = self._load(Election, key, "Election")
            if election.status == STATUS_CLOSED:
                raise AlreadyClosed(f"Election {election_id} is already closed")
            election.status = STATUS_CLOSED
            if election.end_date is None:
                election.end_date = self._clock()
            self._save(key, election)
            self._record("close_election", election_id)

        logger.info("Election %s closed", election_id)
        return election

    def get_election(self, election_id: str) -> Union[Election, RawRecord]:
        key = make_key(Kind.ELECTION, election_id)
        with self._operation("get_election", write=False):
            return self._load_or_raw(Election, key, "Election")

    def get_all_elections(self) -> list[Union[Election, RawRecord]]:
        with self._operation("get_all_elections", write=False):
            return self._scan(Election, Kind.ELECTION)

    def reset_election(self, election_id: str) -> dict:
        """Wipe candidates, this election's vote receipts and every non-admin user.

        The admin record survives. Each delete targets a key taken from a
        scan snapshot, never a key written during the reset.
        """
        key = make_key(Kind.ELECTION, election_id)
        removed = {"candidates": 0, "votes": 0, "users": 0}

        with self._operation("reset_election"):
            election = self._load_or_raw(Election, key, "Election")
            if isinstance(election, Election):
                # unset only; the record itself is deleted below
                election.status = None

            for candidate_key, _ in scan_prefix(self.store, kind_prefix(Kind.CANDIDATE)):
                self.store.delete(candidate_key)
                removed["candidates"] += 1

            vote_prefix = make_key(Kind.VOTE, election_id) + SEPARATOR
            for vote_key, raw in scan_prefix(self.store, vote_prefix):
                receipt = decode_record(VoteReceipt, vote_key, raw)
                if isinstance(receipt, VoteReceipt) and receipt.election_id == election_id:
                    self.store.delete(vote_key)
                    removed["votes"] += 1

            for user_key, raw in scan_prefix(self.store, kind_prefix(Kind.USER)):
                if peek_role(raw) == ROLE_ADMIN:
                    continue
                self.store.delete(user_key)
                removed["users"] += 1

            self.store.delete(key)
            self._record("reset_election", election_id, removed)

        logger.info(
            "Election %s reset: %d candidate(s), %d vote(s), %d user(s) removed",
            election_id, removed["candidates"], removed["votes"], removed["users"],
        )
        return removed

    def declare_winner(self, admin_did: str, election_id: str) -> Candidate:
        """Assign ``election.winner`` to the top candidate of a closed election.

        Ties go to the candidate whose key sorts first.
        """
        key = make_key(Kind.ELECTION, election_id)
        with self._operation("declare_winner"):
            self._verify_admin(admin_did)
            election = self._load(Election, key, "Election")
            if election.status != STATUS_CLOSED:
                raise ElectionNotClosed(f"Election {election_id} must be closed before declaring a winner")
            if election.winner:
                raise AlreadyExists(f"Election {election_id} already has a winner")

            candidates = [
                c for c in self._scan_entities(Candidate, Kind.CANDIDATE)
                if c.role == ROLE_CANDIDATE
            ]
            if not candidates:
                raise NotFound("No candidates to declare a winner from")

            winner = candidates[0]
            for candidate in candidates[1:]:
                if candidate.votes > winner.votes:
                    winner = candidate

            election.winner = winner.did
            self._save(key, election)
            self._record("declare_winner", election_id, {"winner": winner.did, "votes": winner.votes})

        logger.info("Election %s winner: %s (%d votes)", election_id, winner.did, winner.votes)
        return winner

    def see_winner(self, election_id: str) -> dict:
        key = make_key(Kind.ELECTION, election_id)
        with self._operation("see_winner", write=False):
            election = self._load(Election, key, "Election")
            if not election.winner:
                raise WinnerNotDeclared(f"No winner declared for election {election_id}")
            winner = self._load(Candidate, make_key(Kind.CANDIDATE, election.winner), "Winning candidate")
            return {
                "electionID": election.election_id,
                "electionStatus": election.status,
                "winner": {
                    "did": winner.did,
                    "name": winner.name,
                    "votes": winner.votes,
                    "dob": winner.dob,
                    "birthplace": winner.birthplace,
                    "logo": winner.logo,
                },
            }
