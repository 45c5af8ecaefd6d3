"""Candidate registration, patching, deletion and listings."""

import pytest

from conftest import ADMIN
from urna.exceptions import (
    AlreadyExists,
    NoOpenElection,
    NotAuthenticated,
    NotAuthorized,
    NotFound,
)
from urna.models import Candidate, RawRecord


class TestCreateCandidate:
    def test_requires_open_election(self, contract, admin):
        with pytest.raises(NoOpenElection):
            contract.create_candidate(ADMIN, "C1", "Alice", "d", "l", "NY")
        assert contract.see_vote_count() == []

    def test_closed_election_does_not_count(self, contract, admin):
        contract.create_election("E0", "closed", "2024-01-01")
        with pytest.raises(NoOpenElection):
            contract.create_candidate(ADMIN, "C1", "Alice", "d", "l", "NY")

    def test_gated_on_open_election(self, contract, admin):
        """Rejected first, accepted once an election opens."""
        with pytest.raises(NoOpenElection):
            contract.create_candidate(ADMIN, "C1", "Alice", "d", "l", "NY")
        contract.create_election("E1", "open", "2025-01-01")
        candidate = contract.create_candidate(ADMIN, "C1", "Alice", "d", "l", "NY")
        assert candidate.votes == 0
        assert candidate.role == "candidate"

    def test_duplicate(self, ledger):
        with pytest.raises(AlreadyExists):
            ledger.create_candidate(ADMIN, "C1", "Other", "d", "l", "SF")
        assert ledger.see_vote_count()[0]["name"] == "Alice"

    def test_non_admin_rejected_before_write(self, ledger):
        with pytest.raises(NotFound):
            ledger.create_candidate("V1", "C9", "Eve", "d", "l", "SF")
        assert [row["did"] for row in ledger.see_vote_count()] == ["C1", "C2"]

    def test_wrong_role_rejected(self, ledger):
        ledger.store.put(
            "admin-mallory",
            b'{"did":"mallory","dob":"d","passwordHash":"h","role":"user","userName":"m"}',
        )
        with pytest.raises(NotAuthorized):
            ledger.create_candidate("mallory", "C9", "Eve", "d", "l", "SF")


class TestUpdateCandidate:
    def test_patch_keeps_votes(self, ledger):
        ledger.cast_vote("V1", "C1", "E1")
        candidate = ledger.update_candidate("C1", logo="new.png")
        assert candidate.logo == "new.png"
        assert candidate.name == "Alice"
        assert candidate.votes == 1

    def test_missing(self, ledger):
        with pytest.raises(NotFound):
            ledger.update_candidate("C9", name="x")


class TestDeleteCandidate:
    def test_delete(self, ledger):
        ledger.delete_candidate(ADMIN, "C2")
        assert [row["did"] for row in ledger.see_vote_count()] == ["C1"]

    def test_missing(self, ledger):
        with pytest.raises(NotFound):
            ledger.delete_candidate(ADMIN, "C9")

    def test_requires_admin(self, ledger):
        with pytest.raises(NotFound):
            ledger.delete_candidate("V1", "C2")
        assert len(ledger.see_vote_count()) == 2


class TestListings:
    def test_admin_listing(self, ledger):
        records = ledger.get_all_candidates(ADMIN)
        assert [c.did for c in records] == ["C1", "C2"]

    def test_user_listing(self, ledger):
        records = ledger.get_all_candidates_users("V1")
        assert all(isinstance(c, Candidate) for c in records)
        assert len(records) == 2

    @pytest.mark.parametrize("caller", ["", None])
    def test_missing_caller(self, ledger, caller):
        with pytest.raises(NotAuthenticated):
            ledger.get_all_candidates(caller)
        with pytest.raises(NotAuthenticated):
            ledger.get_all_candidates_users(caller)

    def test_admin_listing_requires_admin(self, ledger):
        with pytest.raises(NotFound):
            ledger.get_all_candidates("V1")

    def test_corrupt_record_is_surfaced(self, ledger):
        ledger.store.put("candidate-C3", b"{oops")
        records = ledger.get_all_candidates_users("V1")
        assert len(records) == 3
        assert records[2] == RawRecord(key="candidate-C3", raw="{oops")
        # the tally only counts well-formed candidates
        assert len(ledger.see_vote_count()) == 2

    def test_see_vote_count(self, ledger):
        ledger.cast_vote("V1", "C2", "E1")
        ledger.cast_vote("V2", "C2", "E1")
        assert ledger.see_vote_count() == [
            {"did": "C1", "name": "Alice", "votes": 0},
            {"did": "C2", "name": "Bob", "votes": 2},
        ]
