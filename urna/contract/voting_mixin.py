"""Voting mixin: cast_vote and vote receipts."""

from __future__ import annotations

import logging

from urna.exceptions import AlreadyVoted, ElectionClosed
from urna.keys import Kind, make_key
from urna.models import Candidate, Election, VoteReceipt, Voter

logger = logging.getLogger("urna.contract")


class VotingMixin:
    def cast_vote(self, did: str, candidate_did: str, election_id: str) -> VoteReceipt:
        """Record one vote.

        The candidate increment, the voter's ``voted`` flag and the
        receipt are written in one transaction: all three or none.
        """
        election_key = make_key(Kind.ELECTION, election_id)
        voter_key = make_key(Kind.USER, did)
        candidate_key = make_key(Kind.CANDIDATE, candidate_did)

        with self._operation("cast_vote"):
            election = self._load(Election, election_key, "Election")
            if not election.is_open():
                raise ElectionClosed(f"Election {election_id} is not open for voting")

            voter = self._load(Voter, voter_key, "User")
            if voter.voted:
                raise AlreadyVoted(f"User {did} has already voted")

            candidate = self._load(Candidate, candidate_key, "Candidate")

            candidate.votes += 1
            voter.voted = True
            receipt = VoteReceipt(
                election_id=election_id,
                voter_did=did,
                candidate_did=candidate_did,
                timestamp=self._clock(),
            )
            self._save(candidate_key, candidate)
            self._save(voter_key, voter)
            self._save(make_key(Kind.VOTE, election_id, did), receipt)
            self._record("cast_vote", did, {"electionID": election_id, "candidateDID": candidate_did})

        logger.debug("Vote cast by %s in %s", did, election_id)
        return receipt

    def get_vote_receipt(self, election_id: str, did: str) -> VoteReceipt:
        key = make_key(Kind.VOTE, election_id, did)
        with self._operation("get_vote_receipt", write=False):
            return self._load(VoteReceipt, key, "Vote")
