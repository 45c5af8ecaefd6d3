"""URNA v1.0: Entity Model.

One dataclass per record kind. Stored values are camelCase JSON objects
(``userName``, ``passwordHash``, ``electionID``...); ``to_dict`` and
``from_dict`` translate between the two. Records are decoded explicitly
for the prefix they were read from; a value that cannot be decoded is
surfaced as a ``RawRecord`` instead of aborting the scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Type, TypeVar, Union

from urna.canonical import decode_value

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLE_CANDIDATE = "candidate"

STATUS_OPEN = "open"
STATUS_CLOSED = "closed"
ELECTION_STATUSES = (STATUS_OPEN, STATUS_CLOSED)


@dataclass
class Admin:
    did: str
    user_name: str
    dob: str
    password_hash: str
    role: str = ROLE_ADMIN

    def to_dict(self) -> dict:
        return {
            "did": self.did,
            "userName": self.user_name,
            "dob": self.dob,
            "passwordHash": self.password_hash,
            "role": self.role,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Admin":
        return cls(
            did=data["did"],
            user_name=data["userName"],
            dob=data["dob"],
            password_hash=data["passwordHash"],
            role=data.get("role", ROLE_ADMIN),
        )


@dataclass
class Voter:
    did: str
    name: str
    dob: str
    birthplace: str
    user_name: str
    password_hash: str
    role: str = ROLE_USER
    voted: bool = False

    def to_dict(self) -> dict:
        return {
            "did": self.did,
            "name": self.name,
            "dob": self.dob,
            "birthplace": self.birthplace,
            "userName": self.user_name,
            "passwordHash": self.password_hash,
            "role": self.role,
            "voted": self.voted,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Voter":
        return cls(
            did=data["did"],
            name=data["name"],
            dob=data["dob"],
            birthplace=data["birthplace"],
            user_name=data["userName"],
            password_hash=data["passwordHash"],
            role=data.get("role", ROLE_USER),
            voted=bool(data.get("voted", False)),
        )


@dataclass
class Candidate:
    did: str
    name: str
    dob: str
    logo: str
    birthplace: str
    role: str = ROLE_CANDIDATE
    votes: int = 0

    def to_dict(self) -> dict:
        return {
            "did": self.did,
            "name": self.name,
            "dob": self.dob,
            "logo": self.logo,
            "birthplace": self.birthplace,
            "role": self.role,
            "votes": self.votes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Candidate":
        return cls(
            did=data["did"],
            name=data["name"],
            dob=data["dob"],
            logo=data["logo"],
            birthplace=data["birthplace"],
            role=data.get("role", ROLE_CANDIDATE),
            votes=int(data.get("votes", 0)),
        )


@dataclass
class Election:
    election_id: str
    status: Optional[str]
    start_date: str
    end_date: Optional[str] = None
    winner: Optional[str] = None

    def is_open(self) -> bool:
        return self.status == STATUS_OPEN

    def to_dict(self) -> dict:
        data = {
            "electionID": self.election_id,
            "status": self.status,
            "startDate": self.start_date,
            "winner": self.winner,
        }
        if self.end_date is not None:
            data["endDate"] = self.end_date
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Election":
        return cls(
            election_id=data["electionID"],
            status=data.get("status"),
            start_date=data["startDate"],
            end_date=data.get("endDate"),
            winner=data.get("winner"),
        )


@dataclass
class VoteReceipt:
    election_id: str
    voter_did: str
    candidate_did: str
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "electionID": self.election_id,
            "voterDID": self.voter_did,
            "candidateDID": self.candidate_did,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "VoteReceipt":
        return cls(
            election_id=data["electionID"],
            voter_did=data["voterDID"],
            candidate_did=data["candidateDID"],
            timestamp=data["timestamp"],
        )


@dataclass
class AuditEntry:
    seq: int
    action: str
    actor: str
    timestamp: str
    prev_hash: str
    hash: str
    detail: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "seq": self.seq,
            "action": self.action,
            "actor": self.actor,
            "detail": self.detail,
            "timestamp": self.timestamp,
            "prevHash": self.prev_hash,
            "hash": self.hash,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditEntry":
        return cls(
            seq=int(data["seq"]),
            action=data["action"],
            actor=data["actor"],
            detail=data.get("detail") or {},
            timestamp=data["timestamp"],
            prev_hash=data["prevHash"],
            hash=data["hash"],
        )


@dataclass(frozen=True)
class RawRecord:
    """A stored value that could not be decoded as its kind's entity."""

    key: str
    raw: str

    def to_dict(self) -> dict:
        return {"key": self.key, "raw": self.raw}


Entity = Union[Admin, Voter, Candidate, Election, VoteReceipt, AuditEntry]
E = TypeVar("E", Admin, Voter, Candidate, Election, VoteReceipt, AuditEntry)


def decode_record(model: Type[E], key: str, raw: bytes) -> Union[E, RawRecord]:
    """Decode ``raw`` as ``model``, falling back to a RawRecord.

    The fallback covers invalid UTF-8/JSON as well as well-formed JSON
    that is not an object or lacks the model's required fields.
    """
    try:
        data: Any = decode_value(raw)
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return model.from_dict(data)
    except (ValueError, KeyError, TypeError):
        return RawRecord(key=key, raw=raw.decode("utf-8", errors="replace"))


def peek_role(raw: bytes) -> Optional[str]:
    """Return the ``role`` field of a stored object without full decoding."""
    try:
        data = decode_value(raw)
    except ValueError:
        return None
    return data.get("role") if isinstance(data, dict) else None
