"""URNA v1.0: Key Scheme.

Every record lives in one flat, lexicographically ordered keyspace and is
addressed as ``<kind>-<id>``. All records of one kind are enumerated with
the half-open range ``[<kind>-, <kind>~)``: ``-`` sorts before ``~``, and
``~`` sorts after every printable ASCII id character.
"""

from __future__ import annotations

from enum import Enum

from urna.exceptions import InvalidInput

SEPARATOR = "-"
RANGE_END = "~"


class Kind(str, Enum):
    ADMIN = "admin"
    USER = "user"
    CANDIDATE = "candidate"
    ELECTION = "election"
    VOTE = "vote"
    LOG = "log"


# Bookkeeping keys. ``meta`` is not an entity kind, so none of the
# per-kind scans ever reach them.
ADMIN_LOCK_KEY = "meta-admin-lock"
AUDIT_HEAD_KEY = "meta-audit-head"


def require_id(value: str | None, what: str = "id") -> str:
    """Return ``value`` or raise InvalidInput when it is missing/blank."""
    if value is None or not str(value).strip():
        raise InvalidInput(f"{what} cannot be empty")
    return str(value)


def make_key(kind: Kind, *parts: str) -> str:
    """Build ``<kind>-<part>[-<part>...]``."""
    for part in parts:
        require_id(part, f"{kind.value} id")
    return SEPARATOR.join((kind.value, *parts))


def kind_prefix(kind: Kind) -> str:
    return kind.value + SEPARATOR


def prefix_range(prefix: str) -> tuple[str, str]:
    """Return the ``[low, high)`` scan bounds covering every key under ``prefix``.

    ``prefix`` must end with the separator: ``"admin-"`` maps to
    ``("admin-", "admin~")`` and ``"vote-E1-"`` to ``("vote-E1-", "vote-E1~")``.
    """
    if not prefix.endswith(SEPARATOR):
        raise ValueError(f"scan prefix must end with {SEPARATOR!r}: {prefix!r}")
    return prefix, prefix[:-1] + RANGE_END


def kind_range(kind: Kind) -> tuple[str, str]:
    return prefix_range(kind_prefix(kind))


def split_key(key: str) -> tuple[str, str]:
    """Split a key into ``(kind, id)`` at the first separator."""
    kind, _, ident = key.partition(SEPARATOR)
    return kind, ident
