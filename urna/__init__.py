"""
URNA: Election Ledger.

A key-value backed state machine for single-admin, one-vote-per-voter
elections: admins, voters, candidates and elections stored as canonical
JSON under prefixed keys, with a hash-chained audit trail.
"""

__version__ = "1.0.0"

from urna.contract import LedgerContract, open_contract

__all__ = ["LedgerContract", "open_contract", "__version__"]
