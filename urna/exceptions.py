"""
URNA v1.0: Custom Exceptions.

Typed error hierarchy for ledger operations. Every rejected operation
raises one of these before any write reaches the store, so callers can
map them onto their own transport (HTTP status, exit code, ...).
"""


class UrnaError(Exception):
    """Base exception for all URNA errors."""


class StorageError(UrnaError):
    """Raised when a store transaction fails and has been rolled back.

    Sanitizes driver-level details (SQLite messages, paths) so they are
    never exposed to callers of the ledger.
    """


class InvalidInput(UrnaError):
    """Raised when an identifier or field value is malformed."""


class AlreadyExists(UrnaError):
    """Raised on a duplicate admin, candidate, election or winner."""


class NotFound(UrnaError):
    """Raised when an admin, voter, candidate or election is missing."""


class InvalidCredentials(UrnaError):
    """Raised when login details do not match the stored record."""


class NotAuthorized(UrnaError):
    """Raised when a privileged operation is attempted by a non-admin."""


class NotAuthenticated(UrnaError):
    """Raised when a read requires a caller identity and none was given."""


class NoOpenElection(UrnaError):
    """Raised when a candidate is created while no election is open."""


class AlreadyClosed(UrnaError):
    """Raised when closing an election that is already closed."""


class ElectionClosed(UrnaError):
    """Raised when a vote targets an election that is not open."""


class ElectionNotClosed(UrnaError):
    """Raised when a winner is declared while voting is still open."""


class AlreadyVoted(UrnaError):
    """Raised when a voter tries to vote a second time."""


class WinnerNotDeclared(UrnaError):
    """Raised when the winner of an election is requested too early."""
