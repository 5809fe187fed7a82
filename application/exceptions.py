"""
Application-layer exceptions.

Part of RIT-25: Transaction handling for completions and forks

These exceptions are used across application and infrastructure layers.
"""

from domain.exceptions import RitualError


class RitualStorageError(RitualError):
    """Transient storage failure during a read or an atomic write.

    Raised when the database is unreachable, a call times out, or an RPC
    fails for a reason that is not a domain rule. The write it interrupted
    has been rolled back, so the caller may retry.
    """

    kind = "storage_unavailable"
    retryable = True
