"""
Error types raised by the lineage ledger.

Queries are total functions of the stored records and never raise; the only
failure a caller sees is a rejected assertion on append.
"""

from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base exception for ledger errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.details = details or {}
        super().__init__(message)


class InvalidToken(LedgerError):
    """Raised when an assertion cannot be turned into a lineage record.

    The ledger is left unchanged. The underlying extraction error is chained
    as ``__cause__``.
    """

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        super().__init__(f"failed to read token: {reason}", details=details)
