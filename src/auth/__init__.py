"""
Claims extraction for ERF rotation assertions.
"""

from .erf_claims import ClaimsExtractor, ClaimsParseError, ErfClaims, extract_claims

__all__ = ["ClaimsExtractor", "ClaimsParseError", "ErfClaims", "extract_claims"]
