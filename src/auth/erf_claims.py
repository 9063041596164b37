"""
ERF Rotation Token Claims
Extracts the subject/previous fingerprint claims from a rotation assertion.

A rotation assertion is a JWT whose claims are:
    sub   current fingerprint (required, non-empty)
    prev  fingerprint the client rotated from (required, "" if none)
    seq   rotation sequence number (optional, informational)
    iat   issued-at, epoch seconds (optional)
    exp   expiry, epoch seconds (optional)
"""

import logging
import os
from typing import Any, Dict, List, Optional, Union

import jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class ClaimsParseError(Exception):
    """Raised when a token cannot be decoded into ErfClaims"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.details = details or {}
        super().__init__(message)


class ErfClaims(BaseModel):
    """Claims carried by a rotation assertion"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    subject: str = Field(..., alias="sub", min_length=1)
    previous: str = Field(..., alias="prev")
    sequence_no: Optional[int] = Field(None, alias="seq")
    issued_at: Optional[int] = Field(None, alias="iat")
    expires_at: Optional[int] = Field(None, alias="exp")


class ClaimsExtractor:
    """
    Decodes rotation assertions with PyJWT.

    With no key configured the token is only structurally decoded: the
    signature is not checked and the claims are trusted as-is. With a key,
    the signature must verify against one of the configured algorithms.
    """

    DEFAULT_ALGORITHMS = ["HS256"]
    SUPPORTED_ALGORITHMS = ["HS256", "HS384", "HS512", "RS256", "RS384", "RS512", "ES256", "EdDSA"]
    REQUIRED_CLAIMS = ["sub", "prev"]

    def __init__(
        self,
        key: Optional[Union[str, bytes]] = None,
        algorithms: Optional[List[str]] = None,
        verify_expiry: bool = True,
        leeway: int = 0,
    ):
        """
        Initialize claims extractor.

        Args:
            key: HMAC secret or public key. None disables signature checks.
            algorithms: Accepted signing algorithms when a key is set
            verify_expiry: Reject tokens whose exp claim has passed
            leeway: Clock skew tolerance in seconds for exp
        """
        self.key = key
        requested = algorithms or self.DEFAULT_ALGORITHMS
        self.algorithms = [alg for alg in requested if alg in self.SUPPORTED_ALGORITHMS]
        if not self.algorithms:
            raise ValueError(f"No supported algorithm in {requested}")
        self.verify_expiry = verify_expiry
        self.leeway = leeway

    @property
    def verifies_signature(self) -> bool:
        return self.key is not None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ClaimsExtractor":
        """Build an extractor from the "claims" section of the ledger config"""
        claims_config = config.get("claims", {})
        return cls(
            key=claims_config.get("key") or os.environ.get("ERF_CLAIMS_SECRET") or None,
            algorithms=claims_config.get("algorithms"),
            verify_expiry=claims_config.get("verify_expiry", True),
            leeway=claims_config.get("leeway", 0),
        )

    def extract_claims(self, token: Union[str, bytes]) -> ErfClaims:
        """
        Decode a token and return its rotation claims.

        Args:
            token: Encoded JWT

        Returns:
            ErfClaims

        Raises:
            ClaimsParseError: token is malformed, fails verification, or
                lacks the sub/prev claims
        """
        if isinstance(token, bytes):
            try:
                token = token.decode("ascii")
            except UnicodeDecodeError as e:
                raise ClaimsParseError("Token is not ASCII encoded") from e

        options = {
            "verify_signature": self.verifies_signature,
            "verify_exp": self.verify_expiry,
            "require": self.REQUIRED_CLAIMS,
        }

        try:
            if self.verifies_signature:
                payload = jwt.decode(
                    token,
                    self.key,
                    algorithms=self.algorithms,
                    options=options,
                    leeway=self.leeway,
                )
            else:
                payload = jwt.decode(token, options=options, leeway=self.leeway)
        except jwt.ExpiredSignatureError as e:
            raise ClaimsParseError("Token has expired") from e
        except jwt.InvalidSignatureError as e:
            raise ClaimsParseError("Invalid token signature") from e
        except jwt.MissingRequiredClaimError as e:
            raise ClaimsParseError(f"Missing required claim: {e.claim}", {"claim": e.claim}) from e
        except jwt.InvalidTokenError as e:
            raise ClaimsParseError(f"Invalid token: {e}") from e

        try:
            claims = ErfClaims.model_validate(payload)
        except ValidationError as e:
            fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
            raise ClaimsParseError(
                f"Invalid rotation claims: {', '.join(fields)}", {"invalid_fields": fields}
            ) from e

        logger.debug(f"Extracted claims for subject {claims.subject[:16]}")
        return claims


def extract_claims(token: Union[str, bytes]) -> ErfClaims:
    """Decode a token without signature verification"""
    return ClaimsExtractor().extract_claims(token)
