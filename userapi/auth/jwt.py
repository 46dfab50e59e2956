# =============================================================================
# JWT Token Codec
# =============================================================================
#
# This module issues and verifies signed bearer tokens:
#   - Token issuance (claims + expiry, HMAC-signed)
#   - Token verification (algorithm pinning, signature, expiry)
#
# Only the HMAC family is accepted on verification. A token whose header
# names any other algorithm ("none", RS256, ES256, ...) is rejected before
# its signature is looked at.
#
# =============================================================================

from __future__ import annotations

from datetime import timedelta
from typing import Any
import logging

from pydantic import BaseModel, ConfigDict
import jwt

from userapi.config import HMAC_ALGORITHMS, Settings
from userapi.core.utils import utc_now

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=72)
DEFAULT_SUBJECT = "example_user"


# =============================================================================
# Models
# =============================================================================

class TokenClaims(BaseModel):
    """Decoded token claims. Extra claims supplied at issuance are kept."""

    model_config = ConfigDict(extra="allow")

    authorized: bool
    user: str
    exp: int


# =============================================================================
# Errors
# =============================================================================

class TokenError(Exception):
    """Base exception for token errors."""
    pass


class TokenConfigurationError(TokenError):
    """No signing secret configured."""
    pass


class TokenMalformedError(TokenError):
    """Token cannot be decoded or lacks required claims."""
    pass


class TokenUnexpectedAlgorithmError(TokenError):
    """Token header names an algorithm outside the HMAC family."""
    pass


class TokenInvalidSignatureError(TokenError):
    """Signature does not verify under the configured secret."""
    pass


class TokenExpiredError(TokenError):
    """Token has expired."""
    pass


# =============================================================================
# Codec
# =============================================================================

class TokenCodec:
    """
    Issues and verifies HMAC-signed JWTs with a fixed secret.

    Stateless apart from the secret; safe to share across requests.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TTL,
        default_subject: str = DEFAULT_SUBJECT,
    ):
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl
        self.default_subject = default_subject

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenCodec:
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(hours=settings.token_ttl_hours),
            default_subject=settings.token_subject,
        )

    @property
    def configured(self) -> bool:
        """Whether a signing secret is present."""
        return bool(self._secret)

    def _require_secret(self) -> str:
        if not self._secret:
            raise TokenConfigurationError("JWT secret not configured")
        return self._secret

    def issue(self, subject: str | None = None, extra_claims: dict[str, Any] | None = None) -> str:
        """Create a signed token that expires after the configured TTL."""
        secret = self._require_secret()
        expire = utc_now() + self.ttl

        payload = {
            **(extra_claims or {}),
            "authorized": True,
            "user": subject or self.default_subject,
            "exp": int(expire.timestamp()),
        }

        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a token.

        Raises:
            TokenConfigurationError: No secret configured
            TokenMalformedError: Not a decodable JWT, or missing claims
            TokenUnexpectedAlgorithmError: Header algorithm is not HMAC
            TokenInvalidSignatureError: Signature mismatch
            TokenExpiredError: `exp` is in the past
        """
        secret = self._require_secret()

        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            raise TokenMalformedError(f"Malformed token: {e}") from e

        alg = header.get("alg")
        if alg not in HMAC_ALGORITHMS:
            raise TokenUnexpectedAlgorithmError(f"Unexpected signing method: {alg}")

        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=list(HMAC_ALGORITHMS),
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidSignatureError as e:
            raise TokenInvalidSignatureError("Signature verification failed") from e
        except jwt.InvalidTokenError as e:
            raise TokenMalformedError(f"Invalid token: {e}") from e

        try:
            return TokenClaims.model_validate(payload)
        except ValueError as e:
            raise TokenMalformedError(f"Invalid token claims: {e}") from e


# =============================================================================
# Convenience
# =============================================================================

def issue_token(
    secret: str,
    subject: str | None = None,
    extra_claims: dict[str, Any] | None = None,
    ttl: timedelta = DEFAULT_TTL,
) -> str:
    """Issue an HS256 token with `secret`."""
    return TokenCodec(secret, ttl=ttl).issue(subject, extra_claims)


def verify_token(token: str, secret: str) -> TokenClaims:
    """Verify `token` against `secret`."""
    return TokenCodec(secret).verify(token)
