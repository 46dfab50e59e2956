"""
Authentication - signed bearer tokens and the request gates built on them.

Only "valid signature, not expired" is checked. There is no per-user
permission model, no refresh and no revocation.
"""

from userapi.auth.jwt import (
    TokenClaims,
    TokenCodec,
    TokenError,
    TokenConfigurationError,
    TokenExpiredError,
    TokenInvalidSignatureError,
    TokenMalformedError,
    TokenUnexpectedAlgorithmError,
    issue_token,
    verify_token,
)
from userapi.auth.gates import AuthGate, ExistenceGate, Gate, gated

__all__ = [
    # Gates
    "Gate",
    "AuthGate",
    "ExistenceGate",
    "gated",
    # Tokens
    "TokenClaims",
    "TokenCodec",
    "issue_token",
    "verify_token",
    # Errors
    "TokenError",
    "TokenConfigurationError",
    "TokenExpiredError",
    "TokenInvalidSignatureError",
    "TokenMalformedError",
    "TokenUnexpectedAlgorithmError",
]
