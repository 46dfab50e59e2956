"""
API error taxonomy.

Every failure that reaches the caller is one of these. Each knows its HTTP
status and the JSON envelope it renders as; the app installs a single
exception handler for `ApiError`.
"""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Base class for errors rendered as a JSON response."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def envelope(self) -> dict[str, Any]:
        return {"status": "fail", "message": self.message}

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.envelope())


class ClientFormatError(ApiError):
    """Bad request shape: unparseable body, empty or unknown identifier."""

    status_code = 400


class AuthenticationError(ApiError):
    """Missing, malformed, invalid or expired credentials."""

    status_code = 401

    def envelope(self) -> dict[str, Any]:
        return {"error": self.message}


class ConfigurationError(ApiError):
    """Server-side misconfiguration. Not the caller's fault."""

    status_code = 500

    def envelope(self) -> dict[str, Any]:
        return {"error": self.message}


class UpstreamError(ApiError):
    """The user store failed. The store's message is passed through."""

    status_code = 500
