# app/core/errors.py
"""
Application error taxonomy.

Services and dependencies raise these; `app.main` maps every subclass of
`AppError` to a JSON body of the form ``{"error": message}`` with the
matching status code. Anything else becomes a generic 500.
"""
from __future__ import annotations

from typing import Any


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Request failed"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None, *, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid input"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Not authenticated"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


# -----------------------------
# Credential failures
# -----------------------------
class MissingToken(AuthenticationError):
    default_message = "Missing refresh token"


class InvalidToken(AuthenticationError):
    default_message = "Invalid refresh token"


class RevokedToken(AuthenticationError):
    default_message = "Refresh token revoked"


class ExpiredToken(AuthenticationError):
    default_message = "Refresh token expired"
