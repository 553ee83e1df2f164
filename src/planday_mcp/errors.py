"""Exceptions raised by the Planday session and API layers."""

from __future__ import annotations

from typing import Optional


class PlandayError(Exception):
    """Base class for Planday integration failures."""


class InvalidCredentialError(PlandayError, ValueError):
    """Raised when a refresh token is empty or obviously malformed."""


class UnauthenticatedError(PlandayError):
    """Raised when no usable session exists and the user must (re-)authenticate."""

    DEFAULT_MESSAGE = "Not authenticated. Please use the authenticate_planday tool first."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.DEFAULT_MESSAGE)


class ExchangeFailedError(PlandayError):
    """Raised when the refresh token cannot be exchanged for an access token."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PlandayAPIError(PlandayError):
    """Raised when a Planday API request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404
