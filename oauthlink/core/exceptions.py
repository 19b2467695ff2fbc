"""Base exception hierarchy for oauthlink.

Every error raised by the package carries a stable error code so callers can
map failures to their own responses without matching on message text.

Error codes follow pattern: [CATEGORY][NUMBER]
- OAU: OAuth flow errors (100-399)
- LNK: Account linking / identity store errors (100-199)
- SYS: Configuration errors (400-499)
"""

from __future__ import annotations

from typing import Any


class OAuthLinkBaseException(Exception):
    """Base exception for all oauthlink errors."""

    default_code = "SYS400"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with message and metadata.

        Args:
            message: Human readable error message
            code: Unique error code (e.g., "OAU200")
            details: Optional additional context (never secrets or tokens)
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable error payload."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "details": self.details,
            }
        }


class ConfigurationError(OAuthLinkBaseException):
    """Provider configuration is invalid or missing."""

    def __init__(self, parameter: str):
        super().__init__(
            message=f"Configuration error: {parameter} is not configured properly",
            code="SYS401",
            details={"parameter": parameter},
        )
