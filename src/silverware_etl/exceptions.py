"""Domain-specific exceptions for the Silverware weekly ETL.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from SilverwareError for easy catching.
"""

from __future__ import annotations


class SilverwareError(Exception):
    """Base exception for all Silverware ETL errors.

    Users can catch this exception to handle any error raised by the package.
    """

    pass


class ConfigError(SilverwareError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided (bad week date, non-integer offset)
    - A locations JSON file cannot be loaded or parsed
    """

    pass


class ETLError(SilverwareError):
    """Raised when a stage of the weekly run fails."""

    pass


class ExtractionError(ETLError):
    """Raised when the Silverware API rejects both request encodings.

    Attributes:
        path: API path that was requested (including query string, if any).
        status: HTTP status code of the last attempt, or None on transport error.
        body: Response body text (or transport error message).
    """

    def __init__(self, path: str, status: int | None, body: str) -> None:
        self.path = path
        self.status = status
        self.body = body
        super().__init__(f"{path} {status if status is not None else 'ERR'}: {body}")
