"""
Custom exceptions for the vendor status normalization system.

This module defines a hierarchy of custom exceptions to provide
clear error handling throughout the application.
"""

from typing import Any


class VendorStatusError(Exception):
    """Base exception for all vendor status system errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(VendorStatusError):
    """Raised when a source configuration is missing or malformed."""

    pass


class ParsingError(VendorStatusError):
    """Raised when a status document cannot be interpreted."""

    pass


class HTMLParsingError(ParsingError):
    """Raised when HTML parsing fails."""

    pass


class JSONParsingError(ParsingError):
    """Raised when JSON parsing fails."""

    pass


class XMLParsingError(ParsingError):
    """Raised when XML parsing fails."""

    pass


class FeedParsingError(ParsingError):
    """Raised when an RSS or Atom feed has no recognizable root."""

    pass


class PathResolutionError(ParsingError):
    """Raised when a configured collection path does not resolve."""

    pass


class FetchError(VendorStatusError):
    """Raised when retrieving a status document fails."""

    pass


class NetworkError(FetchError):
    """Raised when network requests fail."""

    pass
