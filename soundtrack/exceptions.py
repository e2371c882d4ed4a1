"""
Custom exception hierarchy for the book soundtrack toolkit.

This module defines domain-specific exceptions to provide better
error handling and more informative error messages throughout the application.
"""
from typing import Optional


class SoundtrackError(Exception):
    """Base exception for all soundtrack toolkit errors."""
    pass


class APIError(SoundtrackError):
    """Base class for all API-related errors."""
    pass


class ITunesAPIError(APIError):
    """Error communicating with the iTunes Search API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ITunesAPIError):
    """API rate limit exceeded (HTTP 403/429 from the search service)."""
    pass


class DataError(SoundtrackError):
    """Base class for data-related errors."""
    pass


class ValidationError(DataError):
    """Data validation failed."""
    pass


class ConfigurationError(SoundtrackError):
    """Configuration error (missing or invalid settings)."""
    pass
