"""
Standardized exception hierarchy for fare sources.

Exception Hierarchy:
    ScraperError (base)
    ├── NetworkError
    ├── FareApiError
    └── FareParsingError

Usage:
    >>> from farescope.scrapers.exceptions import FareApiError
    >>> raise FareApiError("API returned error: 503", status_code=503)
"""

from typing import Optional


class ScraperError(Exception):
    """
    Base exception for all fare-source errors.

    Attributes:
        message: Human-readable error description
        scraper_name: Name of the source that raised the error
        recoverable: Whether the error is recoverable (can retry)
        original_error: Original exception if this wraps another error
    """

    def __init__(
        self,
        message: str,
        scraper_name: Optional[str] = None,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.scraper_name = scraper_name
        self.recoverable = recoverable
        self.original_error = original_error

        full_message = message
        if scraper_name:
            full_message = f"[{scraper_name}] {message}"

        super().__init__(full_message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"scraper_name={self.scraper_name!r}, "
            f"recoverable={self.recoverable})"
        )


class NetworkError(ScraperError):
    """Raised when the fare API cannot be reached after retries."""

    def __init__(
        self,
        message: str,
        scraper_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            scraper_name=scraper_name,
            recoverable=True,
            original_error=original_error,
        )


class FareApiError(ScraperError):
    """
    Raised when the fare API answers with an HTTP error status.

    Attributes:
        status_code: HTTP status code returned by the API
    """

    def __init__(
        self,
        message: str,
        scraper_name: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            scraper_name=scraper_name,
            recoverable=status_code is not None and status_code >= 500,
            original_error=original_error,
        )
        self.status_code = status_code


class FareParsingError(ScraperError):
    """
    Raised when the fare API response is not the JSON document we expect.

    Attributes:
        raw_snippet: Start of the offending response body, for the log
    """

    def __init__(
        self,
        message: str,
        scraper_name: Optional[str] = None,
        raw_snippet: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            scraper_name=scraper_name,
            recoverable=False,
            original_error=original_error,
        )
        self.raw_snippet = raw_snippet
