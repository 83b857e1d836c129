"""Exception hierarchy for article content extraction."""

from __future__ import annotations


class ExtractionError(Exception):
    """Base exception for all extraction errors."""

    pass


class InvalidURLError(ExtractionError):
    """Raised when the input is not an absolute HTTP(S) URL.

    Error Code: INVALID_URL
    """

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Invalid URL: {url!r}")


class FetchFailedError(ExtractionError):
    """Raised for network, HTTP or browser navigation failures.

    Error Code: FETCH_FAILED
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class AllExtractionStrategiesFailedError(ExtractionError):
    """Raised when no strategy produced usable content from a rendered page.

    Error Code: EXTRACTION_FAILED
    """

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"All extraction strategies failed for {url}")


class ParseFailure(ExtractionError):
    """Raised when a single structured-data block cannot be parsed.

    Never escapes a strategy; callers log it and move on.
    """

    pass
