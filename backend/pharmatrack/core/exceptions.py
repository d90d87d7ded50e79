"""Custom exception classes for the application."""


class PharmaTrackException(Exception):
    """Base exception for all PharmaTrack errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class FetchError(PharmaTrackException):
    """Raised when a page cannot be fetched (timeout, non-2xx, transport failure).

    Transient: the retry wrapper retries it before giving up.
    """

    def __init__(self, url: str, message: str, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ProxyConfigurationError(PharmaTrackException):
    """Raised when a domain needs the fetch proxy but no API key is configured."""

    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(
            f"SCRAPER_API_KEY is not set; {domain} blocks direct requests and needs the fetch proxy"
        )


class ExtractionError(PharmaTrackException):
    """Raised inside an extractor when markup cannot be parsed.

    Never escapes the extractor boundary; it is turned into an error result.
    """


class NoPriceFoundError(PharmaTrackException):
    """Raised when a page loads but no extraction path yields a positive price."""

    def __init__(self, url: str, extractor: str):
        self.url = url
        self.extractor = extractor
        super().__init__(f"No price found on page ({extractor} extractor)")
