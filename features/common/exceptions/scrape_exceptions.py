class ScrapeError(Exception):
    """Base exception for a failed scrape attempt."""
    pass

class TransportError(ScrapeError):
    """Raised when the forecast page cannot be fetched."""
    pass

class ExtractionError(ScrapeError):
    """Raised when the fetched page cannot be turned into a forecast."""
    kind = "extraction"

class NoDataBlockError(ExtractionError):
    """Raised when no inline script carries the forecast data block."""
    kind = "no_data_block"

class MalformedDataError(ExtractionError):
    """Raised when the forecast data block cannot be decoded."""
    kind = "malformed_data"

class MissingSpotError(ExtractionError):
    """Raised when the page does not name its spot."""
    kind = "missing_spot"

class BadTimestampError(ExtractionError):
    """Raised when a forecast timestamp is not a valid offset date-time."""
    kind = "bad_timestamp"
