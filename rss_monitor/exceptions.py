class RSSMonitorError(Exception):
    """Base class for errors raised by rss_monitor."""


class FetchError(RSSMonitorError):
    """Raised when the listing page cannot be fetched (network, timeout, HTTP status)."""


class ParseError(RSSMonitorError):
    """Raised when the listing markup cannot be parsed at all."""


class StateCorruptError(RSSMonitorError):
    """Raised when the persisted state file exists but cannot be decoded."""


class PublishError(RSSMonitorError):
    """Raised when the feed or state file cannot be written."""
