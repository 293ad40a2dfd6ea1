"""Error kinds raised by the crawler."""


class CrawlerError(Exception):
    """Base class for crawler errors."""


class ConfigError(CrawlerError):
    """Configuration file missing, unreadable, or invalid."""


class AuthError(CrawlerError):
    """Login request failed."""


class TransportError(CrawlerError):
    """An HTTP request failed or returned an error status."""


class DecodeError(CrawlerError):
    """A response body could not be decoded into the expected shape."""
