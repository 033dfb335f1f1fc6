class ScreenerError(RuntimeError):
    """Base exception for screener errors."""


class ProviderError(ScreenerError):
    """Raised when a quote provider cannot produce data for a symbol."""


class ConfigurationError(ProviderError):
    """Raised when a provider credential is missing."""


class NetworkError(ProviderError):
    """Raised when the HTTP request itself fails."""


class MalformedResponseError(ProviderError):
    """Raised when the payload is empty or not shaped as expected."""


class RateLimitError(ProviderError):
    """Raised when the provider signals that the caller is throttled."""


class WatchlistError(ScreenerError):
    """Raised when the watchlist file cannot be read."""
