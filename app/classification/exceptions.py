class ClassificationError(Exception):
    """Raised when the AI provider cannot produce usable metadata."""


class UnsupportedFormatError(ClassificationError):
    """Raised when the provider or the renderer cannot handle the file format."""


class RateLimitedError(ClassificationError):
    """Raised when the provider rejects the call because of rate limiting."""


class QuotaExceededError(ClassificationError):
    """Raised when the provider account has no remaining quota."""


class InvalidResponseError(ClassificationError):
    """Raised when the provider response contains no parseable JSON object."""


class TransportError(ClassificationError):
    """Raised when the provider call fails due to network/infrastructure issues."""
