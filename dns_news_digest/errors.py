"""Exception hierarchy for DNS News Digest."""


class DigestError(Exception):
    """Base class for every error that terminates a digest run."""


class ConfigError(DigestError):
    """A required configuration value is missing or empty."""


class FetchError(DigestError):
    """The feed could not be retrieved (network failure or non-2xx status)."""


class ParseError(DigestError):
    """The feed body could not be deserialized as an RSS document."""


class DeliveryError(DigestError):
    """The webhook rejected the notification or could not be reached."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str | None = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
