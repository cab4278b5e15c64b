"""Error taxonomy shared by the adapters, the dispatcher and the HTTP layer."""


class DevSearchError(Exception):
    """Base class for errors raised by this application."""


class ValidationError(DevSearchError):
    """A required request field is missing or empty (HTTP 400)."""


class UpstreamFetchError(DevSearchError):
    """A search provider was unreachable or answered with a non-2xx status (HTTP 500)."""


class DispatchError(DevSearchError):
    """The mail transport rejected the message or the credentials are unusable (HTTP 500)."""
