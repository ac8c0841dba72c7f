# ABOUTME: Exception hierarchy shared by the country, weather, currency and map components.
# ABOUTME: Each component converts these into its own error state instead of letting them escape.


class ServiceError(Exception):
    """Base class for failures a component is expected to degrade on."""


class MissingInputError(ServiceError):
    """A required key (locality, country code) was absent, so no request was made."""


class TransportError(ServiceError):
    """The HTTP exchange failed: a non-2xx status or a transport-level error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ApplicationError(ServiceError):
    """A 2xx response whose payload reports failure or does not match the expected shape."""


class MapTimeoutError(ServiceError):
    """The interactive map did not signal readiness within the allowed window."""


class UnknownCurrencyError(ValueError):
    """A currency code that is not in the fetched exchange-rate table."""
