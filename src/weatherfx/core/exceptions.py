"""
Custom exceptions for weatherfx.
"""


class WeatherFXError(Exception):
    """Base exception for all weatherfx errors."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class RateLimitedError(WeatherFXError):
    """Raised when a refresh is attempted before the cooldown has elapsed."""

    def __init__(self, resource_key: str, retry_after_ms: int):
        minutes, seconds = divmod(max(retry_after_ms, 0) // 1000, 60)
        super().__init__(
            f"Rate limited: {resource_key}",
            details=f"Please wait {minutes}m {seconds:02d}s before refreshing.",
        )
        self.resource_key = resource_key
        self.retry_after_ms = retry_after_ms

    @property
    def retry_after_seconds(self) -> float:
        return self.retry_after_ms / 1000


class CityNotFoundError(WeatherFXError):
    """Raised when geocoding a city yields no results."""

    def __init__(self, city: str):
        super().__init__(f"City not found: {city}")
        self.city = city


class MissingParamsError(WeatherFXError):
    """Raised when a proxy request lacks required query parameters."""

    def __init__(self, params: list[str]):
        super().__init__(
            "Missing base or symbols",
            details=f"Required parameters: {', '.join(params)}",
        )
        self.params = params


class FetchFailedError(WeatherFXError):
    """Base class for upstream and provider failures."""


class ProviderError(FetchFailedError):
    """Raised when a provider answers but reports a failure."""

    def __init__(self, provider: str, details: str | None = None):
        super().__init__(f"Provider error from {provider}", details=details)
        self.provider = provider


class UpstreamUnavailableError(FetchFailedError):
    """Raised when an upstream request fails or times out."""

    def __init__(self, url: str, status_code: int | None = None, details: str | None = None):
        message = f"Upstream request failed: {url}"
        if status_code:
            message += f" (status {status_code})"
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code


class CacheError(WeatherFXError):
    """Raised when a cache storage operation fails."""

    def __init__(self, operation: str, details: str | None = None):
        super().__init__(f"Cache error during {operation}", details=details)
        self.operation = operation


class ValidationError(WeatherFXError):
    """Raised when user input validation fails."""

    def __init__(self, field: str, value: str, reason: str):
        super().__init__(
            f"Validation failed for {field}",
            details=f"Value '{value}' is invalid: {reason}",
        )
        self.field = field
        self.value = value
        self.reason = reason


class ConfigurationError(WeatherFXError):
    """Raised when required configuration such as an API key is missing."""

    def __init__(self, setting: str, details: str | None = None):
        super().__init__(f"Configuration error for {setting}", details=details)
        self.setting = setting
