"""
Custom exceptions for the air quality service.
These exceptions represent domain-specific errors and are part of the core business logic.
"""


class AirQualityServiceError(Exception):
    """Base exception for air quality service errors."""

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(message)


class MeasurementParseError(AirQualityServiceError):
    """Raised when a raw database record cannot be turned into a Measurement."""

    def __init__(self, reason: str, record=None):
        self.reason = reason
        self.record = record
        super().__init__(f"Failed to parse measurement: {reason}", repr(record) if record is not None else None)


class RepositoryError(AirQualityServiceError):
    """Raised when data repository operations fail."""

    def __init__(self, message: str, source_error: Exception = None):
        self.source_error = source_error
        details = str(source_error) if source_error else None
        super().__init__(message, details)


class SubscriptionError(AirQualityServiceError):
    """Raised when a measurement subscription cannot be started or stopped."""
    pass


class NotificationError(AirQualityServiceError):
    """Raised when an alert cannot be delivered by a notifier."""
    pass


class ConfigurationError(AirQualityServiceError):
    """Raised when service configuration is invalid."""
    pass


class ExternalServiceError(RepositoryError):
    """Raised when an external service (database, cache) is unavailable or returns errors."""

    def __init__(self, service_name: str, status_code: int = None, response_body: str = None):
        self.service_name = service_name
        self.status_code = status_code
        self.response_body = response_body

        message = f"External service '{service_name}' error"
        if status_code:
            message += f" (HTTP {status_code})"

        super().__init__(message)
        self.details = response_body if response_body else None
