"""Custom exceptions for the prediction dashboard service."""


class DashboardError(Exception):
    """Base exception for prediction dashboard errors."""

    def __init__(self, message: str, trace_id: str = None):
        """
        Initialize exception.

        Args:
            message: Error message
            trace_id: Optional trace ID for request tracking
        """
        super().__init__(message)
        self.message = message
        self.trace_id = trace_id


class ConfigurationError(DashboardError):
    """Configuration error."""

    pass


class StoreError(DashboardError):
    """Document store operation error."""

    pass


class StoreConnectionError(StoreError):
    """Raised when the document store cannot be reached."""

    pass


class StoreQueryError(StoreError):
    """Raised when a document store query fails."""

    pass


class PriceFeedError(DashboardError):
    """Raised when the spot price cannot be fetched."""

    pass
