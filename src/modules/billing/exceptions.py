from typing import Optional

from src.core.utils.exceptions import AppError, RepositoryError


class BillingError(AppError):
    """Base exception for billing module errors."""
    pass


class BillingRepositoryError(RepositoryError, BillingError):
    """Raised when a repository operation fails due to infrastructure issues."""
    pass


class QuotaExceededError(BillingError):
    """Raised when the monthly report quota is used up."""
    def __init__(self, message: str, current: int, limit: Optional[int]):
        super().__init__(message)
        self.current = current
        self.limit = limit


class PaymentGatewayError(BillingError):
    """Raised when the payment provider rejects or fails a request."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class InvalidWebhookSignatureError(BillingError):
    """Raised when a webhook payload fails signature verification."""
    pass
