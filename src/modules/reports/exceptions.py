from src.core.utils.exceptions import AppError, RepositoryError


class ReportError(AppError):
    """Base exception for report module errors."""
    pass


class ReportRepositoryError(RepositoryError, ReportError):
    """Raised when a report cannot be read or written."""
    pass


class ReportGenerationError(ReportError):
    """Raised when the language model fails to produce a report."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error
