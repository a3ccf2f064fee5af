class AppError(Exception):
    """Base exception for application errors."""

    pass


class RepositoryError(AppError):
    """Raised when a storage operation fails due to infrastructure issues."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error
