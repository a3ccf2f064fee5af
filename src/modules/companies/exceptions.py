from src.core.utils.exceptions import AppError, RepositoryError


class CompanyError(AppError):
    """Base exception for company module errors."""
    pass


class CompanyRepositoryError(RepositoryError, CompanyError):
    pass
