from .company_repository import PostgresCompanyRepository

__all__ = ["PostgresCompanyRepository"]
