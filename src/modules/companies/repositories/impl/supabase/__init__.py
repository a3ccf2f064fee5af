from .company_repository import SupabaseCompanyRepository

__all__ = ["SupabaseCompanyRepository"]
