from dependency_injector import containers, providers

from src.modules.companies.repositories.impl.supabase.company_repository import SupabaseCompanyRepository
from src.modules.companies.repositories.impl.postgres.company_repository import PostgresCompanyRepository

from src.modules.companies.services.company_service import CompanyService


class CompaniesContainer(containers.DeclarativeContainer):
    """
    Companies Module Container.
    """

    core = providers.DependenciesContainer()

    company_repository = providers.Selector(
        core.db_backend,
        supabase=providers.Factory(SupabaseCompanyRepository, client=core.supabase_client),
        postgres=providers.Factory(PostgresCompanyRepository, db=core.postgres_db),
    )

    company_service = providers.Factory(CompanyService, company_repo=company_repository)
