from dependency_injector import containers, providers
from src.core.config.settings import settings

from src.modules.reports.repositories.impl.supabase.report_repository import SupabaseReportRepository
from src.modules.reports.repositories.impl.postgres.report_repository import PostgresReportRepository

from src.modules.reports.services.report_generator import LLMReportGenerator
from src.modules.reports.services.report_service import ReportService


class ReportsContainer(containers.DeclarativeContainer):
    """
    Reports Module Container.
    """

    core = providers.DependenciesContainer()
    ai = providers.DependenciesContainer()
    billing = providers.DependenciesContainer()

    # Repositories
    report_repository = providers.Selector(
        core.db_backend,
        supabase=providers.Factory(SupabaseReportRepository, client=core.supabase_client),
        postgres=providers.Factory(PostgresReportRepository, db=core.postgres_db),
    )

    # Services
    report_generator = providers.Factory(
        LLMReportGenerator,
        llm_factory=ai.llm_factory,
        model_key=ai.llm_model_key,
    )

    report_service = providers.Factory(
        ReportService,
        report_repo=report_repository,
        subscription_service=billing.subscription_service,
        report_generator=report_generator,
        count_unsaved_reports=settings.billing.count_unsaved_reports,
    )
