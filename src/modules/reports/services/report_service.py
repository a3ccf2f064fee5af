from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from src.core.utils import get_logger
from src.modules.billing.services.subscription_service import SubscriptionService, utc_now
from src.modules.reports.exceptions import ReportGenerationError, ReportRepositoryError
from src.modules.reports.models.report import Report
from src.modules.reports.repositories.interfaces import IReportRepository
from src.modules.reports.services.report_generator import IReportGenerator

logger = get_logger(__name__)


@dataclass
class GeneratedReport:
    report: str
    company: str
    ticker: str
    report_id: Optional[str]
    reports_used: int
    reports_limit: int
    generated_at: datetime


class ReportService:
    """
    Runs the report transaction: reserve quota, call the model once, save
    the report.

    The quota is reserved before the model is called, so a request that
    would exceed the limit never reaches the paid API. A reservation is
    released when the model fails, and also when the report cannot be saved
    unless count_unsaved_reports is set.
    """

    def __init__(
        self,
        report_repo: IReportRepository,
        subscription_service: SubscriptionService,
        report_generator: IReportGenerator,
        count_unsaved_reports: bool = False,
    ):
        self.report_repo = report_repo
        self.subscription_service = subscription_service
        self.report_generator = report_generator
        self.count_unsaved_reports = count_unsaved_reports

    def generate_report(self, user_id: str, company_name: str, ticker: str) -> GeneratedReport:
        # Raises QuotaExceededError before any model call
        reserved = self.subscription_service.reserve_report(user_id)

        try:
            content = self.report_generator.generate(company_name, ticker)
        except ReportGenerationError:
            self.subscription_service.release_report(user_id)
            raise

        saved = self._save(user_id, company_name, ticker, content)

        reports_used = reserved.reports_used
        if saved is None and not self.count_unsaved_reports:
            released = self.subscription_service.release_report(user_id)
            if released is not None:
                reports_used = released.reports_used

        logger.info(
            "report_generated",
            user_id=user_id,
            ticker=ticker.upper(),
            report_id=saved.id if saved else None,
            reports_used=reports_used,
        )

        return GeneratedReport(
            report=content,
            company=company_name,
            ticker=ticker,
            report_id=saved.id if saved else None,
            reports_used=reports_used,
            reports_limit=reserved.reports_limit,
            generated_at=utc_now(),
        )

    def _save(self, user_id: str, company_name: str, ticker: str, content: str) -> Optional[Report]:
        try:
            return self.report_repo.create(
                {
                    "user_id": user_id,
                    "company_name": company_name,
                    "ticker": ticker.upper(),
                    "report_content": content,
                }
            )
        except ReportRepositoryError as e:
            logger.error("report_save_failed", user_id=user_id, ticker=ticker.upper(), error=str(e))
            return None

    def get_recent_reports(self, user_id: str, limit: int = 5) -> List[Report]:
        return self.report_repo.find_recent_by_user(user_id, limit=limit)
