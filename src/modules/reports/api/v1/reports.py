from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from dependency_injector.wiring import inject, Provide

from src.core.api.schemas import CamelModel, error_body
from src.core.di.container import Container
from src.core.utils import get_logger
from src.modules.billing.exceptions import BillingRepositoryError, QuotaExceededError
from src.modules.reports.exceptions import ReportGenerationError, ReportRepositoryError
from src.modules.reports.services.report_service import ReportService

logger = get_logger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


class GenerateReportRequest(CamelModel):
    company_name: Optional[str] = None
    ticker: Optional[str] = None
    user_id: Optional[str] = None


class GenerateReportResponse(CamelModel):
    report: str
    company: str
    ticker: str
    report_id: Optional[str] = None
    reports_used: int
    reports_limit: int
    generated_at: datetime


class ReportResponse(CamelModel):
    id: str
    company_name: str
    ticker: str
    report_content: str
    created_at: Optional[datetime] = None


@router.post("", response_model=GenerateReportResponse)
@inject
def generate_report(
    req: GenerateReportRequest,
    service: ReportService = Depends(Provide[Container.report_service])
):
    if not req.company_name or not req.ticker or not req.user_id:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("Company name, ticker, and user ID required"),
        )

    try:
        result = service.generate_report(req.user_id, req.company_name, req.ticker)
    except QuotaExceededError as e:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content=error_body(str(e), reportsUsed=e.current, reportsLimit=e.limit),
        )
    except (ReportGenerationError, BillingRepositoryError) as e:
        logger.error("report_generation_failed", user_id=req.user_id, ticker=req.ticker, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Failed to generate report"),
        )

    return GenerateReportResponse(
        report=result.report,
        company=result.company,
        ticker=result.ticker,
        report_id=result.report_id,
        reports_used=result.reports_used,
        reports_limit=result.reports_limit,
        generated_at=result.generated_at,
    )


@router.get("", response_model=List[ReportResponse])
@inject
def list_reports(
    user_id: Optional[str] = Query(None, alias="userId"),
    limit: int = Query(5, ge=1, le=50),
    service: ReportService = Depends(Provide[Container.report_service])
):
    if not user_id:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body("User ID required"))

    try:
        reports = service.get_recent_reports(user_id, limit=limit)
    except ReportRepositoryError as e:
        logger.error("list_reports_failed", user_id=user_id, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Failed to load reports"),
        )

    return [
        ReportResponse(
            id=r.id,
            company_name=r.company_name,
            ticker=r.ticker,
            report_content=r.report_content,
            created_at=r.created_at,
        )
        for r in reports
    ]
