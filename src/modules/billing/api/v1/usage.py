from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from dependency_injector.wiring import inject, Provide

from src.core.api.schemas import CamelModel, error_body
from src.core.di.container import Container
from src.core.utils import get_logger
from src.modules.billing.exceptions import BillingRepositoryError
from src.modules.billing.services.subscription_service import SubscriptionService

logger = get_logger(__name__)

router = APIRouter(prefix="/usage", tags=["Billing Usage"])


class UsageCheckRequest(CamelModel):
    user_id: Optional[str] = None


class UsageCheckResponse(CamelModel):
    can_generate: bool
    reports_used: int
    reports_limit: int
    remaining_reports: int


@router.post("/check", response_model=UsageCheckResponse)
@inject
def check_usage(
    req: UsageCheckRequest,
    service: SubscriptionService = Depends(Provide[Container.subscription_service])
):
    if not req.user_id:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body("User ID required"))

    try:
        usage = service.check_usage(req.user_id)
    except BillingRepositoryError as e:
        logger.error("usage_check_failed", user_id=req.user_id, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Failed to check usage"),
        )

    return UsageCheckResponse(
        can_generate=usage.can_generate,
        reports_used=usage.reports_used,
        reports_limit=usage.reports_limit,
        remaining_reports=usage.remaining_reports,
    )
