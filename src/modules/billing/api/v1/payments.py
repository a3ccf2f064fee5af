from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from dependency_injector.wiring import inject, Provide

from src.core.api.schemas import CamelModel, error_body
from src.core.di.container import Container
from src.modules.billing.exceptions import PaymentGatewayError
from src.modules.billing.services.payment_gateway import IPaymentGateway

router = APIRouter(prefix="/payments", tags=["Billing Payments"])


class CheckoutRequest(CamelModel):
    user_id: Optional[str] = None
    user_email: Optional[str] = None


class CheckoutResponse(CamelModel):
    session_url: Optional[str]
    session_id: str


@router.post("/checkout", response_model=CheckoutResponse)
@inject
def create_checkout(
    req: CheckoutRequest,
    gateway: IPaymentGateway = Depends(Provide[Container.stripe_service])
):
    if not req.user_id or not req.user_email:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("User ID and email required"),
        )

    try:
        session = gateway.create_checkout_session(req.user_id, req.user_email)
    except PaymentGatewayError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Failed to create payment session"),
        )

    return CheckoutResponse(session_url=session.url, session_id=session.session_id)
