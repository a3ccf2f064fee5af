from fastapi import APIRouter, Header, Request, Depends, status
from fastapi.responses import JSONResponse
from dependency_injector.wiring import inject, Provide
from starlette.concurrency import run_in_threadpool

from src.core.api.schemas import error_body
from src.core.di.container import Container
from src.core.utils import get_logger
from src.modules.billing.exceptions import InvalidWebhookSignatureError
from src.modules.billing.services.payment_gateway import IPaymentGateway
from src.modules.billing.services.webhook_handler_service import WebhookHandlerService

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Billing Webhooks"])


@router.post("/stripe")
@inject
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    gateway: IPaymentGateway = Depends(Provide[Container.stripe_service]),
    webhook_handler: WebhookHandlerService = Depends(Provide[Container.webhook_handler_service])
):
    if not stripe_signature:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body("Invalid signature"))

    # Signature check needs the raw body; everything after it is blocking I/O
    payload = await request.body()

    try:
        event = await run_in_threadpool(gateway.construct_event, payload, stripe_signature)
    except InvalidWebhookSignatureError as e:
        logger.error("webhook_signature_verification_failed", error=str(e))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body("Invalid signature"))

    await run_in_threadpool(webhook_handler.handle_event, event)

    return {"received": True}
