from fastapi import APIRouter

from src.modules.billing.api.v1 import usage, payments, webhooks

router = APIRouter()

router.include_router(usage.router)
router.include_router(payments.router)
router.include_router(webhooks.router)
