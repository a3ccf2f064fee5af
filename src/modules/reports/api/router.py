from fastapi import APIRouter

from src.modules.reports.api.v1.router import router as v1_router

router = APIRouter(prefix="/reports")

router.include_router(v1_router, prefix="/v1")
