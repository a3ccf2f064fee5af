from fastapi import APIRouter

from src.modules.reports.api.v1 import reports

router = APIRouter()

router.include_router(reports.router)
