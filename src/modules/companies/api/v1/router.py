from fastapi import APIRouter

from src.modules.companies.api.v1 import companies

router = APIRouter()

router.include_router(companies.router)
