from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from dependency_injector.wiring import inject, Provide

from src.core.di.container import Container
from src.modules.companies.models.company import Company
from src.modules.companies.services.company_service import CompanyService

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.get("/search", response_model=List[Company])
@inject
def search_companies(
    q: Optional[str] = Query(None),
    service: CompanyService = Depends(Provide[Container.company_service])
):
    return service.search(q)


@router.get("/{ticker}", response_model=Company)
@inject
def get_company(
    ticker: str,
    service: CompanyService = Depends(Provide[Container.company_service])
):
    company = service.get_by_ticker(ticker)
    if not company:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return company
