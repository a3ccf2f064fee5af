from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ReportBase(BaseModel):
    user_id: str
    company_name: str
    ticker: str
    report_content: str

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        return v.strip().upper()


class ReportCreate(ReportBase):
    pass


class Report(ReportBase):
    id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
