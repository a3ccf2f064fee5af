from typing import Optional

from pydantic import BaseModel, ConfigDict


class Company(BaseModel):
    id: int
    ticker: str
    name: str
    exchange: Optional[str] = None
    sector: Optional[str] = None
    country: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
