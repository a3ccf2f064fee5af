from datetime import datetime
from typing import Any, Optional, Dict

from pydantic import BaseModel, ConfigDict, Field


class BillingEventBase(BaseModel):
    event_id: str
    event_type: str
    user_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class BillingEventCreate(BillingEventBase):
    pass


class BillingEvent(BillingEventBase):
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
