from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.modules.billing.enums.plan_type import PlanType


class SubscriptionBase(BaseModel):
    user_id: str
    plan: PlanType = PlanType.FREE
    reports_used: int = Field(0, ge=0)
    reports_limit: int = Field(5, gt=0)
    billing_period_start: datetime
    billing_period_end: datetime


class SubscriptionCreate(SubscriptionBase):
    pass


class SubscriptionUpdate(BaseModel):
    plan: Optional[PlanType] = None
    reports_used: Optional[int] = Field(None, ge=0)
    reports_limit: Optional[int] = Field(None, gt=0)
    billing_period_start: Optional[datetime] = None
    billing_period_end: Optional[datetime] = None


class Subscription(SubscriptionBase):
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def remaining_reports(self) -> int:
        return self.reports_limit - self.reports_used

    @property
    def can_generate(self) -> bool:
        return self.reports_used < self.reports_limit

    def is_period_expired(self, now: datetime) -> bool:
        return now > self.billing_period_end
