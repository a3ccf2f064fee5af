from enum import Enum


class PlanType(str, Enum):
    """
    Subscription tiers.

    - FREE: default tier, small monthly report quota
    - PRO: paid tier, quota set to a large sentinel standing in for unlimited
    """

    FREE = "free"
    PRO = "pro"

    def __repr__(self) -> str:
        return f"PlanType.{self.name}"
