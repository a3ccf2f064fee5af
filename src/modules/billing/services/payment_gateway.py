from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class CheckoutSession:
    session_id: str
    url: str


class IPaymentGateway(ABC):
    """
    Interface for payment gateways (Stripe, Paddle, etc.)
    """

    @abstractmethod
    def create_checkout_session(self, user_id: str, user_email: str) -> CheckoutSession:
        """Create a hosted checkout for the Pro plan, tagged with the user id."""
        pass

    @abstractmethod
    def construct_event(self, payload: bytes, sig_header: str) -> Dict[str, Any]:
        """Verify and construct webhook event."""
        pass
