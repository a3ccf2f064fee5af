from typing import Dict, Any

from src.core.utils import get_logger
from src.modules.billing.exceptions import BillingRepositoryError
from src.modules.billing.repositories.interfaces import IBillingEventRepository
from src.modules.billing.services.subscription_service import SubscriptionService

logger = get_logger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


class WebhookHandlerService:
    """
    Handles verified Stripe webhooks and updates local billing state.

    Only checkout completion changes state: the user named in the session
    metadata is upgraded to Pro. With idempotency enabled, an event id that
    was already applied is acknowledged without touching the subscription.
    """

    def __init__(
        self,
        subscription_service: SubscriptionService,
        event_repo: IBillingEventRepository,
        idempotent: bool = True,
    ):
        self.subscription_service = subscription_service
        self.event_repo = event_repo
        self.idempotent = idempotent

    def handle_event(self, event: Dict[str, Any]) -> bool:
        """
        Dispatch a verified Stripe event.

        Returns True when the event changed a subscription.
        """
        event_type = event.get("type")
        event_id = event.get("id")

        logger.info("stripe_event_received", event_type=event_type, event_id=event_id)

        if event_type == CHECKOUT_COMPLETED:
            return self._handle_checkout_session_completed(event)

        logger.info("stripe_event_ignored", event_type=event_type, event_id=event_id)
        return False

    def _handle_checkout_session_completed(self, event: Dict[str, Any]) -> bool:
        event_id = event.get("id")
        session = event.get("data", {}).get("object", {})
        metadata = session.get("metadata") or {}
        user_id = metadata.get("userId")

        if not user_id:
            logger.warning("checkout_missing_user_id", event_id=event_id, session_id=session.get("id"))
            return False

        if self.idempotent and event_id and self.event_repo.exists(event_id):
            logger.info("stripe_event_replayed", event_id=event_id, user_id=user_id)
            return False

        try:
            self.subscription_service.upgrade_to_pro(user_id)
        except BillingRepositoryError as e:
            # Acknowledged anyway; Stripe would otherwise keep redelivering
            logger.error("upgrade_failed", user_id=user_id, event_id=event_id, error=str(e))
            return False

        if event_id:
            self._record(event_id, CHECKOUT_COMPLETED, user_id, session)

        logger.info("user_upgraded", user_id=user_id, event_id=event_id)
        return True

    def _record(self, event_id: str, event_type: str, user_id: str, session: Dict[str, Any]) -> None:
        try:
            self.event_repo.create(
                {
                    "event_id": event_id,
                    "event_type": event_type,
                    "user_id": user_id,
                    "metadata": {
                        "checkout_session_id": session.get("id"),
                        "stripe_customer_id": session.get("customer"),
                        "stripe_subscription_id": session.get("subscription"),
                    },
                }
            )
        except BillingRepositoryError as e:
            logger.warning("billing_event_not_recorded", event_id=event_id, error=str(e))
