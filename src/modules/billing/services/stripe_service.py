import stripe
from typing import Dict, Any, Optional

from src.core.utils import get_logger
from src.modules.billing.exceptions import InvalidWebhookSignatureError, PaymentGatewayError
from src.modules.billing.services.payment_gateway import CheckoutSession, IPaymentGateway

logger = get_logger(__name__)


class StripeService(IPaymentGateway):
    """
    Stripe implementation of Payment Gateway.

    The API key is passed per request rather than set on the stripe module,
    so several instances never share global state.
    """

    def __init__(
        self,
        api_key: Optional[str],
        webhook_secret: Optional[str],
        site_url: str,
        price_cents: int = 700,
        currency: str = "eur",
        product_name: str = "StockAnalysisAI Pro",
        product_description: str = "Monthly subscription with unlimited reports",
    ):
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.site_url = site_url.rstrip("/")
        self.price_cents = price_cents
        self.currency = currency
        self.product_name = product_name
        self.product_description = product_description

    def create_checkout_session(self, user_id: str, user_email: str) -> CheckoutSession:
        if not self.api_key:
            raise PaymentGatewayError("Stripe API Key not configured")

        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                mode="subscription",
                payment_method_types=["card"],
                line_items=[
                    {
                        "price_data": {
                            "currency": self.currency,
                            "product_data": {
                                "name": self.product_name,
                                "description": self.product_description,
                            },
                            "unit_amount": self.price_cents,
                            "recurring": {"interval": "month"},
                        },
                        "quantity": 1,
                    }
                ],
                success_url=f"{self.site_url}/dashboard?payment=success",
                cancel_url=f"{self.site_url}/dashboard?payment=cancelled",
                customer_email=user_email,
                client_reference_id=user_id,
                metadata={"userId": user_id, "plan": "pro"},
            )
        except stripe.StripeError as e:
            logger.error("checkout_session_failed", user_id=user_id, error=str(e))
            raise PaymentGatewayError("Failed to create payment session", original_error=e)

        logger.info("checkout_session_created", user_id=user_id, session_id=session.id)
        return CheckoutSession(session_id=session.id, url=session.url)

    def construct_event(self, payload: bytes, sig_header: str) -> Dict[str, Any]:
        if not self.webhook_secret:
            raise InvalidWebhookSignatureError("Stripe Webhook Secret not configured")

        try:
            event = stripe.Webhook.construct_event(
                payload, sig_header, self.webhook_secret
            )
        except ValueError as e:
            # Invalid payload
            raise InvalidWebhookSignatureError(f"Invalid payload: {e}") from e
        except stripe.SignatureVerificationError as e:
            raise InvalidWebhookSignatureError(f"Invalid signature: {e}") from e

        return event.to_dict() if hasattr(event, "to_dict") else dict(event)
