import unittest
from unittest.mock import MagicMock, patch

import stripe

from src.modules.billing.exceptions import InvalidWebhookSignatureError, PaymentGatewayError
from src.modules.billing.services.stripe_service import StripeService


class TestStripeService(unittest.TestCase):

    def setUp(self):
        self.service = StripeService(
            api_key="sk_test_123",
            webhook_secret="whsec_123",
            site_url="https://app.example.com/",
        )

    @patch("stripe.checkout.Session.create")
    def test_create_checkout_session(self, mock_create):
        mock_create.return_value = MagicMock(id="cs_test_1", url="https://checkout.stripe.com/c/cs_test_1")

        session = self.service.create_checkout_session("user_123", "jane@example.com")

        self.assertEqual(session.session_id, "cs_test_1")
        self.assertEqual(session.url, "https://checkout.stripe.com/c/cs_test_1")

        kwargs = mock_create.call_args.kwargs
        self.assertEqual(kwargs["api_key"], "sk_test_123")
        self.assertEqual(kwargs["mode"], "subscription")
        self.assertEqual(kwargs["customer_email"], "jane@example.com")
        self.assertEqual(kwargs["client_reference_id"], "user_123")
        self.assertEqual(kwargs["metadata"], {"userId": "user_123", "plan": "pro"})
        self.assertEqual(kwargs["success_url"], "https://app.example.com/dashboard?payment=success")
        self.assertEqual(kwargs["cancel_url"], "https://app.example.com/dashboard?payment=cancelled")

        price_data = kwargs["line_items"][0]["price_data"]
        self.assertEqual(price_data["currency"], "eur")
        self.assertEqual(price_data["unit_amount"], 700)
        self.assertEqual(price_data["recurring"], {"interval": "month"})

    @patch("stripe.checkout.Session.create")
    def test_create_checkout_session_stripe_error(self, mock_create):
        mock_create.side_effect = stripe.StripeError("card declined")

        with self.assertRaises(PaymentGatewayError):
            self.service.create_checkout_session("user_123", "jane@example.com")

    def test_create_checkout_session_without_api_key(self):
        service = StripeService(api_key=None, webhook_secret="whsec_123", site_url="http://localhost:3000")

        with self.assertRaises(PaymentGatewayError):
            service.create_checkout_session("user_123", "jane@example.com")

    @patch("stripe.Webhook.construct_event")
    def test_construct_event_returns_dict(self, mock_construct):
        mock_construct.return_value = {"id": "evt_1", "type": "checkout.session.completed"}

        event = self.service.construct_event(b"{}", "t=1,v1=abc")

        self.assertEqual(event["id"], "evt_1")
        mock_construct.assert_called_once_with(b"{}", "t=1,v1=abc", "whsec_123")

    @patch("stripe.Webhook.construct_event")
    def test_construct_event_bad_signature(self, mock_construct):
        mock_construct.side_effect = stripe.SignatureVerificationError("bad sig", "t=1,v1=abc")

        with self.assertRaises(InvalidWebhookSignatureError):
            self.service.construct_event(b"{}", "t=1,v1=abc")

    @patch("stripe.Webhook.construct_event")
    def test_construct_event_bad_payload(self, mock_construct):
        mock_construct.side_effect = ValueError("not json")

        with self.assertRaises(InvalidWebhookSignatureError):
            self.service.construct_event(b"not json", "t=1,v1=abc")

    def test_construct_event_without_secret(self):
        service = StripeService(api_key="sk_test_123", webhook_secret=None, site_url="http://localhost:3000")

        with self.assertRaises(InvalidWebhookSignatureError):
            service.construct_event(b"{}", "t=1,v1=abc")


if __name__ == "__main__":
    unittest.main()
