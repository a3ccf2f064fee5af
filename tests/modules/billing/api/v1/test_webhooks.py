import asyncio
import json
import time
from unittest.mock import MagicMock

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.modules.billing.exceptions import InvalidWebhookSignatureError
from src.modules.billing.services.stripe_service import StripeService
from src.modules.billing.services.webhook_handler_service import WebhookHandlerService

client = TestClient(app)

EVENT = {
    "id": "evt_123",
    "type": "checkout.session.completed",
    "data": {"object": {"id": "cs_test_1", "metadata": {"userId": "user_123"}}},
}


class TestStripeWebhookAPI:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.mock_gateway = MagicMock(spec=StripeService)
        self.mock_handler = MagicMock(spec=WebhookHandlerService)
        self.mock_handler.handle_event.return_value = True
        app.container.stripe_service.override(providers.Object(self.mock_gateway))
        app.container.webhook_handler_service.override(providers.Object(self.mock_handler))
        yield
        app.container.stripe_service.reset_override()
        app.container.webhook_handler_service.reset_override()

    def test_valid_event_is_handled(self):
        self.mock_gateway.construct_event.return_value = EVENT
        payload = json.dumps(EVENT).encode()

        response = client.post(
            "/billing/v1/webhooks/stripe",
            content=payload,
            headers={"stripe-signature": "t=1,v1=abc"},
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}
        self.mock_gateway.construct_event.assert_called_once_with(payload, "t=1,v1=abc")
        self.mock_handler.handle_event.assert_called_once_with(EVENT)

    def test_invalid_signature_has_no_side_effects(self):
        self.mock_gateway.construct_event.side_effect = InvalidWebhookSignatureError("bad")

        response = client.post(
            "/billing/v1/webhooks/stripe",
            content=json.dumps(EVENT).encode(),
            headers={"stripe-signature": "t=1,v1=forged"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid signature"}
        self.mock_handler.handle_event.assert_not_called()

    def test_missing_signature_header(self):
        response = client.post("/billing/v1/webhooks/stripe", content=json.dumps(EVENT).encode())

        assert response.status_code == 400
        self.mock_gateway.construct_event.assert_not_called()
        self.mock_handler.handle_event.assert_not_called()

    def test_ignored_event_is_still_acknowledged(self):
        self.mock_gateway.construct_event.return_value = {"id": "evt_2", "type": "invoice.paid"}
        self.mock_handler.handle_event.return_value = False

        response = client.post(
            "/billing/v1/webhooks/stripe",
            content=b"{}",
            headers={"stripe-signature": "t=1,v1=abc"},
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}

    @pytest.mark.asyncio
    async def test_slow_webhook_does_not_block_other_requests(self):
        def slow_handle(event):
            time.sleep(0.5)
            return True

        self.mock_gateway.construct_event.return_value = EVENT
        self.mock_handler.handle_event.side_effect = slow_handle

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            webhook = asyncio.create_task(
                ac.post(
                    "/billing/v1/webhooks/stripe",
                    content=json.dumps(EVENT).encode(),
                    headers={"stripe-signature": "t=1,v1=abc"},
                )
            )
            await asyncio.sleep(0.05)

            started = time.perf_counter()
            health = await ac.get("/health")
            health_latency = time.perf_counter() - started

            webhook_response = await webhook

        assert health.status_code == 200
        assert health_latency < 0.3
        assert webhook_response.status_code == 200
        self.mock_handler.handle_event.assert_called_once_with(EVENT)
