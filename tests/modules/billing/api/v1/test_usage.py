from unittest.mock import MagicMock

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from src.main import app
from src.modules.billing.exceptions import BillingRepositoryError
from src.modules.billing.services.subscription_service import SubscriptionService, UsageStatus

client = TestClient(app)


class TestUsageAPI:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.mock_service = MagicMock(spec=SubscriptionService)
        app.container.subscription_service.override(providers.Object(self.mock_service))
        yield
        app.container.subscription_service.reset_override()

    def test_check_usage(self):
        self.mock_service.check_usage.return_value = UsageStatus(
            can_generate=True, reports_used=2, reports_limit=5, remaining_reports=3
        )

        response = client.post("/billing/v1/usage/check", json={"userId": "user_123"})

        assert response.status_code == 200
        assert response.json() == {
            "canGenerate": True,
            "reportsUsed": 2,
            "reportsLimit": 5,
            "remainingReports": 3,
        }
        self.mock_service.check_usage.assert_called_once_with("user_123")

    def test_check_usage_missing_user_id(self):
        response = client.post("/billing/v1/usage/check", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "User ID required"}
        self.mock_service.check_usage.assert_not_called()

    def test_check_usage_storage_failure(self):
        self.mock_service.check_usage.side_effect = BillingRepositoryError("db down")

        response = client.post("/billing/v1/usage/check", json={"userId": "user_123"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to check usage"}
