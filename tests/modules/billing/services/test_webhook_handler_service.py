import pytest
from unittest.mock import Mock

from src.modules.billing.exceptions import BillingRepositoryError
from src.modules.billing.services.webhook_handler_service import WebhookHandlerService


def checkout_event(event_id="evt_123", metadata=None):
    return {
        "id": event_id,
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": "cs_test_123",
                "customer": "cus_123",
                "subscription": "sub_123",
                "metadata": {"userId": "user_123", "plan": "pro"} if metadata is None else metadata,
            }
        },
    }


@pytest.fixture
def mock_subscription_service():
    return Mock()


@pytest.fixture
def mock_event_repo():
    repo = Mock()
    repo.exists.return_value = False
    return repo


@pytest.fixture
def webhook_handler(mock_subscription_service, mock_event_repo):
    return WebhookHandlerService(mock_subscription_service, mock_event_repo)


def test_checkout_completed_upgrades_user(webhook_handler, mock_subscription_service, mock_event_repo):
    handled = webhook_handler.handle_event(checkout_event())

    assert handled is True
    mock_subscription_service.upgrade_to_pro.assert_called_once_with("user_123")
    mock_event_repo.create.assert_called_once_with({
        "event_id": "evt_123",
        "event_type": "checkout.session.completed",
        "user_id": "user_123",
        "metadata": {
            "checkout_session_id": "cs_test_123",
            "stripe_customer_id": "cus_123",
            "stripe_subscription_id": "sub_123",
        },
    })


def test_checkout_without_user_id_is_ignored(webhook_handler, mock_subscription_service, mock_event_repo):
    handled = webhook_handler.handle_event(checkout_event(metadata={}))

    assert handled is False
    mock_subscription_service.upgrade_to_pro.assert_not_called()
    mock_event_repo.create.assert_not_called()


def test_replayed_event_is_not_applied_twice(webhook_handler, mock_subscription_service, mock_event_repo):
    mock_event_repo.exists.return_value = True

    handled = webhook_handler.handle_event(checkout_event())

    assert handled is False
    mock_event_repo.exists.assert_called_once_with("evt_123")
    mock_subscription_service.upgrade_to_pro.assert_not_called()


def test_replay_applies_again_when_idempotency_disabled(mock_subscription_service, mock_event_repo):
    mock_event_repo.exists.return_value = True
    handler = WebhookHandlerService(mock_subscription_service, mock_event_repo, idempotent=False)

    handled = handler.handle_event(checkout_event())

    assert handled is True
    mock_event_repo.exists.assert_not_called()
    mock_subscription_service.upgrade_to_pro.assert_called_once_with("user_123")


@pytest.mark.parametrize("event_type", ["invoice.payment_succeeded", "customer.subscription.deleted"])
def test_other_events_are_acknowledged_without_changes(webhook_handler, mock_subscription_service, event_type):
    handled = webhook_handler.handle_event({"id": "evt_9", "type": event_type, "data": {"object": {}}})

    assert handled is False
    mock_subscription_service.upgrade_to_pro.assert_not_called()


def test_upgrade_failure_does_not_record_event(webhook_handler, mock_subscription_service, mock_event_repo):
    mock_subscription_service.upgrade_to_pro.side_effect = BillingRepositoryError("db down")

    handled = webhook_handler.handle_event(checkout_event())

    assert handled is False
    mock_event_repo.create.assert_not_called()


def test_event_record_failure_keeps_upgrade(webhook_handler, mock_subscription_service, mock_event_repo):
    mock_event_repo.create.side_effect = BillingRepositoryError("insert failed")

    handled = webhook_handler.handle_event(checkout_event())

    assert handled is True
    mock_subscription_service.upgrade_to_pro.assert_called_once_with("user_123")
