from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from src.modules.billing.enums.plan_type import PlanType
from src.modules.billing.exceptions import BillingRepositoryError, QuotaExceededError
from src.modules.billing.services.subscription_service import SubscriptionService
from tests.modules.billing.fakes import InMemorySubscriptionRepository

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)
USER_ID = "user_123"


def make_row(**overrides):
    row = {
        "id": "sub_1",
        "user_id": USER_ID,
        "plan": "free",
        "reports_used": 0,
        "reports_limit": 5,
        "billing_period_start": NOW - timedelta(days=10),
        "billing_period_end": NOW + timedelta(days=20),
    }
    row.update(overrides)
    return row


@pytest.fixture
def repo():
    return InMemorySubscriptionRepository()


@pytest.fixture
def service(repo):
    return SubscriptionService(repo, clock=lambda: NOW)


class TestLoadOrCreate:
    def test_creates_free_subscription_on_first_access(self, service, repo):
        subscription = service.load_or_create(USER_ID)

        assert subscription.plan == PlanType.FREE
        assert subscription.reports_used == 0
        assert subscription.reports_limit == 5
        assert subscription.billing_period_start == NOW
        assert subscription.billing_period_end == NOW + timedelta(days=30)
        assert repo.find_by_user(USER_ID) is not None

    def test_returns_existing_without_creating(self):
        repo = Mock()
        repo.find_by_user.return_value = Mock(reports_used=2)
        service = SubscriptionService(repo, clock=lambda: NOW)

        service.load_or_create(USER_ID)

        repo.create_if_absent.assert_not_called()

    def test_lookup_failure_is_not_treated_as_missing(self):
        repo = Mock()
        repo.find_by_user.side_effect = BillingRepositoryError("connection refused")
        service = SubscriptionService(repo, clock=lambda: NOW)

        with pytest.raises(BillingRepositoryError):
            service.load_or_create(USER_ID)

        repo.create_if_absent.assert_not_called()

    def test_create_returning_nothing_raises(self):
        repo = Mock()
        repo.find_by_user.return_value = None
        repo.create_if_absent.return_value = None
        service = SubscriptionService(repo, clock=lambda: NOW)

        with pytest.raises(BillingRepositoryError):
            service.load_or_create(USER_ID)

    def test_duplicate_insert_reads_existing_row(self):
        existing = InMemorySubscriptionRepository([make_row(reports_used=1)]).find_by_user(USER_ID)
        repo = Mock()
        repo.find_by_user.side_effect = [None, existing]
        repo.create_if_absent.return_value = None
        service = SubscriptionService(repo, clock=lambda: NOW)

        subscription = service.load_or_create(USER_ID)

        assert subscription.reports_used == 1
        assert repo.find_by_user.call_count == 2

    def test_custom_free_limit(self, repo):
        service = SubscriptionService(repo, free_reports_limit=3, clock=lambda: NOW)

        assert service.load_or_create(USER_ID).reports_limit == 3


class TestRollForward:
    def test_expired_period_resets_usage(self, service, repo):
        repo.create(make_row(
            reports_used=5,
            billing_period_start=NOW - timedelta(days=40),
            billing_period_end=NOW - timedelta(days=10),
        ))

        usage = service.check_usage(USER_ID)

        assert usage.reports_used == 0
        assert usage.can_generate is True
        row = repo.row(USER_ID)
        assert row["billing_period_start"] == NOW
        assert row["billing_period_end"] == NOW + timedelta(days=30)

    def test_period_ending_exactly_now_is_not_expired(self, service, repo):
        repo.create(make_row(reports_used=5, billing_period_end=NOW))

        usage = service.check_usage(USER_ID)

        assert usage.reports_used == 5
        assert usage.can_generate is False

    def test_reset_failure_keeps_stale_subscription(self):
        stale = InMemorySubscriptionRepository([
            make_row(reports_used=5, billing_period_end=NOW - timedelta(days=1))
        ]).find_by_user(USER_ID)
        repo = Mock()
        repo.find_by_user.return_value = stale
        repo.reset_period.side_effect = BillingRepositoryError("timeout")
        service = SubscriptionService(repo, clock=lambda: NOW)

        usage = service.check_usage(USER_ID)

        assert usage.reports_used == 5
        assert usage.can_generate is False


class TestCheckUsage:
    def test_remaining_reports(self, service, repo):
        repo.create(make_row(reports_used=2))

        usage = service.check_usage(USER_ID)

        assert usage.can_generate is True
        assert usage.reports_used == 2
        assert usage.reports_limit == 5
        assert usage.remaining_reports == 3

    def test_check_usage_does_not_consume(self, service, repo):
        repo.create(make_row(reports_used=4))

        service.check_usage(USER_ID)
        service.check_usage(USER_ID)

        assert repo.row(USER_ID)["reports_used"] == 4


class TestReserveReport:
    def test_reserve_increments_by_one(self, service, repo):
        repo.create(make_row(reports_used=4))

        reserved = service.reserve_report(USER_ID)

        assert reserved.reports_used == 5
        assert repo.row(USER_ID)["reports_used"] == 5

    def test_reserve_at_limit_raises(self, service, repo):
        repo.create(make_row(reports_used=5))

        with pytest.raises(QuotaExceededError) as exc_info:
            service.reserve_report(USER_ID)

        assert exc_info.value.current == 5
        assert exc_info.value.limit == 5
        assert "Upgrade" in str(exc_info.value)
        assert repo.row(USER_ID)["reports_used"] == 5

    def test_reserve_lost_race_raises(self):
        current = InMemorySubscriptionRepository([make_row(reports_used=4)]).find_by_user(USER_ID)
        after = InMemorySubscriptionRepository([make_row(reports_used=5)]).find_by_user(USER_ID)
        repo = Mock()
        repo.find_by_user.side_effect = [current, after]
        repo.increment_usage.return_value = None
        service = SubscriptionService(repo, clock=lambda: NOW)

        with pytest.raises(QuotaExceededError) as exc_info:
            service.reserve_report(USER_ID)

        assert exc_info.value.current == 5

    def test_release_never_goes_below_zero(self, service, repo):
        repo.create(make_row(reports_used=0))

        released = service.release_report(USER_ID)

        assert released.reports_used == 0

    def test_release_failure_is_swallowed(self):
        repo = Mock()
        repo.decrement_usage.side_effect = BillingRepositoryError("down")
        service = SubscriptionService(repo, clock=lambda: NOW)

        assert service.release_report(USER_ID) is None


class TestUpgradeToPro:
    def test_upgrade_existing_free_user(self, service, repo):
        repo.create(make_row(reports_used=5))

        subscription = service.upgrade_to_pro(USER_ID)

        assert subscription.plan == PlanType.PRO
        assert subscription.reports_used == 0
        assert subscription.reports_limit == 999
        assert subscription.billing_period_start == NOW
        assert subscription.billing_period_end == NOW + timedelta(days=30)
        assert service.check_usage(USER_ID).can_generate is True

    def test_upgrade_without_existing_row_creates_pro(self, service, repo):
        service.upgrade_to_pro("new_user")

        row = repo.row("new_user")
        assert row["plan"] == "pro"
        assert row["reports_limit"] == 999

    def test_upgrade_twice_is_stable(self, service, repo):
        service.upgrade_to_pro(USER_ID)
        service.reserve_report(USER_ID)
        service.upgrade_to_pro(USER_ID)

        row = repo.row(USER_ID)
        assert row["plan"] == "pro"
        assert row["reports_used"] == 0
