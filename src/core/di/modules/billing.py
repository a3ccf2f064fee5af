from dependency_injector import containers, providers
from src.core.config.settings import settings

from src.modules.billing.repositories.impl.supabase.subscription_repository import SupabaseSubscriptionRepository
from src.modules.billing.repositories.impl.supabase.billing_event_repository import SupabaseBillingEventRepository

from src.modules.billing.repositories.impl.postgres.subscription_repository import PostgresSubscriptionRepository
from src.modules.billing.repositories.impl.postgres.billing_event_repository import PostgresBillingEventRepository

from src.modules.billing.services.subscription_service import SubscriptionService
from src.modules.billing.services.stripe_service import StripeService
from src.modules.billing.services.webhook_handler_service import WebhookHandlerService


class BillingContainer(containers.DeclarativeContainer):
    """
    Billing Module Container.
    """

    core = providers.DependenciesContainer()

    # Repositories
    subscription_repository = providers.Selector(
        core.db_backend,
        supabase=providers.Factory(SupabaseSubscriptionRepository, client=core.supabase_client),
        postgres=providers.Factory(PostgresSubscriptionRepository, db=core.postgres_db),
    )

    billing_event_repository = providers.Selector(
        core.db_backend,
        supabase=providers.Factory(SupabaseBillingEventRepository, client=core.supabase_client),
        postgres=providers.Factory(PostgresBillingEventRepository, db=core.postgres_db),
    )

    # Services
    subscription_service = providers.Factory(
        SubscriptionService,
        subscription_repo=subscription_repository,
        free_reports_limit=settings.billing.free_reports_limit,
        pro_reports_limit=settings.billing.pro_reports_limit,
        period_days=settings.billing.period_days,
    )

    stripe_service = providers.Singleton(
        StripeService,
        api_key=settings.stripe.api_key,
        webhook_secret=settings.stripe.webhook_secret,
        site_url=settings.api.site_url,
        price_cents=settings.billing.pro_price_cents,
        currency=settings.billing.currency,
        product_name=settings.billing.product_name,
        product_description=settings.billing.product_description,
    )

    webhook_handler_service = providers.Factory(
        WebhookHandlerService,
        subscription_service=subscription_service,
        event_repo=billing_event_repository,
        idempotent=settings.billing.idempotent_webhooks,
    )
