"""
Dependency Injection Container.
"""

from dependency_injector import containers, providers

from src.core.di.modules.core import CoreContainer
from src.core.di.modules.ai import AIContainer
from src.core.di.modules.billing import BillingContainer
from src.core.di.modules.reports import ReportsContainer
from src.core.di.modules.companies import CompaniesContainer


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    Composes the module containers and exposes the services the API
    routes depend on.
    """

    # Wiring configuration
    wiring_config = containers.WiringConfiguration(
        modules=[
            "src.modules.billing.api.v1.usage",
            "src.modules.billing.api.v1.payments",
            "src.modules.billing.api.v1.webhooks",
            "src.modules.reports.api.v1.reports",
            "src.modules.companies.api.v1.companies",
        ]
    )

    core = providers.Container(CoreContainer)

    ai = providers.Container(AIContainer)

    billing = providers.Container(BillingContainer, core=core)

    reports = providers.Container(ReportsContainer, core=core, ai=ai, billing=billing)

    companies = providers.Container(CompaniesContainer, core=core)

    # Aliases used by the API layer
    subscription_service = billing.subscription_service
    stripe_service = billing.stripe_service
    webhook_handler_service = billing.webhook_handler_service
    report_service = reports.report_service
    company_service = companies.company_service
