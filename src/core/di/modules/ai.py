from dependency_injector import containers, providers
from src.core.config.settings import settings

from src.modules.ai.infrastructure.llm import LLMFactory


class AIContainer(containers.DeclarativeContainer):
    """
    AI Module Container.
    """

    # Models are created on first use and cached for the process
    llm_factory = providers.Singleton(
        LLMFactory,
        extra_configs=[
            {
                "provider": settings.llm_model.provider,
                "model_name": settings.llm_model.model_name,
                "max_tokens": settings.llm_model.max_tokens,
            }
        ],
    )

    llm_model_key = providers.Object(settings.llm_model.key)
