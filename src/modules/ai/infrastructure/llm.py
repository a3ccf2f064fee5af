import os
import threading
from typing import Any, Dict, List, Optional

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_groq import ChatGroq
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI

from src.core.utils.logging import get_logger

logger = get_logger(__name__)

_PROVIDER_MAP = {
    "anthropic": ChatAnthropic,
    "openai": ChatOpenAI,
    "google": ChatGoogleGenerativeAI,
    "groq": ChatGroq,
    "ollama": ChatOllama,
}

# Providers whose chat models accept an output token cap
_MAX_TOKENS_PROVIDERS = ("anthropic", "openai", "groq")

# Known report models. The configured model is merged over these.
MODEL_CONFIGS = [
    {
        "provider": "anthropic",
        "model_name": "claude-3-5-sonnet-20241022",
        "max_tokens": 4000,
    },
    {
        "provider": "openai",
        "model_name": "gpt-4o-2024-08-06",
        "max_tokens": 4000,
    },
    {
        "provider": "google",
        "model_name": "gemini-2.5-flash",
    },
    {
        "provider": "ollama",
        "model_name": "gpt-oss:20b",
        "validate_model_on_init": False,
    },
]


def model_key(config: Dict[str, Any]) -> str:
    return f"{config['provider']}/{config['model_name']}"


class LLMFactory:
    """
    Registry of LangChain chat models keyed by "provider/model_name".

    Models are built on first request and reused afterwards. Route handlers
    run in a threadpool, so creation is serialized.
    """

    def __init__(self, extra_configs: Optional[List[Dict[str, Any]]] = None):
        self._instances: Dict[str, BaseChatModel] = {}
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

        for config in MODEL_CONFIGS + (extra_configs or []):
            key = model_key(config)
            self._configs[key] = {**self._configs.get(key, {}), **config}

    def get_model(self, key: str) -> BaseChatModel:
        instance = self._instances.get(key)
        if instance is not None:
            return instance

        with self._lock:
            if key not in self._instances:
                config = self._configs.get(key) or self._infer_config(key)
                try:
                    self._instances[key] = self._create_instance(config)
                except Exception as e:
                    logger.error("llm_load_failed", model=key, error=str(e))
                    raise
                logger.info("llm_loaded", model=key)
            return self._instances[key]

    @staticmethod
    def _infer_config(key: str) -> Dict[str, Any]:
        provider, sep, model_name = key.partition("/")
        if not sep or not model_name:
            raise ValueError(f"Invalid model key format or unknown model: {key}")
        logger.info("llm_implicit_config", model=key)
        return {"provider": provider, "model_name": model_name}

    def _create_instance(self, config: Dict[str, Any]) -> BaseChatModel:
        provider = config.get("provider")
        model_class = _PROVIDER_MAP.get(provider)
        if model_class is None:
            raise ValueError(
                f"Unsupported provider: {provider}. Supported: {list(_PROVIDER_MAP.keys())}"
            )
        return model_class(**self._provider_params(provider, config))

    @staticmethod
    def _provider_params(provider: str, config: Dict[str, Any]) -> Dict[str, Any]:
        params: Dict[str, Any] = {"model": config["model_name"]}

        if config.get("temperature") is not None:
            params["temperature"] = config["temperature"]

        if provider in _MAX_TOKENS_PROVIDERS and "max_tokens" in config:
            params["max_tokens"] = config["max_tokens"]

        if provider == "ollama":
            if "validate_model_on_init" in config:
                params["validate_model_on_init"] = config["validate_model_on_init"]
            base_url = config.get("base_url") or os.getenv("OLLAMA_BASE_URL")
            if base_url:
                params["base_url"] = base_url

        return params
