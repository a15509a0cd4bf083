"""Construction of LLM providers by name."""

from typing import Any

from .base import LLMProvider
from .providers import DeepSeekProvider, OpenAIProvider

PROVIDERS: dict[str, type[LLMProvider]] = {
    "deepseek": DeepSeekProvider,
    "openai": OpenAIProvider,
}


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Instantiate the provider registered under a name.

    Args:
        provider: 'deepseek' or 'openai' (case-insensitive)
        **config: Constructor arguments; ``api_key`` is mandatory, ``model``
            and ``base_url`` fall back to the provider defaults

    Returns:
        Provider instance, not yet connected

    Raises:
        ValueError: If no provider is registered under the name
        TypeError: If ``api_key`` is missing

    Example:
        >>> provider = create_llm_provider("deepseek", api_key="sk-...")
        >>> provider.model
        'deepseek-chat'
    """
    provider_cls = PROVIDERS.get(provider.lower())
    if provider_cls is None:
        supported = ", ".join(f"'{name}'" for name in PROVIDERS)
        raise ValueError(f"Unsupported provider: {provider}. Supported providers: {supported}")

    if "api_key" not in config:
        raise TypeError(f"{provider_cls.__name__} requires 'api_key' in config")

    return provider_cls(**config)
