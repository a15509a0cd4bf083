"""Endpoint configuration for the CLI.

Every command builds its provider here, so the environment variables that
select the endpoint, model and credential are read in one place.
"""

import os

import typer
from rich.console import Console

from ..config import DEEPSEEK_BASE_URL, DEEPSEEK_DEFAULT_MODEL, DEFAULT_PROVIDER, OPENAI_DEFAULT_MODEL
from ..llm import LLMProvider, create_llm_provider

_console = Console()

# Provider name -> environment variable holding its credential
API_KEY_VARS = {
    "deepseek": "DEEPSEEK_API_KEY",
    "openai": "OPENAI_API_KEY",
}

# Provider name -> (model variable, default model)
MODEL_VARS = {
    "deepseek": ("DEEPSEEK_MODEL", DEEPSEEK_DEFAULT_MODEL),
    "openai": ("OPENAI_CHAT_MODEL", OPENAI_DEFAULT_MODEL),
}


def selected_provider() -> str:
    """Provider named by LLM_PROVIDER (default: deepseek)."""
    return os.getenv("LLM_PROVIDER", DEFAULT_PROVIDER).strip().lower()


def provider_config(provider: str, model: str | None = None) -> dict[str, str | None]:
    """Collect keyword arguments for ``create_llm_provider`` from the environment."""
    model_var, default_model = MODEL_VARS[provider]
    config: dict[str, str | None] = {
        "api_key": os.getenv(API_KEY_VARS[provider]),
        "model": model or os.getenv(model_var, default_model),
    }
    if provider == "deepseek":
        config["base_url"] = os.getenv("DEEPSEEK_BASE_URL", DEEPSEEK_BASE_URL)
    return config


def get_llm(console: Console | None = None, model: str | None = None) -> LLMProvider | None:
    """Build the configured provider, or report why it cannot be built.

    Environment variables:
        LLM_PROVIDER: deepseek (default) or openai
        DEEPSEEK_API_KEY, DEEPSEEK_MODEL, DEEPSEEK_BASE_URL
        OPENAI_API_KEY, OPENAI_CHAT_MODEL
    """
    con = console or _console
    provider = selected_provider()

    if provider not in API_KEY_VARS:
        con.print(f"[red]Error: Unknown LLM provider: {provider}[/red]")
        return None

    config = provider_config(provider, model)
    if not config["api_key"]:
        con.print(f"[red]Error: {API_KEY_VARS[provider]} not set in environment[/red]")
        return None

    return create_llm_provider(provider, **config)


def require_llm(console: Console | None = None, model: str | None = None) -> LLMProvider:
    """Like ``get_llm`` but exits with status 1 when nothing is configured."""
    llm = get_llm(console, model=model)
    if llm is None:
        raise typer.Exit(code=1)
    return llm
