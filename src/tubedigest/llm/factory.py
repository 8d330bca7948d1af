"""Select a model client backend from configuration."""

import logging

from tubedigest.config import AIConfig
from tubedigest.llm.base import ModelClient
from tubedigest.llm.claude import ClaudeClient
from tubedigest.llm.gemini import GeminiClient
from tubedigest.llm.openai import OpenAIClient

logger = logging.getLogger(__name__)

PROVIDERS = ("gemini", "openai", "claude")


def create_client(config: AIConfig) -> ModelClient:
    """Build the client for ``config.provider``.

    A provider without an API key falls back to Gemini, which is the only
    backend that can also summarize by URL. Unknown provider names are
    treated as Gemini.
    """
    provider = (config.provider or "gemini").strip().lower()

    client: ModelClient
    if provider == "openai":
        client = OpenAIClient(api_key=config.openai_api_key, model=config.model)
    elif provider == "claude":
        client = ClaudeClient(api_key=config.anthropic_api_key, model=config.model)
    else:
        if provider != "gemini":
            logger.warning("Unknown AI provider '%s', using Gemini", provider)
        return GeminiClient(api_key=config.gemini_api_key, model=config.model)

    if not client.is_configured():
        logger.info("%s API key not set, falling back to Gemini", client.name)
        # The model preference names the original provider's models.
        return GeminiClient(api_key=config.gemini_api_key)
    return client
