"""Factory to create LLM clients based on a mode string or settings."""

from cloudgreet.llm.client import LLMClient
from cloudgreet.settings import Settings, settings as default_settings


def get_llm_client(mode: str | None = None, settings: Settings | None = None) -> LLMClient:
    """Return an LLMClient instance for the requested mode.

    Priority: explicit ``mode`` argument -> ``LLM_MODE`` setting.
    """
    settings = settings or default_settings
    selected = (mode or settings.llm_mode or "openai").lower()

    if selected == "openai":
        from cloudgreet.llm.openai_client import OpenAIClient
        return OpenAIClient(api_key=settings.openai_api_key, model_name=settings.openai_model)

    if selected in ("gemini", "google"):
        from cloudgreet.llm.gemini_client import GeminiClient
        return GeminiClient(api_key=settings.gemini_api_key, model_name=settings.gemini_model)

    raise ValueError(f"Unsupported LLM mode: {selected}")
