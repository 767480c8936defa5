"""OpenAI chat completions client."""

from typing import Any

from openai import AsyncOpenAI, OpenAIError

from cloudgreet.core.errors import LLMGenerationError
from cloudgreet.llm.client import LLMClient


class OpenAIClient(LLMClient):
    """LLM client backed by OpenAI chat completions."""

    def __init__(self, api_key: str, model_name: str, client: AsyncOpenAI | None = None) -> None:
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key
            model_name: Default chat model
            client: Optional preconfigured AsyncOpenAI (tests)
        """
        self.client = client or AsyncOpenAI(api_key=api_key)
        self.model_name = model_name

    async def generate(self, prompt: str, context: dict | None = None) -> str:
        """Generate a response using OpenAI chat completions."""
        context = context or {}

        messages: list[dict[str, str]] = []
        if context.get("system_prompt"):
            messages.append({"role": "system", "content": context["system_prompt"]})
        messages.extend(context.get("history") or [])
        messages.append({"role": "user", "content": prompt})

        params: dict[str, Any] = {
            "model": context.get("model") or self.model_name,
            "messages": messages,
            "max_tokens": context.get("max_tokens", 100),
            "temperature": context.get("temperature", 0.85),
            "presence_penalty": 0.4,
            "frequency_penalty": 0.3,
            "top_p": 0.9,
        }
        if context.get("stop"):
            params["stop"] = context["stop"]

        try:
            completion = await self.client.chat.completions.create(**params)
        except OpenAIError as e:
            raise LLMGenerationError(f"OpenAI generation failed: {e}") from e

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""
