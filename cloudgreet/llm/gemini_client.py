"""Gemini client implementation."""

from typing import Any

from google import genai
from google.genai import types

from cloudgreet.core.errors import LLMGenerationError
from cloudgreet.llm.client import LLMClient


class GeminiClient(LLMClient):
    """LLM client backed by Google Gemini."""

    def __init__(self, api_key: str, model_name: str) -> None:
        """Initialize Gemini client."""
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(api_version="v1beta"),
        )
        self.model_name = model_name

    async def generate(self, prompt: str, context: dict | None = None) -> str:
        """Generate a response using Gemini."""
        context = context or {}

        contents = [
            types.Content(
                role="model" if turn["role"] == "assistant" else "user",
                parts=[types.Part(text=turn["content"])],
            )
            for turn in context.get("history") or []
        ]
        contents.append(types.Content(role="user", parts=[types.Part(text=prompt)]))

        generation_config: dict[str, Any] = {
            "temperature": context.get("temperature", 0.85),
            "max_output_tokens": context.get("max_tokens", 100),
        }
        if context.get("system_prompt"):
            generation_config["system_instruction"] = context["system_prompt"]
        if context.get("stop"):
            generation_config["stop_sequences"] = context["stop"]

        try:
            response = await self.client.aio.models.generate_content(
                model=context.get("model") or self.model_name,
                contents=contents,
                config=types.GenerateContentConfig(**generation_config),
            )
        except Exception as e:
            raise LLMGenerationError(f"Gemini generation failed: {str(e)}") from e

        return response.text or ""
