"""Tests for the LLM client layer."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APIConnectionError

from cloudgreet.core.errors import LLMGenerationError
from cloudgreet.llm.factory import get_llm_client
from cloudgreet.llm.gemini_client import GeminiClient
from cloudgreet.llm.openai_client import OpenAIClient
from cloudgreet.settings import Settings


def completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def openai_sdk():
    sdk = MagicMock()
    sdk.chat.completions.create = AsyncMock(return_value=completion("Sounds good!"))
    return sdk


class TestOpenAIClient:
    """Tests for OpenAIClient."""

    @pytest.mark.asyncio
    async def test_builds_chat_messages(self, openai_sdk):
        client = OpenAIClient(api_key="sk-test", model_name="gpt-4-turbo-preview", client=openai_sdk)

        reply = await client.generate(
            "Tuesday works",
            {
                "system_prompt": "You are Sarah.",
                "history": [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Hello!"}],
                "stop": ["Caller:"],
            },
        )

        assert reply == "Sounds good!"
        params = openai_sdk.chat.completions.create.await_args.kwargs
        assert params["model"] == "gpt-4-turbo-preview"
        assert params["messages"] == [
            {"role": "system", "content": "You are Sarah."},
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello!"},
            {"role": "user", "content": "Tuesday works"},
        ]
        assert params["max_tokens"] == 100
        assert params["temperature"] == 0.85
        assert params["stop"] == ["Caller:"]

    @pytest.mark.asyncio
    async def test_model_override(self, openai_sdk):
        client = OpenAIClient(api_key="sk-test", model_name="gpt-4-turbo-preview", client=openai_sdk)

        await client.generate("Hi", {"model": "gpt-4o-mini"})

        assert openai_sdk.chat.completions.create.await_args.kwargs["model"] == "gpt-4o-mini"
        assert "stop" not in openai_sdk.chat.completions.create.await_args.kwargs

    @pytest.mark.asyncio
    async def test_empty_content(self, openai_sdk):
        openai_sdk.chat.completions.create.return_value = completion(None)
        client = OpenAIClient(api_key="sk-test", model_name="gpt-test", client=openai_sdk)

        assert await client.generate("Hi") == ""

    @pytest.mark.asyncio
    async def test_sdk_errors_are_wrapped(self, openai_sdk):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        openai_sdk.chat.completions.create.side_effect = APIConnectionError(request=request)
        client = OpenAIClient(api_key="sk-test", model_name="gpt-test", client=openai_sdk)

        with pytest.raises(LLMGenerationError):
            await client.generate("Hi")


class TestFactory:
    """Tests for get_llm_client."""

    def test_openai_by_default(self):
        client = get_llm_client(settings=Settings(openai_api_key="sk-test", openai_model="gpt-test"))

        assert isinstance(client, OpenAIClient)
        assert client.model_name == "gpt-test"

    def test_gemini_mode(self):
        settings = Settings(llm_mode="gemini", gemini_api_key="test-key", gemini_model="gemini-2.0-flash")

        client = get_llm_client(settings=settings)

        assert isinstance(client, GeminiClient)
        assert client.model_name == "gemini-2.0-flash"

    def test_explicit_mode_wins(self):
        settings = Settings(llm_mode="gemini", openai_api_key="sk-test")

        assert isinstance(get_llm_client("openai", settings=settings), OpenAIClient)

    def test_unsupported_mode(self):
        with pytest.raises(ValueError, match="Unsupported LLM mode"):
            get_llm_client("llama", settings=Settings())
