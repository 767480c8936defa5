"""LLM abstraction layer."""

from cloudgreet.llm.client import LLMClient
from cloudgreet.llm.factory import get_llm_client

__all__ = ["LLMClient", "get_llm_client"]
