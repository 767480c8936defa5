"""LLM client interface."""

from abc import ABC, abstractmethod


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    model_name: str

    @abstractmethod
    async def generate(self, prompt: str, context: dict | None = None) -> str:
        """Generate a response from the LLM.

        Args:
            prompt: The latest user message
            context: Optional parameters: ``system_prompt``, ``history``
                (list of ``{"role", "content"}`` dicts, oldest first),
                ``temperature``, ``max_tokens``, ``stop``, ``model``

        Returns:
            The generated response text

        Raises:
            LLMGenerationError: If generation fails
        """
        pass
