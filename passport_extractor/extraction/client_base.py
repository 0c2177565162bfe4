from abc import ABC, abstractmethod


class BaseExtractionClient(ABC):
    """Contract for provider-specific vision/text completion clients."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_text: str,
        image_url: str | None = None,
        image_detail: str = "high",
    ) -> str:
        """Return the provider's JSON-mode response as plain text.

        Raises:
            ExtractionError: on any provider failure.
        """
