import httpx
import openai

from passport_extractor.extraction.client_base import BaseExtractionClient
from passport_extractor.extraction.exceptions import (
    ExtractionAuthenticationError,
    ExtractionError,
    ExtractionNetworkError,
    ExtractionRateLimitError,
    ExtractionTimeoutError,
)


class OpenAIClientAdapter(BaseExtractionClient):
    """Extraction client adapter built on the OpenAI-compatible async chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

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
        content: list[dict[str, object]] = [{"type": "text", "text": user_text}]
        if image_url is not None:
            content.append(
                {
                    "type": "image_url",
                    "image_url": {"url": image_url, "detail": image_detail},
                }
            )
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": content},
                ],
            )
        except openai.RateLimitError as exc:
            raise ExtractionRateLimitError(f"AI provider rate limit: {exc}") from exc
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise ExtractionAuthenticationError(f"AI provider rejected credentials: {exc}") from exc
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise ExtractionTimeoutError(f"AI provider timed out: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise ExtractionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ExtractionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ExtractionError("AI returned no choices")
        message = response.choices[0].message.content
        if message is None:
            raise ExtractionError("AI returned empty response")
        return message
