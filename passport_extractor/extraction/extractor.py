"""AI-powered passport data extractor."""

from passport_extractor.extraction.base import BaseExtractor
from passport_extractor.extraction.client_base import BaseExtractionClient
from passport_extractor.extraction.exceptions import ExtractionError
from passport_extractor.extraction.models import (
    DEFAULT_OVERALL_CONFIDENCE,
    ExtractionOutcome,
    ExtractionProfile,
)
from passport_extractor.extraction.parser import build_result, parse_json
from passport_extractor.extraction.prompt_loader import load_profile
from passport_extractor.imaging.models import NormalizedImage
from passport_extractor.logging.logger import Log

IMAGE_INSTRUCTION = "Extract the passport data from this image."
TEXT_INSTRUCTION = "Extract the passport data from this text:\n\n{text}"


class Extractor(BaseExtractor):
    """Extracts passport fields from images or text using an AI provider."""

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        model: str,
        profile: ExtractionProfile | None = None,
        temperature: float = 0.1,
        max_tokens: int = 4096,
        default_confidence: float = DEFAULT_OVERALL_CONFIDENCE,
        image_detail: str = "high",
    ) -> None:
        self._client = client
        self._model = model
        self._profile = profile if profile is not None else load_profile()
        self._temperature = max(0.0, min(0.2, temperature))
        self._max_tokens = max_tokens
        self._default_confidence = default_confidence
        self._image_detail = image_detail

    @property
    def profile(self) -> ExtractionProfile:
        return self._profile

    async def extract(self, source: NormalizedImage | str) -> ExtractionOutcome:
        """Extract passport fields; provider and format failures become a failed outcome."""
        try:
            raw_response = await self._call_ai(source)
            Log.debug(f"AI raw response:\n{raw_response}")
            result = build_result(
                parse_json(raw_response),
                default_confidence=self._default_confidence,
            )
        except ExtractionError as exc:
            Log.error(f"Extraction failed: {exc.note()}")
            return ExtractionOutcome(error=exc)

        Log.info(
            f"Extraction complete: overall confidence {result.overall_confidence}, "
            f"{len(result.extraction_notes)} notes"
        )
        return ExtractionOutcome(result=result)

    async def _call_ai(self, source: NormalizedImage | str) -> str:
        if isinstance(source, NormalizedImage):
            user_text = IMAGE_INSTRUCTION
            image_url: str | None = source.data_url()
            Log.debug(f"Extraction request: image {source.width}x{source.height}")
        else:
            user_text = TEXT_INSTRUCTION.format(text=source)
            image_url = None
            Log.debug(f"Extraction prompt:\n{user_text}")
        return await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=self._profile.system_prompt,
            user_text=user_text,
            image_url=image_url,
            image_detail=self._image_detail,
        )
