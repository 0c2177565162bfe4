"""Photo suitability check before extraction."""

from passport_extractor.extraction.client_base import BaseExtractionClient
from passport_extractor.extraction.exceptions import ExtractionError, ExtractionRateLimitError
from passport_extractor.extraction.models import QualityReport
from passport_extractor.extraction.parser import parse_json
from passport_extractor.extraction.prompt_loader import load_quality_prompt
from passport_extractor.imaging.models import NormalizedImage
from passport_extractor.logging.logger import Log

BUSY_MESSAGE = "Service is temporarily busy, please try again in a few moments"


class QualityChecker:
    """Asks the AI provider whether a photo is fit for passport extraction."""

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        model: str,
        system_prompt: str | None = None,
        max_tokens: int = 200,
    ) -> None:
        self._client = client
        self._model = model
        self._system_prompt = system_prompt if system_prompt is not None else load_quality_prompt()
        self._max_tokens = max_tokens

    async def check(self, image: NormalizedImage) -> QualityReport:
        try:
            raw = await self._client.create_chat_completion(
                model=self._model,
                temperature=0.0,
                max_tokens=self._max_tokens,
                system_prompt=self._system_prompt,
                user_text="Evaluate this passport photo for data extraction suitability:",
                image_url=image.data_url(),
                image_detail="low",
            )
            parsed = parse_json(raw)
        except ExtractionRateLimitError:
            Log.warning("Quality check rate limited")
            return QualityReport(is_valid=False, issues=[BUSY_MESSAGE])
        except ExtractionError as exc:
            Log.error(f"Quality check failed: {exc.note()}")
            return QualityReport(is_valid=False, issues=[exc.note()])

        issues = parsed.get("issues") or []
        if not isinstance(issues, list):
            issues = [str(issues)]
        return QualityReport(
            is_valid=parsed.get("isValid") is True,
            issues=[str(issue) for issue in issues],
        )
