from typing import ClassVar

from passport_extractor.config.exceptions import ConfigurationError
from passport_extractor.config.settings import Settings
from passport_extractor.extraction.client_base import BaseExtractionClient
from passport_extractor.extraction.example_client_adapter import ExampleClientAdapter
from passport_extractor.extraction.extractor import Extractor
from passport_extractor.extraction.models import REQUIRED_FIELDS
from passport_extractor.extraction.openai_client_adapter import OpenAIClientAdapter
from passport_extractor.extraction.prompt_loader import load_profile
from passport_extractor.extraction.quality import QualityChecker


class ExtractorFactory:
    """Creates the configured extractor and its provider client."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    # Local servers accept any key but the SDK requires a non-empty one.
    KEYLESS_PROVIDERS: ClassVar[dict[str, str]] = {"ollama": "ollama"}

    @classmethod
    def create(cls, settings: Settings) -> Extractor:
        """Create a configured extractor from application settings."""
        provider = settings.extraction_provider.lower()
        profile = load_profile(required_fields=REQUIRED_FIELDS)
        if provider == "example":
            return Extractor(
                client=ExampleClientAdapter(),
                model="example",
                profile=profile,
                temperature=0.0,
            )
        return Extractor(
            client=cls.create_client(settings),
            model=settings.extraction_model_name,
            profile=profile,
            temperature=settings.extraction_temperature,
            max_tokens=settings.extraction_max_tokens,
            default_confidence=settings.extraction_default_confidence,
        )

    @classmethod
    def create_quality_checker(cls, settings: Settings) -> QualityChecker:
        provider = settings.extraction_provider.lower()
        if provider == "example":
            return QualityChecker(
                client=ExampleClientAdapter(ExampleClientAdapter.QUALITY_RESPONSE),
                model="example",
            )
        return QualityChecker(
            client=cls.create_client(settings),
            model=settings.extraction_model_name,
        )

    @classmethod
    def create_client(cls, settings: Settings) -> BaseExtractionClient:
        provider = settings.extraction_provider.lower()
        base_url = cls._resolve_base_url(provider, settings)
        return OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=settings.extraction_timeout_seconds,
            base_url=base_url,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return settings.extraction_base_url.strip() or None
        if provider == "openai_compatible":
            url = settings.extraction_base_url.strip()
            if not url:
                raise ConfigurationError(
                    "extraction_base_url is required for "
                    "extraction_provider=openai_compatible"
                )
            return url
        if provider in cls.OPENAI_COMPATIBLE_BASE_URLS:
            return settings.extraction_base_url.strip() or cls.OPENAI_COMPATIBLE_BASE_URLS[provider]
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ConfigurationError(
            f"Unknown extraction provider '{provider}'. Choose from: {supported}"
        )

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key = settings.extraction_api_key or settings.openai_api_key
        if key:
            return key
        if provider in cls.KEYLESS_PROVIDERS:
            return cls.KEYLESS_PROVIDERS[provider]
        raise ConfigurationError(
            f"extraction_api_key is required for extraction_provider={provider}"
        )
