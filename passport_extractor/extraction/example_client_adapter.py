"""Example extraction client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseExtractionClient and register the provider in ExtractorFactory.
"""

import json
from typing import ClassVar

from passport_extractor.extraction.client_base import BaseExtractionClient


class ExampleClientAdapter(BaseExtractionClient):
    """Example adapter that returns a fixed, valid passport JSON.

    No network calls. Useful for local development, tests, and as a template
    for building real provider adapters.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "fullName": "JOHN EXAMPLE DOE",
        "dateOfBirth": "1980-01-01",
        "passportNumber": "X12345678",
        "nationality": "USA",
        "dateOfIssue": "2020-01-01",
        "dateOfExpiry": "2030-01-01",
        "placeOfBirth": "NEW YORK, USA",
        "issuingAuthority": "DEPARTMENT OF STATE",
        "gender": "M",
        "mrz": {
            "line1": "P<USADOE<<JOHN<EXAMPLE".ljust(44, "<"),
            "line2": "X123456784USA8001014M3001015".ljust(44, "<"),
        },
        "confidence_scores": {
            "fullName": 0.95,
            "dateOfBirth": 0.95,
            "passportNumber": 0.95,
            "nationality": 0.95,
            "dateOfIssue": 0.9,
            "dateOfExpiry": 0.9,
            "placeOfBirth": 0.85,
            "issuingAuthority": 0.85,
            "mrz": 0.95,
        },
        "extraction_notes": [],
    }

    QUALITY_RESPONSE: ClassVar[dict[str, object]] = {"isValid": True, "issues": []}

    def __init__(self, response: dict[str, object] | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE

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
        _ = model, temperature, max_tokens, system_prompt, user_text, image_url, image_detail
        return json.dumps(self._response)
