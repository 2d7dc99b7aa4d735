"""Offline classification client adapter.

Returns a fixed, schema-conforming response without network calls. Useful for
local development and as a template for new provider adapters: implement
BaseClassificationClient and register the provider in ClassifierFactory.
"""

import json
from typing import ClassVar

from app.classification.client_base import BaseClassificationClient


class ExampleClientAdapter(BaseClassificationClient):
    """Adapter that answers every request with DEFAULT_RESPONSE."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "category": "Offentlig dokument",
        "isCustomCategory": False,
        "tags": ["dokument"],
        "sensitiveData": False,
        "sensitiveDataTags": [],
        "confidence": 0.5,
        "language": "no",
        "description": "Dokument lastet opp til systemet",
        "aiName": "Dokument",
    }

    def analyze_document(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        prompt: str,
        document: bytes,
        filename: str,
    ) -> str:
        _ = model, temperature, max_tokens, prompt, document, filename
        return json.dumps(self.DEFAULT_RESPONSE)

    def analyze_image(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        prompt: str,
        image: bytes,
        image_mime_type: str,
    ) -> str:
        _ = model, temperature, max_tokens, prompt, image, image_mime_type
        return json.dumps(self.DEFAULT_RESPONSE)
