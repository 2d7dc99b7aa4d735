from typing import ClassVar

from app.classification.base import BaseClassifier
from app.classification.classifier import Classifier
from app.classification.client_base import BaseClassificationClient
from app.classification.example_client_adapter import ExampleClientAdapter
from app.classification.openai_client_adapter import OpenAIClientAdapter
from app.config.catalog import DocumentCatalog
from app.config.settings import Settings
from app.rendering.pdf_rasterizer import PdfPageRasterizer
from app.rendering.text_renderer import PillowTextRenderer


class ClassifierFactory:
    """Creates the configured classifier with its provider client and renderers."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings, catalog: DocumentCatalog) -> BaseClassifier:
        """Create a configured classifier from application settings."""
        provider = settings.classification_provider.lower()
        return Classifier(
            client=cls._create_client(provider, settings),
            renderer=PillowTextRenderer(font_path=settings.render_font_path or None),
            rasterizer=PdfPageRasterizer(),
            catalog=catalog,
            model="example" if provider == "example" else settings.openai_model_name,
            temperature=settings.classification_temperature,
            max_tokens=settings.classification_max_tokens,
        )

    @classmethod
    def _create_client(cls, provider: str, settings: Settings) -> BaseClassificationClient:
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            api_key=settings.openai_api_key,
            timeout_seconds=settings.openai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "openai_compatible_base_url is required for "
                    "classification_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown classification provider '{provider}'. Choose from: {supported}"
        )
