"""AI-powered document classifier."""

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from app.classification.base import BaseClassifier
from app.classification.client_base import BaseClassificationClient
from app.classification.exceptions import UnsupportedFormatError
from app.classification.models import ClassificationResult
from app.classification.prompt_loader import build_prompt, load_prompt_template
from app.classification.response_parser import extract_json_object
from app.classification.sanitizer import sanitize
from app.config.catalog import DocumentCatalog
from app.logging.logger import Log
from app.rendering.base import BaseRenderer
from app.rendering.exceptions import RenderError
from app.rendering.pdf_rasterizer import PdfPageRasterizer

PDF_MIME_TYPE = "application/pdf"


def detect_image_mime_type(image: bytes) -> str:
    """Guess the image type from its signature; JPEG when nothing else matches."""
    if image.startswith(b"\x89PNG"):
        return "image/png"
    if image.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    if image[:4] == b"RIFF" and image[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Classifier(BaseClassifier):
    """Classifies documents with an AI provider.

    PDFs go to the provider's document endpoint. If the provider rejects the
    PDF format, the first page is rasterized and sent to the vision endpoint
    instead. Every other type is rendered to an image first.
    """

    def __init__(
        self,
        *,
        client: BaseClassificationClient,
        renderer: BaseRenderer,
        rasterizer: PdfPageRasterizer,
        catalog: DocumentCatalog,
        model: str,
        temperature: float = 0.1,
        max_tokens: int = 800,
        prompt_template_path: Path | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._client = client
        self._renderer = renderer
        self._rasterizer = rasterizer
        self._catalog = catalog
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._max_tokens = max_tokens
        self._prompt = build_prompt(load_prompt_template(prompt_template_path), catalog)
        self._clock = clock

    def classify(self, data: bytes, filename: str, mime_type: str) -> ClassificationResult:
        Log.info(f"Starting AI analysis for {filename} ({mime_type})")
        if mime_type == PDF_MIME_TYPE:
            raw_response = self._classify_pdf(data, filename)
        else:
            raw_response = self._analyze_image(self._render(data, filename, mime_type))
        Log.debug(f"AI raw response for {filename}:\n{raw_response}")

        parsed = extract_json_object(raw_response)
        parsed.pop("processingStatus", None)
        result = sanitize(parsed, self._catalog, analyzed_at=self._clock())
        Log.info(
            f"AI analysis completed for {filename}: category={result.category!r} "
            f"tags={list(result.tags)} sensitive={result.sensitive_data} "
            f"confidence={result.confidence}"
        )
        return result

    def _classify_pdf(self, data: bytes, filename: str) -> str:
        try:
            return self._client.analyze_document(
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                prompt=self._prompt,
                document=data,
                filename=filename,
            )
        except UnsupportedFormatError as exc:
            Log.warning(f"Provider rejected PDF {filename}, retrying with first page image: {exc}")
            try:
                image = self._rasterizer.rasterize_first_page(data)
            except RenderError as render_exc:
                raise UnsupportedFormatError(
                    f"PDF {filename} could not be rendered: {render_exc}"
                ) from render_exc
            return self._analyze_image(image)

    def _render(self, data: bytes, filename: str, mime_type: str) -> bytes:
        try:
            return self._renderer.render(data, filename, mime_type)
        except RenderError as exc:
            raise UnsupportedFormatError(str(exc)) from exc

    def _analyze_image(self, image: bytes) -> str:
        return self._client.analyze_image(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            prompt=self._prompt,
            image=image,
            image_mime_type=detect_image_mime_type(image),
        )
