import io
import math
from typing import ClassVar

from PIL import Image, ImageDraw, ImageFont

from app.rendering.base import BaseRenderer
from app.rendering.exceptions import RenderError, UnsupportedTypeError

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


class PillowTextRenderer(BaseRenderer):
    """Draws plain text, markdown and CSV onto a fixed-width white canvas.

    Layout is a greedy word wrap: words are added to the current line until
    the measured width would exceed the canvas width minus padding. Output is
    deterministic for a given font.
    """

    CANVAS_WIDTH: ClassVar[int] = 800
    FONT_SIZE: ClassVar[int] = 16
    LINE_HEIGHT_FACTOR: ClassVar[float] = 1.2
    PADDING: ClassVar[int] = 20
    # Longest side the vision endpoint accepts; text past it is not drawn.
    MAX_CANVAS_HEIGHT: ClassVar[int] = 2048
    PNG_COMPRESS_LEVEL: ClassVar[int] = 6

    TEXT_MIME_TYPES: ClassVar[frozenset[str]] = frozenset(
        {"text/plain", "text/markdown", "text/csv"}
    )
    TEXT_SUFFIXES: ClassVar[tuple[str, ...]] = (".txt", ".md", ".csv")

    def __init__(self, font_path: str | None = None) -> None:
        self._font = self._load_font(font_path)
        self._line_height = self.FONT_SIZE * self.LINE_HEIGHT_FACTOR
        self._max_lines = int((self.MAX_CANVAS_HEIGHT - 2 * self.PADDING) // self._line_height)

    def render(self, data: bytes, filename: str, mime_type: str) -> bytes:
        if mime_type == "application/pdf" or mime_type.startswith("image/"):
            return data
        if not self.is_text(filename, mime_type):
            raise UnsupportedTypeError(
                f"Unsupported file type for conversion: {mime_type}. Supported types: "
                "PDF, images (JPEG, PNG, GIF, WebP), text files, CSV, and Markdown."
            )
        text = data.decode("utf-8", errors="replace")
        try:
            return self._draw(self.wrap(text))
        except (OSError, ValueError, MemoryError) as exc:
            raise RenderError(f"Text to image conversion failed: {exc}") from exc

    @classmethod
    def is_text(cls, filename: str, mime_type: str) -> bool:
        return mime_type in cls.TEXT_MIME_TYPES or filename.lower().endswith(cls.TEXT_SUFFIXES)

    def wrap(self, text: str) -> list[str]:
        """Split text into lines that fit the canvas; explicit line breaks are kept.

        Only as many lines as fit within ``MAX_CANVAS_HEIGHT`` are returned; the
        rest of the text is dropped.
        """
        max_width = self.CANVAS_WIDTH - 2 * self.PADDING
        lines: list[str] = []
        for paragraph in text.splitlines():
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}" if current else word
                if current and self._font.getlength(candidate) > max_width:
                    lines.append(current)
                    if len(lines) >= self._max_lines:
                        return lines
                    current = word
                else:
                    current = candidate
            lines.append(current)
            if len(lines) >= self._max_lines:
                return lines
        return lines

    @property
    def max_lines(self) -> int:
        return self._max_lines

    def canvas_height(self, line_count: int) -> int:
        return math.ceil(line_count * self._line_height + 2 * self.PADDING)

    def _draw(self, lines: list[str]) -> bytes:
        image = Image.new("RGB", (self.CANVAS_WIDTH, self.canvas_height(len(lines))), "white")
        draw = ImageDraw.Draw(image)
        for index, line in enumerate(lines):
            if line:
                y = self.PADDING + index * self._line_height
                draw.text((self.PADDING, y), line, fill="black", font=self._font)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG", compress_level=self.PNG_COMPRESS_LEVEL)
        return buffer.getvalue()

    @classmethod
    def _load_font(cls, font_path: str | None) -> Font:
        if font_path:
            try:
                return ImageFont.truetype(font_path, cls.FONT_SIZE)
            except OSError as exc:
                raise RenderError(f"Cannot load font {font_path}: {exc}") from exc
        return ImageFont.load_default(size=cls.FONT_SIZE)
