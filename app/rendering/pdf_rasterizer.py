import pymupdf

from app.rendering.exceptions import RenderError


class PdfPageRasterizer:
    """Renders the first page of a PDF to PNG using PyMuPDF."""

    def __init__(self, dpi: int = 110) -> None:
        self._dpi = dpi

    def rasterize_first_page(self, pdf_bytes: bytes) -> bytes:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.page_count == 0:
                    raise RenderError("PDF has no pages")
                pixmap = doc[0].get_pixmap(dpi=self._dpi)
                return bytes(pixmap.tobytes("png"))
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(f"pymupdf rasterization failed: {exc}") from exc
