import pytest

from app.config.catalog import DocumentCatalog
from app.upload.exceptions import FileValidationError
from app.upload.models import UploadRequest
from app.upload.validator import FileValidator

MIB = 1024 * 1024


def _request(filename: str, content_type: str, size: int = 10) -> UploadRequest:
    return UploadRequest(filename=filename, content_type=content_type, data=b"x" * size)


class TestValidate:
    @pytest.mark.parametrize(
        ("filename", "content_type"),
        [
            ("report.pdf", "application/pdf"),
            ("photo.jpeg", "image/jpeg"),
            ("notes.md", "text/markdown"),
            ("letter.doc", "application/msword"),
        ],
    )
    def test_accepts_allow_listed_files(
        self, catalog: DocumentCatalog, filename: str, content_type: str
    ) -> None:
        FileValidator(catalog).validate(_request(filename, content_type))

    def test_accepts_on_extension_when_mime_is_generic(self, catalog: DocumentCatalog) -> None:
        FileValidator(catalog).validate(_request("SCAN.PNG", "application/octet-stream"))

    def test_accepts_on_mime_when_extension_is_unknown(self, catalog: DocumentCatalog) -> None:
        FileValidator(catalog).validate(_request("upload.bin", "application/pdf"))

    def test_rejects_unsupported_type(self, catalog: DocumentCatalog) -> None:
        with pytest.raises(FileValidationError, match='"virus.exe" is not a supported format'):
            FileValidator(catalog).validate(
                _request("virus.exe", "application/x-msdownload")
            )

    def test_rejects_file_over_limit(self, catalog: DocumentCatalog) -> None:
        request = _request("big.pdf", "application/pdf", size=10 * MIB + 1)
        with pytest.raises(FileValidationError, match="too large. Maximum size is 10MB"):
            FileValidator(catalog).validate(request)

    def test_accepts_file_exactly_at_limit(self, catalog: DocumentCatalog) -> None:
        FileValidator(catalog).validate(_request("big.pdf", "application/pdf", size=10 * MIB))

    def test_oversized_unsupported_file_reports_type_first(
        self, catalog: DocumentCatalog
    ) -> None:
        request = _request("movie.mkv", "video/x-matroska", size=11 * MIB)
        with pytest.raises(FileValidationError, match="not a supported format"):
            FileValidator(catalog).validate(request)


class TestResolveContentType:
    def test_prefers_declared_type(self, catalog: DocumentCatalog) -> None:
        request = _request("scan.png", "image/jpeg")
        assert FileValidator(catalog).resolve_content_type(request) == "image/jpeg"

    def test_falls_back_to_extension(self, catalog: DocumentCatalog) -> None:
        request = _request("notes.txt", "")
        assert FileValidator(catalog).resolve_content_type(request) == "text/plain"

    def test_unknown_extension_is_octet_stream(self, catalog: DocumentCatalog) -> None:
        request = _request("blob", "")
        assert FileValidator(catalog).resolve_content_type(request) == "application/octet-stream"
