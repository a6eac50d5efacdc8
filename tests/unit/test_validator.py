import pytest

from app.ingestion.exceptions import UploadValidationError
from app.ingestion.validator import (
    MB,
    FileFormat,
    FileValidator,
    detect_format,
    extension_for,
)

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _make_validator(max_upload_size_bytes: int = 100 * MB) -> FileValidator:
    return FileValidator(max_upload_size_bytes)


class TestDetectFormat:
    def test_content_type_wins(self) -> None:
        assert detect_format("scan.txt", "application/pdf") is FileFormat.PDF

    def test_falls_back_to_extension(self) -> None:
        assert detect_format("photo.JPEG", "application/octet-stream") is FileFormat.JPG

    def test_content_type_parameters_ignored(self) -> None:
        assert detect_format("x", "text/csv; charset=utf-8") is FileFormat.CSV

    def test_unknown(self) -> None:
        assert detect_format("archive.zip", "application/zip") is FileFormat.UNKNOWN


class TestExtensionFor:
    def test_known_formats(self) -> None:
        assert extension_for(FileFormat.PNG) == ".png"
        assert extension_for(FileFormat.JPG) == ".jpg"
        assert extension_for(FileFormat.DOCX) == ".docx"

    def test_unknown_format_has_no_extension(self) -> None:
        assert extension_for(FileFormat.UNKNOWN) == ""


class TestValidate:
    def test_accepts_pdf(self) -> None:
        assert _make_validator().validate(b"%PDF-1.7 ...", "a.pdf", "application/pdf") is FileFormat.PDF

    def test_accepts_docx_zip_signature(self) -> None:
        assert _make_validator().validate(b"PK\x03\x04rest", "a.docx", DOCX_TYPE) is FileFormat.DOCX

    def test_accepts_text_without_signature(self) -> None:
        assert _make_validator().validate(b"hello", "a.txt", "text/plain") is FileFormat.TXT

    def test_unknown_format_passes(self) -> None:
        assert _make_validator().validate(b"\x00\x01", "a.bin", "application/x-thing") is FileFormat.UNKNOWN

    def test_rejects_empty_upload(self) -> None:
        with pytest.raises(UploadValidationError, match="empty"):
            _make_validator().validate(b"", "a.txt", "text/plain")

    def test_rejects_missing_name(self) -> None:
        with pytest.raises(UploadValidationError, match="name"):
            _make_validator().validate(b"data", "  ", "text/plain")

    @pytest.mark.parametrize("name", ["setup.exe", "lib.DLL", "run.sh", "x.scr", "a.msi"])
    def test_rejects_blocked_extensions(self, name: str) -> None:
        with pytest.raises(UploadValidationError, match="not allowed"):
            _make_validator().validate(b"MZ", name, "application/octet-stream")

    def test_rejects_over_global_limit(self) -> None:
        with pytest.raises(UploadValidationError, match="upload limit"):
            _make_validator(max_upload_size_bytes=4).validate(b"hello", "a.txt", "text/plain")

    def test_rejects_over_format_limit(self) -> None:
        data = b"a" * (10 * MB + 1)
        with pytest.raises(UploadValidationError, match="TXT limit"):
            _make_validator().validate(data, "a.txt", "text/plain")

    def test_format_limit_at_boundary_passes(self) -> None:
        data = b"\xff\xd8" + b"0" * (20 * MB - 2)
        assert _make_validator().validate(data, "a.jpg", "image/jpeg") is FileFormat.JPG

    @pytest.mark.parametrize(
        "data,name,content_type",
        [
            (b"<html>", "a.pdf", "application/pdf"),
            (b"GIF89a", "a.png", "image/png"),
            (b"\x89PNG", "a.jpg", "image/jpeg"),
            (b"%PDF", "a.docx", DOCX_TYPE),
        ],
    )
    def test_rejects_magic_byte_mismatch(self, data: bytes, name: str, content_type: str) -> None:
        with pytest.raises(UploadValidationError, match="valid"):
            _make_validator().validate(data, name, content_type)
