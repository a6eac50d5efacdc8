from enum import Enum
from pathlib import PurePosixPath

from app.ingestion.exceptions import UploadValidationError
from app.logging.logger import Log

MB = 1024 * 1024

BLOCKED_EXTENSIONS = frozenset({".exe", ".dll", ".bat", ".cmd", ".sh", ".com", ".msi", ".scr"})


class FileFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    XLSX = "xlsx"
    TXT = "txt"
    CSV = "csv"
    JPG = "jpg"
    PNG = "png"
    TIFF = "tiff"
    UNKNOWN = "unknown"


_FORMAT_BY_CONTENT_TYPE: dict[str, FileFormat] = {
    "application/pdf": FileFormat.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": FileFormat.DOCX,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": FileFormat.XLSX,
    "text/plain": FileFormat.TXT,
    "text/csv": FileFormat.CSV,
    "image/jpeg": FileFormat.JPG,
    "image/jpg": FileFormat.JPG,
    "image/png": FileFormat.PNG,
    "image/tiff": FileFormat.TIFF,
}

_FORMAT_BY_EXTENSION: dict[str, FileFormat] = {
    ".pdf": FileFormat.PDF,
    ".docx": FileFormat.DOCX,
    ".xlsx": FileFormat.XLSX,
    ".txt": FileFormat.TXT,
    ".csv": FileFormat.CSV,
    ".jpg": FileFormat.JPG,
    ".jpeg": FileFormat.JPG,
    ".png": FileFormat.PNG,
    ".tif": FileFormat.TIFF,
    ".tiff": FileFormat.TIFF,
}

_EXTENSION_BY_FORMAT: dict[FileFormat, str] = {
    FileFormat.PDF: ".pdf",
    FileFormat.DOCX: ".docx",
    FileFormat.XLSX: ".xlsx",
    FileFormat.TXT: ".txt",
    FileFormat.CSV: ".csv",
    FileFormat.JPG: ".jpg",
    FileFormat.PNG: ".png",
    FileFormat.TIFF: ".tiff",
}


def extension_for(file_format: FileFormat) -> str:
    """Canonical file extension for a format, or an empty string when unknown."""
    return _EXTENSION_BY_FORMAT.get(file_format, "")


MAX_SIZE_BY_FORMAT: dict[FileFormat, int] = {
    FileFormat.PDF: 50 * MB,
    FileFormat.DOCX: 25 * MB,
    FileFormat.XLSX: 25 * MB,
    FileFormat.TXT: 10 * MB,
    FileFormat.CSV: 10 * MB,
    FileFormat.JPG: 20 * MB,
    FileFormat.PNG: 20 * MB,
    FileFormat.TIFF: 50 * MB,
}

# Text formats and TIFF have no signature check.
_MAGIC_BYTES: dict[FileFormat, bytes] = {
    FileFormat.PDF: b"%PDF",
    FileFormat.JPG: b"\xff\xd8",
    FileFormat.PNG: b"\x89PNG",
    FileFormat.DOCX: b"PK",
    FileFormat.XLSX: b"PK",
}


def detect_format(file_name: str, content_type: str | None) -> FileFormat:
    """Detect the file format from the content type, falling back to the extension."""
    if content_type:
        normalized = content_type.split(";", 1)[0].strip().lower()
        file_format = _FORMAT_BY_CONTENT_TYPE.get(normalized)
        if file_format is not None:
            return file_format
    extension = PurePosixPath(file_name).suffix.lower()
    return _FORMAT_BY_EXTENSION.get(extension, FileFormat.UNKNOWN)


class FileValidator:
    """Rejects uploads that must never reach storage or extraction.

    Formats without a registered processor are not rejected here; they are
    stored and fail later as unsupported.
    """

    def __init__(self, max_upload_size_bytes: int) -> None:
        self._max_upload_size_bytes = max_upload_size_bytes

    def validate(self, file_bytes: bytes, file_name: str, content_type: str | None) -> FileFormat:
        """Validate an upload and return its detected format.

        Raises:
            UploadValidationError: on the first failed check.
        """
        if not file_name or not file_name.strip():
            raise UploadValidationError("File name is required")

        size = len(file_bytes)
        if size == 0:
            raise UploadValidationError(f"File '{file_name}' is empty")

        extension = PurePosixPath(file_name).suffix.lower()
        if extension in BLOCKED_EXTENSIONS:
            raise UploadValidationError(f"File type '{extension}' is not allowed")

        if size > self._max_upload_size_bytes:
            raise UploadValidationError(
                f"File '{file_name}' exceeds the upload limit "
                f"({size} bytes, max: {self._max_upload_size_bytes})"
            )

        file_format = detect_format(file_name, content_type)
        max_size = MAX_SIZE_BY_FORMAT.get(file_format)
        if max_size is not None and size > max_size:
            raise UploadValidationError(
                f"File '{file_name}' exceeds the {file_format.value.upper()} limit "
                f"({size} bytes, max: {max_size})"
            )

        magic = _MAGIC_BYTES.get(file_format)
        if magic is not None and not file_bytes.startswith(magic):
            raise UploadValidationError(
                f"File '{file_name}' does not look like a valid {file_format.value.upper()} file"
            )

        Log.debug(f"Validated upload {file_name}: {file_format.value}, {size} bytes")
        return file_format
