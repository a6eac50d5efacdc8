from pathlib import Path
from typing import Any

import pymupdf

from app.pdf.base import (
    BasePdfAdapter,
    PdfInfo,
    clean_info_value,
    parse_pdf_date,
    read_header_version,
)
from app.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfAdapter):
    """Reads PDFs with PyMuPDF."""

    def open(self, path: Path) -> Any:
        try:
            return pymupdf.open(path)  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf could not open PDF: {exc}") from exc

    def close(self, document: Any) -> None:
        document.close()

    def page_count(self, document: Any) -> int:
        return int(document.page_count)

    def page_text(self, document: Any, page_index: int) -> str:
        return str(document.load_page(page_index).get_text())

    def read_info(self, document: Any, path: Path) -> PdfInfo:
        info = document.metadata or {}
        version = clean_info_value(info.get("format"))
        if version and version.upper().startswith("PDF "):
            version = version[4:]
        return PdfInfo(
            page_count=int(document.page_count),
            title=clean_info_value(info.get("title")),
            author=clean_info_value(info.get("author")),
            subject=clean_info_value(info.get("subject")),
            creator=clean_info_value(info.get("creator")),
            producer=clean_info_value(info.get("producer")),
            created_at=parse_pdf_date(info.get("creationDate")),
            modified_at=parse_pdf_date(info.get("modDate")),
            version=version or read_header_version(path),
            is_encrypted=bool(document.is_encrypted or info.get("encryption")),
            has_forms=bool(document.is_form_pdf),
        )
