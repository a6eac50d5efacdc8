from pathlib import Path
from typing import Any

import pdfplumber

from app.pdf.base import (
    BasePdfAdapter,
    PdfInfo,
    clean_info_value,
    parse_pdf_date,
    read_header_version,
)
from app.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfAdapter):
    """Reads PDFs with pdfplumber (pdfminer.six underneath)."""

    def open(self, path: Path) -> Any:
        try:
            return pdfplumber.open(path)
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not open PDF: {exc}") from exc

    def close(self, document: Any) -> None:
        document.close()

    def page_count(self, document: Any) -> int:
        return len(document.pages)

    def page_text(self, document: Any, page_index: int) -> str:
        return document.pages[page_index].extract_text() or ""

    def read_info(self, document: Any, path: Path) -> PdfInfo:
        info = document.metadata or {}
        catalog = getattr(document.doc, "catalog", None) or {}
        return PdfInfo(
            page_count=len(document.pages),
            title=clean_info_value(info.get("Title")),
            author=clean_info_value(info.get("Author")),
            subject=clean_info_value(info.get("Subject")),
            creator=clean_info_value(info.get("Creator")),
            producer=clean_info_value(info.get("Producer")),
            created_at=parse_pdf_date(info.get("CreationDate")),
            modified_at=parse_pdf_date(info.get("ModDate")),
            version=read_header_version(path),
            is_encrypted=getattr(document.doc, "encryption", None) is not None,
            has_forms="AcroForm" in catalog,
        )
