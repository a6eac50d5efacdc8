from pathlib import Path

from app.extraction.base import BaseFormatProcessor
from app.extraction.exceptions import ExtractionError
from app.extraction.metadata import DocumentMetadata
from app.logging.logger import Log
from app.pdf.base import BasePdfAdapter


class PdfDocumentProcessor(BaseFormatProcessor):
    """Extracts page-marked text and info-dictionary metadata from PDFs."""

    def __init__(self, adapter: BasePdfAdapter) -> None:
        self._adapter = adapter

    def extract_text(self, path: Path) -> str:
        """Extract text page by page.

        Each non-blank page is prefixed with ``[PAGE n]``. A page that fails
        is recorded inline as ``[PAGE n - ERROR: ...]`` and the remaining
        pages are still extracted.
        """
        try:
            with self._adapter.opened(path) as document:
                page_count = self._adapter.page_count(document)
                Log.debug(f"Processing PDF with {page_count} pages: {path}")
                blocks = [
                    block
                    for page_number in range(1, page_count + 1)
                    if (block := self._page_block(document, page_number, path))
                ]
        except Exception as exc:
            Log.error(f"Failed to extract text from PDF {path}: {exc}")
            raise ExtractionError(f"Failed to extract text from PDF: {exc}") from exc

        text = "".join(blocks)
        Log.debug(f"Extracted {len(text)} characters from {page_count} pages of PDF {path}")
        return text

    def extract_metadata(self, path: Path) -> DocumentMetadata:
        try:
            with self._adapter.opened(path) as document:
                info = self._adapter.read_info(document, path)
        except Exception as exc:
            Log.error(f"Failed to extract metadata from PDF {path}: {exc}")
            raise ExtractionError(f"Failed to extract metadata from PDF: {exc}") from exc

        metadata = DocumentMetadata(
            title=info.title,
            author=info.author,
            subject=info.subject,
            creator=info.creator,
            producer=info.producer,
            created_at=info.created_at,
            modified_at=info.modified_at,
            page_count=info.page_count,
        )
        metadata.set_property("PDFVersion", info.version)
        metadata.set_property("IsEncrypted", info.is_encrypted)
        metadata.set_property("HasForms", info.has_forms)

        Log.debug(
            f"Extracted metadata from PDF {path}: title={info.title!r}, "
            f"pages={info.page_count}, author={info.author!r}"
        )
        return metadata

    def _page_block(self, document: object, page_number: int, path: Path) -> str:
        try:
            page_text = self._adapter.page_text(document, page_number - 1)
        except Exception as exc:
            Log.warning(f"Failed to extract text from page {page_number} of PDF {path}: {exc}")
            return f"[PAGE {page_number} - ERROR: {exc}]\n"

        if not page_text.strip():
            return ""
        return f"[PAGE {page_number}]\n{page_text}\n\n"
