from abc import ABC, abstractmethod
from pathlib import Path

from app.extraction.metadata import DocumentMetadata


class BaseFormatProcessor(ABC):
    """Contract for all format-specific extraction processors.

    The orchestrator calls both methods concurrently on the same instance and
    path, so implementations must not keep per-call state on ``self``.
    """

    @property
    def processor_type(self) -> str:
        """Tag recorded on processing results, e.g. ``PdfDocumentProcessor``."""
        return type(self).__name__

    @abstractmethod
    def extract_text(self, path: Path) -> str:
        """Extract the full text of a document.

        Args:
            path: Local path of the raw file.

        Returns:
            Extracted text; empty string when the document holds no text.

        Raises:
            ExtractionError: if the document cannot be read at all.
        """

    @abstractmethod
    def extract_metadata(self, path: Path) -> DocumentMetadata:
        """Extract normalized metadata from a document.

        Raises:
            ExtractionError: if the document cannot be read at all.
        """
