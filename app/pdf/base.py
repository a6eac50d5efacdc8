import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

_PDF_DATE = re.compile(
    r"^(?:D:)?(?P<year>\d{4})(?P<month>\d{2})?(?P<day>\d{2})?"
    r"(?P<hour>\d{2})?(?P<minute>\d{2})?(?P<second>\d{2})?"
    r"(?P<tz>[Zz+\-])?(?P<tz_hour>\d{2})?'?(?P<tz_minute>\d{2})?'?"
)
_PDF_HEADER = re.compile(rb"%PDF-(\d+\.\d+)")


@dataclass(frozen=True)
class PdfInfo:
    """Document information dictionary plus PDF-specific flags."""

    page_count: int
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    producer: str | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None
    version: str | None = None
    is_encrypted: bool = False
    has_forms: bool = False


class BasePdfAdapter(ABC):
    """Contract for PDF engines: page-level text access and document info.

    Text is read one page at a time so a broken page can be reported without
    losing the rest of the document.
    """

    @contextmanager
    def opened(self, path: Path) -> Iterator[Any]:
        """Open a document for the duration of a ``with`` block."""
        document = self.open(path)
        try:
            yield document
        finally:
            self.close(document)

    @abstractmethod
    def open(self, path: Path) -> Any:
        """Open the PDF at ``path`` and return the engine's document handle.

        Raises:
            PdfExtractionError: if the file is not a readable PDF.
        """

    @abstractmethod
    def close(self, document: Any) -> None:
        """Release the engine's document handle."""

    @abstractmethod
    def page_count(self, document: Any) -> int:
        """Return the number of pages."""

    @abstractmethod
    def page_text(self, document: Any, page_index: int) -> str:
        """Extract the text of one zero-based page. May raise engine errors."""

    @abstractmethod
    def read_info(self, document: Any, path: Path) -> PdfInfo:
        """Read the info dictionary, version and encryption/form flags."""


def clean_info_value(value: Any) -> str | None:
    """Normalize an info-dictionary entry to a stripped string or None."""
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    text = str(value).strip()
    return text or None


def parse_pdf_date(value: Any) -> datetime | None:
    """Parse a PDF date string such as ``D:20240131120000+01'00'``."""
    text = clean_info_value(value)
    if text is None:
        return None
    match = _PDF_DATE.match(text)
    if match is None:
        return None

    parts = match.groupdict()
    try:
        tz = timezone.utc
        if parts["tz"] in ("+", "-"):
            offset = timedelta(
                hours=int(parts["tz_hour"] or 0),
                minutes=int(parts["tz_minute"] or 0),
            )
            tz = timezone(offset if parts["tz"] == "+" else -offset)
        return datetime(
            int(parts["year"]),
            int(parts["month"] or 1),
            int(parts["day"] or 1),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
            tzinfo=tz,
        )
    except ValueError:
        return None


def read_header_version(path: Path) -> str | None:
    """Read the version from the ``%PDF-x.y`` file header."""
    with path.open("rb") as handle:
        head = handle.read(1024)
    match = _PDF_HEADER.search(head)
    return match.group(1).decode("ascii") if match else None
