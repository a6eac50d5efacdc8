import re
from datetime import datetime, timezone
from pathlib import Path

from app.extraction.base import BaseFormatProcessor
from app.extraction.encoding import read_text
from app.extraction.exceptions import ExtractionError
from app.extraction.metadata import DocumentMetadata
from app.extraction.text_stats import count_word_tokens
from app.logging.logger import Log

CHARS_PER_PAGE = 2000
MAX_TITLE_LENGTH = 100

_NUMBERED_ITEM = re.compile(r"^\d+\.\s")
_BULLET_PREFIXES = ("- ", "* ", "• ")


def file_timestamps(path: Path) -> tuple[datetime, datetime]:
    """Return ``(created, modified)`` filesystem timestamps in UTC."""
    stat = path.stat()
    return (
        datetime.fromtimestamp(stat.st_ctime, tz=timezone.utc),
        datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
    )


def classify_structure(lines: list[str]) -> dict[str, int | str]:
    """Count structural line kinds and guess the kind of document.

    ``LikelyType`` is ``List/Outline`` when bullets or numbered items exceed
    10% of lines, ``Code/Technical`` when indented lines exceed 20%,
    ``Prose/Article`` when blank lines exceed 10%, else ``Plain Text``.
    """
    total = len(lines)
    empty = sum(1 for line in lines if not line.strip())
    bullets = sum(1 for line in lines if line.lstrip().startswith(_BULLET_PREFIXES))
    numbered = sum(1 for line in lines if _NUMBERED_ITEM.match(line.lstrip()))
    indented = sum(1 for line in lines if line.startswith(("    ", "\t")))

    if bullets > total * 0.1 or numbered > total * 0.1:
        likely_type = "List/Outline"
    elif indented > total * 0.2:
        likely_type = "Code/Technical"
    elif empty > total * 0.1:
        likely_type = "Prose/Article"
    else:
        likely_type = "Plain Text"

    return {
        "EmptyLineCount": empty,
        "BulletPointCount": bullets,
        "NumberedItemCount": numbered,
        "IndentedLineCount": indented,
        "LikelyType": likely_type,
    }


class TextDocumentProcessor(BaseFormatProcessor):
    """Plain text files with BOM-based encoding detection."""

    def extract_text(self, path: Path) -> str:
        try:
            content, codec = read_text(path)
        except Exception as exc:
            Log.error(f"Failed to extract text from file {path}: {exc}")
            raise ExtractionError(f"Failed to extract text from text file: {exc}") from exc

        Log.debug(f"Extracted {len(content)} characters from text file {path} using {codec}")
        return content

    def extract_metadata(self, path: Path) -> DocumentMetadata:
        try:
            content, _codec = read_text(path)
            created_at, modified_at = file_timestamps(path)
        except Exception as exc:
            Log.error(f"Failed to extract metadata from text file {path}: {exc}")
            raise ExtractionError(
                f"Failed to extract metadata from text file: {exc}"
            ) from exc

        metadata = DocumentMetadata(
            created_at=created_at,
            modified_at=modified_at,
            page_count=max(1, len(content) // CHARS_PER_PAGE),
        )
        if content:
            self._analyze(content, metadata)

        Log.debug(
            f"Extracted metadata from text file {path}: pages={metadata.page_count}, "
            f"lines={metadata.get_int('LineCount', 0)}"
        )
        return metadata

    @staticmethod
    def _analyze(content: str, metadata: DocumentMetadata) -> None:
        lines = content.split("\n")
        metadata.set_property("LineCount", len(lines))
        metadata.set_property("CharacterCount", len(content))
        metadata.set_property("WordCount", count_word_tokens(content))

        first_line = next((line.strip() for line in lines if line.strip()), "")
        if first_line and len(first_line) < MAX_TITLE_LENGTH:
            metadata.title = first_line

        for key, value in classify_structure(lines).items():
            metadata.set_property(key, value)
