import csv
from pathlib import Path

from app.extraction.base import BaseFormatProcessor
from app.extraction.encoding import read_text
from app.extraction.exceptions import ExtractionError
from app.extraction.metadata import DocumentMetadata
from app.extraction.text_processor import file_timestamps
from app.logging.logger import Log

MAX_TEXT_ROWS = 1000
ROWS_PER_PAGE = 50
TITLE_COLUMNS = 5
SAMPLE_CELLS = 3


def parse_csv_line(line: str) -> list[str]:
    """Split one CSV line, honoring quoted fields with embedded commas."""
    row = next(csv.reader([line]), [])
    return [cell.strip() for cell in row] or [""]


def _is_numeric(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def detect_header(lines: list[str]) -> bool:
    """Classify the first row as a header.

    The first two rows must have the same number of columns, and the first
    row must hold strictly fewer numeric fields than the second.
    """
    if len(lines) < 2:
        return False
    first_row = parse_csv_line(lines[0])
    second_row = parse_csv_line(lines[1])
    if len(first_row) != len(second_row):
        return False
    first_numbers = sum(1 for cell in first_row if _is_numeric(cell))
    second_numbers = sum(1 for cell in second_row if _is_numeric(cell))
    return first_numbers < second_numbers


class CsvDocumentProcessor(BaseFormatProcessor):
    """Comma-separated files rendered as numbered rows, with column analysis."""

    def extract_text(self, path: Path) -> str:
        try:
            lines = self._read_lines(path)
        except Exception as exc:
            Log.error(f"Failed to extract text from CSV {path}: {exc}")
            raise ExtractionError(f"Failed to extract text from CSV file: {exc}") from exc

        rendered = ["[CSV DATA]"]
        for index, line in enumerate(lines[:MAX_TEXT_ROWS], start=1):
            rendered.append(f"Row {index}: {' | '.join(parse_csv_line(line))}")
        if len(lines) > MAX_TEXT_ROWS:
            rendered.append(f"... and {len(lines) - MAX_TEXT_ROWS} more rows")
        rendered.append("[END CSV DATA]")

        Log.debug(f"Extracted CSV structure from {path}: {len(lines)} rows")
        return "\n".join(rendered) + "\n"

    def extract_metadata(self, path: Path) -> DocumentMetadata:
        try:
            lines = self._read_lines(path)
            created_at, modified_at = file_timestamps(path)
        except Exception as exc:
            Log.error(f"Failed to extract metadata from CSV {path}: {exc}")
            raise ExtractionError(
                f"Failed to extract metadata from CSV file: {exc}"
            ) from exc

        metadata = DocumentMetadata(
            created_at=created_at,
            modified_at=modified_at,
            page_count=max(1, len(lines) // ROWS_PER_PAGE),
        )
        if lines:
            self._analyze(lines, metadata)

        Log.debug(
            f"Extracted CSV metadata from {path}: "
            f"{metadata.get_int('RowCount', 0)} rows, "
            f"{metadata.get_int('ColumnCount', 0)} columns"
        )
        return metadata

    @staticmethod
    def _read_lines(path: Path) -> list[str]:
        content, _codec = read_text(path)
        return content.splitlines()

    @staticmethod
    def _analyze(lines: list[str], metadata: DocumentMetadata) -> None:
        first_row = parse_csv_line(lines[0])
        has_header = detect_header(lines)
        metadata.set_property("ColumnCount", len(first_row))
        metadata.set_property("RowCount", len(lines))
        metadata.set_property("HasHeader", has_header)

        if has_header:
            metadata.set_property("ColumnNames", first_row)
            metadata.title = f"CSV with columns: {', '.join(first_row[:TITLE_COLUMNS])}"
        else:
            metadata.title = f"CSV Data ({len(lines)} rows, {len(first_row)} columns)"

        if len(lines) > 1:
            sample_row = parse_csv_line(lines[1] if has_header else lines[0])
            metadata.set_property("SampleData", sample_row[:SAMPLE_CELLS])
