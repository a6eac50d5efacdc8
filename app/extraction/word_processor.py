"""Word (.docx) processor built on python-docx.

python-docx only exposes paragraphs and tables at the top level, so the body
is walked on the underlying XML tree instead. Extended (``docProps/app.xml``)
and custom (``docProps/custom.xml``) property parts are not modelled by
python-docx and are read straight from the package.
"""

import zipfile
from pathlib import Path
from typing import Any
from xml.etree import ElementTree as ET

import docx
from docx.oxml.ns import qn

from app.extraction.base import BaseFormatProcessor
from app.extraction.exceptions import ExtractionError
from app.extraction.metadata import DocumentMetadata
from app.logging.logger import Log

_P = qn("w:p")
_R = qn("w:r")
_T = qn("w:t")
_TAB = qn("w:tab")
_BR = qn("w:br")
_CR = qn("w:cr")
_TBL = qn("w:tbl")
_TR = qn("w:tr")
_TC = qn("w:tc")
_SECT_PR = qn("w:sectPr")
_BR_TYPE = qn("w:type")

_EXTENDED_NS = "{http://schemas.openxmlformats.org/officeDocument/2006/extended-properties}"
_CUSTOM_NS = "{http://schemas.openxmlformats.org/officeDocument/2006/custom-properties}"

CHARS_PER_PAGE = 2500


class WordDocumentProcessor(BaseFormatProcessor):
    """Extracts text, tables and properties from Word documents."""

    def extract_text(self, path: Path) -> str:
        try:
            document = docx.Document(str(path))
            body = document.element.body
            parts: list[str] = []
            self._walk(body, parts)
            text = "".join(parts)
        except Exception as exc:
            Log.error(f"Failed to extract text from Word document {path}: {exc}")
            raise ExtractionError(
                f"Failed to extract text from Word document: {exc}"
            ) from exc

        Log.debug(f"Extracted {len(text)} characters from Word document {path}")
        return text

    def extract_metadata(self, path: Path) -> DocumentMetadata:
        try:
            document = docx.Document(str(path))
            metadata = DocumentMetadata()

            core = document.core_properties
            metadata.title = core.title or None
            metadata.author = core.author or None
            metadata.subject = core.subject or None
            metadata.created_at = core.created
            metadata.modified_at = core.modified

            with zipfile.ZipFile(path) as package:
                self._read_extended_properties(package, metadata)
                self._read_custom_properties(package, metadata)

            if metadata.page_count < 1:
                metadata.page_count = self._count_pages(document.element.body)
        except Exception as exc:
            Log.error(f"Failed to extract metadata from Word document {path}: {exc}")
            raise ExtractionError(
                f"Failed to extract metadata from Word document: {exc}"
            ) from exc

        Log.debug(
            f"Extracted metadata from Word document {path}: "
            f"title={metadata.title!r}, pages={metadata.page_count}"
        )
        return metadata

    def _walk(self, element: Any, parts: list[str]) -> None:
        for child in element.iterchildren():
            tag = child.tag
            if tag == _P:
                self._walk(child, parts)
                parts.append("\n")
            elif tag == _TBL:
                self._table(child, parts)
            elif tag == _R:
                self._run(child, parts)
            elif tag == _T:
                parts.append(child.text or "")
            else:
                self._walk(child, parts)

    @staticmethod
    def _run(run: Any, parts: list[str]) -> None:
        for child in run.iterchildren():
            tag = child.tag
            if tag == _T:
                parts.append(child.text or "")
            elif tag == _TAB:
                parts.append("\t")
            elif tag == _BR:
                if child.get(_BR_TYPE) == "page":
                    parts.append("\n[PAGE BREAK]\n")
                else:
                    parts.append("\n")
            elif tag == _CR:
                parts.append("\n")

    def _table(self, table: Any, parts: list[str]) -> None:
        parts.append("\n[TABLE START]\n")
        for row in table.iterchildren(_TR):
            cells: list[str] = []
            for cell in row.iterchildren(_TC):
                cell_parts: list[str] = []
                self._walk(cell, cell_parts)
                cells.append("".join(cell_parts).strip())
            parts.append(" | ".join(cells) + "\n")
        parts.append("[TABLE END]\n\n")

    @staticmethod
    def _read_extended_properties(
        package: zipfile.ZipFile, metadata: DocumentMetadata
    ) -> None:
        if "docProps/app.xml" not in package.namelist():
            return
        root = ET.fromstring(package.read("docProps/app.xml"))

        application = root.findtext(f"{_EXTENDED_NS}Application")
        if application:
            metadata.creator = application.strip()

        pages = root.findtext(f"{_EXTENDED_NS}Pages")
        if pages and pages.strip().isdigit():
            metadata.page_count = int(pages.strip())

    @staticmethod
    def _read_custom_properties(
        package: zipfile.ZipFile, metadata: DocumentMetadata
    ) -> None:
        if "docProps/custom.xml" not in package.namelist():
            return
        root = ET.fromstring(package.read("docProps/custom.xml"))
        for prop in root.iter(f"{_CUSTOM_NS}property"):
            name = prop.get("name", "")
            value = "".join(prop.itertext()).strip()
            if name and value:
                metadata.set_property(name, value)

    @staticmethod
    def _count_pages(body: Any) -> int:
        """Estimate pages from explicit breaks, falling back to text length."""
        page_breaks = sum(1 for br in body.iter(_BR) if br.get(_BR_TYPE) == "page")
        section_breaks = sum(1 for _ in body.iter(_SECT_PR))

        if page_breaks == 0 and section_breaks <= 1:
            text_length = sum(len(t.text or "") for t in body.iter(_T))
            return max(1, text_length // CHARS_PER_PAGE)

        return max(1, page_breaks + section_breaks)
