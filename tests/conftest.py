import io
from pathlib import Path

import docx
import pytest
from PIL import Image, ImageDraw
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content and info."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setTitle("Quarterly Report")
    c.setAuthor("Jane Analyst")
    c.setSubject("Finance")
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a three-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.showPage()
    c.drawString(72, 720, "Page three content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_path(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    path = tmp_path / "report.pdf"
    path.write_bytes(sample_pdf_bytes)
    return path


@pytest.fixture()
def multi_page_pdf_path(tmp_path: Path, multi_page_pdf_bytes: bytes) -> Path:
    path = tmp_path / "pages.pdf"
    path.write_bytes(multi_page_pdf_bytes)
    return path


@pytest.fixture()
def empty_pdf_path(tmp_path: Path, empty_pdf_bytes: bytes) -> Path:
    path = tmp_path / "blank.pdf"
    path.write_bytes(empty_pdf_bytes)
    return path


@pytest.fixture()
def sample_docx_path(tmp_path: Path) -> Path:
    """Build a .docx with a heading, tabbed paragraph, page break and table."""
    document = docx.Document()
    document.core_properties.title = "Project Plan"
    document.core_properties.author = "Sam Writer"
    document.core_properties.subject = "Planning"

    document.add_paragraph("Introduction")
    paragraph = document.add_paragraph("Name")
    paragraph.add_run().add_tab()
    paragraph.add_run("Value")
    document.add_page_break()
    document.add_paragraph("Second page text.")

    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Item"
    table.cell(0, 1).text = "Cost"
    table.cell(1, 0).text = "Paper"
    table.cell(1, 1).text = "12"

    path = tmp_path / "plan.docx"
    document.save(str(path))
    return path


@pytest.fixture()
def text_file_path(tmp_path: Path) -> Path:
    path = tmp_path / "notes.txt"
    path.write_text(
        "Meeting Notes\n\nThe team agreed on the plan. It is due in March.\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def csv_file_path(tmp_path: Path) -> Path:
    path = tmp_path / "people.csv"
    path.write_text('Name,Age,City\nAlice,30,"Paris, France"\nBob,25,Berlin\n', encoding="utf-8")
    return path


@pytest.fixture()
def sample_png_path(tmp_path: Path) -> Path:
    """A white PNG with dark text drawn in the default bitmap font."""
    image = Image.new("RGB", (400, 100), "white")
    ImageDraw.Draw(image).text((10, 40), "Invoice 42", fill="black")
    path = tmp_path / "scan.png"
    image.save(path, format="PNG")
    return path
