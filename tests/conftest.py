import io

import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

PASSPORT_LINES = [
    "Passport No. X1234567",
    "Surname DOE",
    "Given Names JOHN EXAMPLE",
    "Nationality USA",
    "Date of Birth 1980-01-01",
    "Date of Issue 2020-01-01",
    "Date of Expiry 2030-01-01",
]

SECOND_PASSPORT_LINES = [
    "Passport No. Y7654321",
    "Surname ROE",
    "Given Names JANE",
    "Nationality GBR",
    "Date of Birth 1975-05-05",
    "Date of Issue 2019-02-02",
    "Date of Expiry 2029-02-02",
]


def _draw_lines(c: canvas.Canvas, lines: list[str], top: float) -> float:
    y = top
    for line in lines:
        c.drawString(72, y, line)
        y -= 18
    return y


def _jpeg(width: int, height: int, color: str = "navy", **save_kwargs: object) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="JPEG", **save_kwargs)
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
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
def passport_pdf_bytes() -> bytes:
    """Single page carrying the labelled fields of two passports."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    y = _draw_lines(c, PASSPORT_LINES, 720)
    _draw_lines(c, SECOND_PASSPORT_LINES, y - 36)
    c.save()
    return buf.getvalue()


@pytest.fixture()
def twelve_page_pdf_bytes() -> bytes:
    """Twelve pages, each with one labelled passport."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for number in range(1, 13):
        c.drawString(72, 740, f"Page {number}")
        _draw_lines(c, PASSPORT_LINES, 720)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return _jpeg(800, 600)


@pytest.fixture()
def large_jpeg_bytes() -> bytes:
    """2400x1800 photo, larger than the default 1200px bounding box."""
    return _jpeg(2400, 1800)


@pytest.fixture()
def oversized_jpeg_bytes() -> bytes:
    """Wider than the 5000px dimension ceiling."""
    return _jpeg(6000, 100)


@pytest.fixture()
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", (300, 200), (10, 20, 30, 128)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def rotated_jpeg_bytes() -> bytes:
    """400x200 JPEG whose EXIF orientation (6) asks for a 90 degree rotation."""
    exif = Image.Exif()
    exif[0x0112] = 6
    return _jpeg(400, 200, exif=exif)
