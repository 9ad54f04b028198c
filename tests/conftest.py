import io

import fitz  # PyMuPDF
import pytest
from PIL import Image

from docbatch.models import DataRow, Placeholder
from docbatch.template_loader import load_template


def make_pdf(pages=1, size=(800, 1000), label="TEMPLATE") -> bytes:
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page(width=size[0], height=size[1])
        page.insert_text(fitz.Point(50, 50), f"{label} page {i + 1}", fontsize=10, fontname="helv")
    out = doc.tobytes()
    doc.close()
    return out


def make_image(fmt="PNG", size=(400, 300), color=(240, 240, 240)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def pdf_template():
    return load_template(make_pdf(), "application/pdf", filename="form.pdf")


@pytest.fixture
def png_template():
    return load_template(make_image("PNG"), "image/png", filename="card.png")


@pytest.fixture
def jpeg_template():
    return load_template(make_image("JPEG"), "image/jpeg", filename="card.jpg")


@pytest.fixture
def two_placeholders():
    return [
        Placeholder(name="{{name}}", x=100, y=200, width=200, height=50, font_size=12, color="#000000"),
        Placeholder(name="{{city}}", x=100, y=300, width=200, height=50, font_size=10, color="#1F4FB2"),
    ]


@pytest.fixture
def three_rows():
    return [
        DataRow(values={"name": "Ada Lovelace", "city": "London"}),
        DataRow(values={"name": "Alan Turing", "city": "Wilmslow"}),
        DataRow(values={"name": "Grace Hopper"}),
    ]
