import pytest

from docbatch import ocr
from docbatch.errors import OcrError

from conftest import make_pdf


def test_extracts_every_page_in_order(monkeypatch):
    seen = []

    def fake_image_to_string(img, lang):
        seen.append((img.size, lang))
        return f"text {len(seen)}"

    monkeypatch.setattr(ocr.pytesseract, "image_to_string", fake_image_to_string)
    progress = []
    text = ocr.extract_text_from_pdfs([make_pdf(pages=2, size=(100, 200)), make_pdf(pages=1, size=(100, 200))],
                                      progress.append)

    assert text == "text 1\n\ntext 2\n\ntext 3\n\n"
    # Pages rendered at 2 px per pt.
    assert seen == [((200, 400), "eng")] * 3
    assert [p.percent for p in progress] == [0, 33, 67, 100, 100]
    assert progress[0].status == "Initializing OCR worker..."
    assert progress[1].status == "Processing page 1 of 3..."
    assert progress[-1].status == "OCR complete."


def test_failure_is_reported_and_raised(monkeypatch):
    def broken(img, lang):
        raise RuntimeError("tesseract missing")

    monkeypatch.setattr(ocr.pytesseract, "image_to_string", broken)
    progress = []
    with pytest.raises(OcrError, match="tesseract missing"):
        ocr.extract_text_from_pdfs([make_pdf()], progress.append)
    assert progress[-1].percent == 100
    assert progress[-1].status.startswith("An error occurred")
