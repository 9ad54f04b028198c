# docbatch/ocr.py
import io
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import fitz  # PyMuPDF
import pytesseract
from PIL import Image

from docbatch.config import get_logger, settings
from docbatch.errors import OcrError
from docbatch.template_loader import render_page_image

logger = get_logger(__name__)

if settings.TESSERACT_CMD:
    pytesseract.pytesseract.tesseract_cmd = settings.TESSERACT_CMD


@dataclass
class OcrProgress:
    percent: int
    status: str


OcrCallback = Callable[[OcrProgress], None]


def recognize_page(png_bytes: bytes, lang: str) -> str:
    with Image.open(io.BytesIO(png_bytes)) as img:
        return pytesseract.image_to_string(img, lang=lang)


def extract_text_from_pdfs(sources: Sequence[bytes], on_progress: Optional[OcrCallback] = None) -> str:
    """OCR every page of every source PDF, in order, into one text blob."""
    report = on_progress or (lambda progress: None)
    report(OcrProgress(0, "Initializing OCR worker..."))
    executor = ThreadPoolExecutor(max_workers=1)
    parts = []
    try:
        docs = [fitz.open(stream=src, filetype="pdf") for src in sources]
        try:
            total_pages = sum(len(doc) for doc in docs)
            processed = 0
            for doc in docs:
                for page_index in range(len(doc)):
                    processed += 1
                    png_bytes, _ = render_page_image(doc, page_index, scale=settings.OCR_SCALE)
                    report(OcrProgress(round(processed / total_pages * 100),
                                       f"Processing page {processed} of {total_pages}..."))
                    text = executor.submit(recognize_page, png_bytes, settings.OCR_LANG).result()
                    parts.append(text + "\n\n")
        finally:
            for doc in docs:
                doc.close()
    except Exception as e:
        logger.error(f"OCR failed: {e}", exc_info=True)
        report(OcrProgress(100, f"An error occurred: {e}"))
        raise OcrError(f"OCR failed: {e}") from e
    finally:
        executor.shutdown(wait=True)

    report(OcrProgress(100, "OCR complete."))
    logger.info(f"OCR finished: {len(parts)} page(s) from {len(sources)} source(s).")
    return "".join(parts)
