# docbatch/pipeline.py
"""Batch generation: one filled PDF per data row, bundled into a ZIP archive.

Progress contract: ``on_progress`` is called synchronously, on the calling
thread, once after each row has been rendered, with the completed share as an
integer percentage. Reports never decrease and the last successful report is
exactly 100. When a row fails, ``on_progress(0)`` is the final call and no
archive is returned.
"""
import io
import time
import zipfile
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from docbatch.compositor import render_page
from docbatch.config import get_logger
from docbatch.errors import GenerationError
from docbatch.models import DataRow, Placeholder, Template

ARCHIVE_NAME = "generated_documents.zip"

ProgressCallback = Callable[[int], None]

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerationJob:
    template: Template
    placeholders: Tuple[Placeholder, ...]
    rows: Tuple[DataRow, ...]


def document_name(index: int) -> str:
    return f"document_{index + 1}.pdf"


def progress_percent(done: int, total: int) -> int:
    # Half-up rounding (1 of 8 -> 13), not banker's rounding.
    return (200 * done + total) // (2 * total)


def generate_archive(job: GenerationJob, on_progress: Optional[ProgressCallback] = None) -> bytes:
    report = on_progress or (lambda percent: None)
    total = len(job.rows)
    if total == 0:
        raise GenerationError("No data rows to generate documents from.")

    logger.info(f"Generating {total} document(s) from '{job.template.filename or job.template.kind}' "
                f"with {len(job.placeholders)} placeholder(s).")
    start_time = time.perf_counter()

    buf = io.BytesIO()
    try:
        with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zip_file:
            for i, row in enumerate(job.rows):
                try:
                    pdf_bytes = render_page(job.template, job.placeholders, row)
                except Exception as e:
                    raise GenerationError(f"Document {i + 1} failed: {e}") from e
                zip_file.writestr(document_name(i), pdf_bytes)
                report(progress_percent(i + 1, total))
    except Exception as e:
        logger.error(f"Generation aborted, no archive produced: {e}")
        report(0)
        if isinstance(e, GenerationError):
            raise
        raise GenerationError(f"Could not build archive: {e}") from e

    logger.info(f"Generated {total} document(s) in {time.perf_counter() - start_time:.2f}s.")
    return buf.getvalue()
