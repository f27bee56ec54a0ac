"""Upload helpers: validation, scoped transient storage, PDF text extraction."""

import logging
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import fitz  # PyMuPDF

from bill_reader.core.errors import ExtractionFailed, UploadRejected

logger = logging.getLogger("bill_reader.extraction")

PDF_MEDIA_TYPE = "application/pdf"


def generate_request_id() -> str:
    """Return a short random hex string for correlation in logs."""
    return uuid.uuid4().hex[:12]


def validate_upload(content_type: Optional[str], data: bytes, max_bytes: int) -> bytes:
    """Reject anything that is not a non-empty PDF under the size cap.

    Raises UploadRejected with the message shown to the client.
    """
    if (content_type or "").split(";")[0].strip().lower() != PDF_MEDIA_TYPE:
        raise UploadRejected("Only PDF files are allowed")
    if not data:
        raise UploadRejected("The uploaded file is empty")
    if len(data) > max_bytes:
        raise UploadRejected(f"File too large; the limit is {max_bytes // (1024 * 1024)} MB")
    return data


@contextmanager
def stored_upload(upload_dir: Path, data: bytes, suffix: str = ".pdf") -> Iterator[Path]:
    """Persist ``data`` under a unique name and delete it on every exit path."""
    upload_dir = Path(upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / f"{uuid.uuid4().hex}{suffix}"
    path.write_bytes(data)
    logger.debug("upload_stored path=%s bytes=%d", path, len(data))
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug("upload_removed path=%s", path)


def extract_pdf_text(path: Path) -> str:
    """Return the text of every page joined with newlines.

    Raises ExtractionFailed when the file cannot be opened or has no text
    layer (scanned images are not OCRed).
    """
    try:
        with fitz.open(path) as doc:
            text = "\n".join(page.get_text() for page in doc)
    except Exception as exc:
        logger.warning("pdf_text_error path=%s err=%s", path, exc)
        raise ExtractionFailed(f"Error processing file: could not read the PDF ({exc})") from exc
    if not text.strip():
        raise ExtractionFailed("Error processing file: the PDF contains no readable text")
    return text
