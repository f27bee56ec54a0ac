"""Upload validation, scoped storage and PDF text extraction."""

import fitz
import pytest

from bill_reader.core.errors import ExtractionFailed, UploadRejected
from bill_reader.extraction.processing import extract_pdf_text, stored_upload, validate_upload


def _pdf_bytes(text=None) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    if text:
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


class TestValidateUpload:
    def test_accepts_pdf(self):
        assert validate_upload("application/pdf", b"%PDF-1.4", 1024) == b"%PDF-1.4"

    @pytest.mark.parametrize("content_type,data,limit", [
        ("text/plain", b"hello", 1024),
        (None, b"%PDF", 1024),
        ("application/pdf", b"", 1024),
        ("application/pdf", b"x" * 2048, 1024),
    ])
    def test_rejections(self, content_type, data, limit):
        with pytest.raises(UploadRejected):
            validate_upload(content_type, data, limit)


class TestStoredUpload:
    def test_file_exists_only_inside_scope(self, tmp_path):
        with stored_upload(tmp_path, b"data") as path:
            assert path.read_bytes() == b"data"
            assert path.suffix == ".pdf"
        assert not path.exists()

    def test_removed_when_scope_raises(self, tmp_path):
        with pytest.raises(ValueError):
            with stored_upload(tmp_path, b"data") as path:
                raise ValueError("boom")
        assert not path.exists()
        assert list(tmp_path.iterdir()) == []

    def test_names_are_unique(self, tmp_path):
        with stored_upload(tmp_path, b"a") as first, stored_upload(tmp_path, b"b") as second:
            assert first != second


class TestExtractPdfText:
    def test_reads_page_text(self, tmp_path):
        path = tmp_path / "bill.pdf"
        path.write_bytes(_pdf_bytes("AN ACT relating to schools"))
        assert "AN ACT relating to schools" in extract_pdf_text(path)

    def test_blank_pdf_fails(self, tmp_path):
        path = tmp_path / "blank.pdf"
        path.write_bytes(_pdf_bytes())
        with pytest.raises(ExtractionFailed):
            extract_pdf_text(path)

    def test_corrupt_pdf_fails(self, tmp_path):
        path = tmp_path / "corrupt.pdf"
        path.write_bytes(b"this is not a pdf")
        with pytest.raises(ExtractionFailed):
            extract_pdf_text(path)
