"""Bill analysis API endpoints (document upload and parameter search)."""

import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from bill_reader.analysis.model_client import TextGenerator, get_text_generator
from bill_reader.analysis.schemas import BillQuery, BillRecord, ErrorEnvelope, HealthStatus
from bill_reader.core.config import get_settings
from bill_reader.core.errors import UploadRejected
from bill_reader.extraction.processing import (
    extract_pdf_text,
    generate_request_id,
    stored_upload,
    validate_upload,
)
from bill_reader.workflows.bill_search import BillSearchWorkflow
from bill_reader.workflows.document_analysis import DocumentAnalysisWorkflow

logger = logging.getLogger("bill_reader.api")
router = APIRouter(prefix="/api")

_ERRORS = {
    400: {"model": ErrorEnvelope, "description": "Rejected input"},
    500: {"model": ErrorEnvelope, "description": "Extraction or generation failure"},
}


def get_text_extractor() -> Callable:
    return extract_pdf_text


@router.get("/health", response_model=HealthStatus)
async def health():
    return HealthStatus()


@router.post(
    "/summarize",
    summary="Analyze an uploaded bill PDF",
    response_model=BillRecord,
    responses=_ERRORS,
)
async def summarize(
    file: Optional[UploadFile] = File(None, description="Bill or law as a PDF"),
    settings=Depends(get_settings),
    generator: TextGenerator = Depends(get_text_generator),
    extract_text: Callable = Depends(get_text_extractor),
):
    rid = generate_request_id()
    if file is None or not (file.filename or "").strip():
        logger.info("summarize_rejected request_id=%s reason=no_file", rid)
        raise UploadRejected("No file uploaded")
    data = await file.read(settings.max_upload_bytes + 1)
    data = validate_upload(file.content_type, data, settings.max_upload_bytes)
    workflow = DocumentAnalysisWorkflow(
        generator,
        classify_prefix_chars=settings.CLASSIFY_PREFIX_CHARS,
        enrich_prefix_chars=settings.ENRICH_PREFIX_CHARS,
    )
    with stored_upload(settings.UPLOAD_DIR, data) as path:
        text = await run_in_threadpool(extract_text, path)
        logger.info("summarize_text_extracted request_id=%s chars=%d", rid, len(text))
        record = await workflow.run(text, request_id=rid)
    logger.info("summarize_success request_id=%s file=%s", rid, file.filename)
    return record


@router.post(
    "/search",
    summary="Research a bill from name/number/jurisdiction/year hints",
    response_model=BillRecord,
    responses=_ERRORS,
)
async def search(
    query: BillQuery,
    generator: TextGenerator = Depends(get_text_generator),
):
    rid = generate_request_id()
    logger.info("search_called request_id=%s state=%s", rid, query.bill_state)
    return await BillSearchWorkflow(generator).run(query, request_id=rid)
