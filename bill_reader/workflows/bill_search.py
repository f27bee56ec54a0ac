"""Single-call bill lookup from sparse search parameters.

Unlike the document path there is no earlier good fragment to preserve, so an
undecodable response is fatal, and a result for the wrong year is rejected
rather than shown.
"""

import logging
from typing import Any, Dict, Optional

from bill_reader.analysis import prompts
from bill_reader.analysis.coercion import resolve
from bill_reader.analysis.fields import CANDIDATE_KEYS
from bill_reader.analysis.model_client import TextGenerator
from bill_reader.analysis.norm_helper import normalize
from bill_reader.analysis.payload import decode_payload
from bill_reader.analysis.schemas import BillQuery, BillRecord
from bill_reader.core.errors import (
    DecodeFailed,
    InsufficientQuery,
    MissingJurisdiction,
    SearchUnparseable,
    YearMismatch,
)

logger = logging.getLogger("bill_reader.workflow")


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def validate_query(query: BillQuery) -> None:
    """Fail fast, before any generation call."""
    if not _clean(query.bill_state):
        raise MissingJurisdiction("State or federal jurisdiction is required")
    if not any(_clean(v) for v in (query.bill_name, query.bill_number, query.additional_info)):
        raise InsufficientQuery("Please provide at least one piece of information about the bill")


def check_year(requested: Any, payload: Dict[str, Any]) -> None:
    """Raise YearMismatch when a requested year disagrees with the stated one."""
    wanted = _clean(requested)
    if not wanted:
        return
    stated = resolve(payload, CANDIDATE_KEYS["yearIntroduced"])
    if isinstance(stated, float) and stated.is_integer():
        stated = int(stated)
    found = _clean(stated)
    if found is not None and found != wanted:
        raise YearMismatch(wanted, found)


class BillSearchWorkflow:
    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def run(self, query: BillQuery, request_id: str = "-") -> BillRecord:
        validate_query(query)
        prompt = prompts.build_search_prompt(
            state=_clean(query.bill_state),
            name=_clean(query.bill_name),
            number=_clean(query.bill_number),
            year=_clean(query.bill_year),
            info=_clean(query.additional_info),
        )
        try:
            output = await self.generator.generate(
                prompt,
                instructions=prompts.SEARCH_INSTRUCTIONS,
                stage="search",
            )
            payload = decode_payload(output, stage="search")
        except DecodeFailed as exc:
            raise SearchUnparseable(
                "Unable to find complete information about this bill. "
                "Please try with more specific details."
            ) from exc
        check_year(query.bill_year, payload)
        record = normalize(payload)
        logger.info(
            "search_done request_id=%s bill_number=%s state=%s",
            request_id, record.bill_number, record.state,
        )
        return record
