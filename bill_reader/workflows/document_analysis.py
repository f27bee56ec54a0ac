"""Three-stage analysis of an uploaded bill's text.

Stages run strictly in order, each conditioned on the previous one:

    RECEIVED -> CLASSIFIED -> EXTRACTED -> ENRICHED -> COMBINED

Failure policy is declared per transition:
    * classify : "no" or empty answer -> NotLegislation; generation failure is fatal.
    * extract  : generation or decode failure is fatal (nothing to salvage yet).
    * enrich   : empty or undecodable reply degrades to ENRICHMENT_FALLBACK; generation
                 failure is fatal.
    * combine  : pure, cannot fail (the normalizer is total).

Splitting extraction from enrichment keeps each response small enough for the
provider's size and latency limits and lets the research step degrade without
throwing away the more reliable extraction.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from bill_reader.analysis import prompts
from bill_reader.analysis.fields import ENRICHMENT_FALLBACK, RESEARCH_FIELDS, field_for_key
from bill_reader.analysis.model_client import TextGenerator
from bill_reader.analysis.norm_helper import normalize
from bill_reader.analysis.payload import decode_payload
from bill_reader.analysis.schemas import BillRecord
from bill_reader.core.errors import DecodeFailed, NotLegislation

logger = logging.getLogger("bill_reader.workflow")

CLASSIFY_MAX_TOKENS = 10
NOT_LEGISLATION_MESSAGE = (
    "The uploaded document does not appear to be a legislative bill or law. "
    "This tool only summarizes legislation."
)
_RESEARCH_KEYS = set(RESEARCH_FIELDS) | {"citations"}


class AnalysisStage(str, Enum):
    RECEIVED = "received"
    CLASSIFIED = "classified"
    EXTRACTED = "extracted"
    ENRICHED = "enriched"
    COMBINED = "combined"


_ORDER: List[AnalysisStage] = list(AnalysisStage)


@dataclass
class AnalysisRun:
    """Per-request state; a workflow instance itself holds no request data."""

    text: str
    request_id: str = "-"
    stage: AnalysisStage = AnalysisStage.RECEIVED
    initial: Dict[str, Any] = field(default_factory=dict)
    research: Dict[str, Any] = field(default_factory=dict)
    enrichment_degraded: bool = False
    record: Optional[BillRecord] = None

    def advance(self, target: AnalysisStage) -> None:
        if _ORDER.index(target) != _ORDER.index(self.stage) + 1:
            raise RuntimeError(f"illegal transition {self.stage.value} -> {target.value}")
        logger.info("analysis_stage request_id=%s %s->%s", self.request_id, self.stage.value, target.value)
        self.stage = target


def is_affirmative(answer: str) -> bool:
    return "yes" in (answer or "").lower()


def combine(initial: Dict[str, Any], research: Dict[str, Any]) -> Dict[str, Any]:
    """Identity/summary/sections from the extraction, research fields from enrichment."""
    merged = {k: v for k, v in initial.items() if field_for_key(k) not in _RESEARCH_KEYS}
    merged.update({k: v for k, v in research.items() if field_for_key(k) in _RESEARCH_KEYS})
    return merged


class DocumentAnalysisWorkflow:
    def __init__(
        self,
        generator: TextGenerator,
        *,
        classify_prefix_chars: int = 9000,
        enrich_prefix_chars: int = 8000,
    ):
        self.generator = generator
        self.classify_prefix_chars = classify_prefix_chars
        self.enrich_prefix_chars = enrich_prefix_chars

    async def run(self, text: str, request_id: str = "-") -> BillRecord:
        return (await self.analyze(text, request_id)).record

    async def analyze(self, text: str, request_id: str = "-") -> AnalysisRun:
        run = AnalysisRun(text=text, request_id=request_id)
        await self.classify(run)
        await self.extract(run)
        await self.enrich(run)
        self.combine(run)
        return run

    async def classify(self, run: AnalysisRun) -> None:
        try:
            answer = await self.generator.generate(
                prompts.build_classify_prompt(run.text, self.classify_prefix_chars),
                instructions=prompts.CLASSIFY_INSTRUCTIONS,
                max_tokens=CLASSIFY_MAX_TOKENS,
                stage="classification",
            )
        except DecodeFailed:
            answer = ""
        if not is_affirmative(answer):
            logger.info(
                "analysis_rejected request_id=%s answer=%s", run.request_id, answer.strip()[:40]
            )
            raise NotLegislation(NOT_LEGISLATION_MESSAGE)
        run.advance(AnalysisStage.CLASSIFIED)

    async def extract(self, run: AnalysisRun) -> None:
        output = await self.generator.generate(
            run.text,
            instructions=prompts.EXTRACT_INSTRUCTIONS,
            stage="extraction",
        )
        run.initial = decode_payload(output, stage="extraction")
        run.advance(AnalysisStage.EXTRACTED)

    async def enrich(self, run: AnalysisRun) -> None:
        try:
            output = await self.generator.generate(
                prompts.build_enrich_prompt(run.initial, run.text, self.enrich_prefix_chars),
                instructions=prompts.ENRICH_INSTRUCTIONS,
                stage="research",
            )
            run.research = decode_payload(output, stage="research")
        except DecodeFailed:
            logger.warning("analysis_enrichment_degraded request_id=%s", run.request_id)
            run.research = dict(ENRICHMENT_FALLBACK)
            run.enrichment_degraded = True
        run.advance(AnalysisStage.ENRICHED)

    def combine(self, run: AnalysisRun) -> None:
        run.record = normalize(combine(run.initial, run.research))
        run.advance(AnalysisStage.COMBINED)
