"""Decode generator text into a raw payload mapping."""

import json
import logging
import re
from typing import Any, Dict

from bill_reader.core.errors import DecodeFailed

logger = logging.getLogger("bill_reader.analysis")

_FENCE_RX = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE)


def _strip_fences(text: str) -> str:
    m = _FENCE_RX.match(text)
    return m.group(1) if m else text.strip()


def decode_payload(text: Any, stage: str = "payload") -> Dict[str, Any]:
    """Parse model output as a single JSON object.

    Markdown code fences around the object are tolerated. Anything that is not
    a JSON object (empty text, prose, a bare list) raises DecodeFailed.
    """
    if not isinstance(text, str) or not text.strip():
        logger.warning("decode_empty stage=%s", stage)
        raise DecodeFailed(f"The {stage} response was empty.")
    body = _strip_fences(text)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        # Salvage the outermost {...} when the model wrapped it in prose.
        start, end = body.find("{"), body.rfind("}")
        if start == -1 or end <= start:
            logger.warning("decode_invalid_json stage=%s err=%s", stage, exc)
            raise DecodeFailed(f"The {stage} response was not valid JSON.") from exc
        try:
            data = json.loads(body[start:end + 1])
        except json.JSONDecodeError as inner:
            logger.warning("decode_invalid_json stage=%s err=%s", stage, inner)
            raise DecodeFailed(f"The {stage} response was not valid JSON.") from inner
    if not isinstance(data, dict):
        logger.warning("decode_not_object stage=%s type=%s", stage, type(data).__name__)
        raise DecodeFailed(f"The {stage} response was not a JSON object.")
    return data
