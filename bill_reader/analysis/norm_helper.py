"""Normalization layer converting a raw generator payload -> BillRecord.

Why separate module?:
    Keeps transformation logic isolated from both the model client and the
    workflows, so it can be unit tested without any network call and both
    the document analysis and the search path share one set of heuristics.

Flows handled:
    - Resolves every field against the candidate spellings in ``fields.py``.
    - Flattens narrative fields to single strings (placeholders when missing
      or nested).
    - Rebuilds ``sections`` from list, mapping or nested-summary shapes.
    - Applies the summary informativeness floor.
"""

import logging
from typing import Any, Dict, List, Mapping, Union

from bill_reader.analysis import fields as F
from bill_reader.analysis.coercion import (
    as_flat_string,
    as_string_array,
    malformed_placeholder,
    resolve,
    stringify,
)
from bill_reader.analysis.schemas import BillRecord, BillSection

logger = logging.getLogger("bill_reader.analysis")


def _identity_string(value: Any, field_name: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return malformed_placeholder(field_name)
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify(v) for v in value if v is not None)
    return str(value)


def _year(value: Any) -> Union[int, str]:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return _identity_string(value, "yearIntroduced")


def _person(value: Any) -> str:
    if isinstance(value, Mapping):
        name = resolve(value, F.SPONSOR_NAME_KEYS)
        return stringify(name) if name is not None else stringify(dict(value))
    return stringify(value)


def _people(value: Any) -> Union[str, List[str]]:
    """Sponsors may be a string or a list of names; never an object."""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return [_person(v) for v in value if v is not None]
    if isinstance(value, Mapping):
        return [_person(v) for v in value.values() if v is not None]
    return str(value)


def _first_text(bag: Mapping, keys) -> str:
    for key in keys:
        value = bag.get(key)
        if value is not None and value != "":
            return stringify(value)
    return ""


def _summary_text(raw: Mapping) -> str:
    value = resolve(raw, F.CANDIDATE_KEYS["summary"])
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return _first_text(value, F.SUMMARY_TEXT_KEYS)
    if isinstance(value, (list, tuple)):
        return "\n\n".join(stringify(v) for v in value if v is not None)
    if value is None:
        return ""
    return str(value)


def _apply_summary_floor(text: str) -> str:
    if not text.strip():
        return F.SUMMARY_MISSING
    if len(text) < F.SUMMARY_MIN_CHARS:
        return text + F.SUMMARY_MINIMAL_SUFFIX
    return text


def _raw_sections(raw: Mapping) -> Any:
    sections = resolve(raw, F.CANDIDATE_KEYS["sections"])
    if sections:
        return sections
    for key in ("summary", "Summary"):
        nested = raw.get(key)
        if isinstance(nested, Mapping):
            found = resolve(nested, F.SUMMARY_NESTED_SECTION_KEYS)
            if found:
                return found
    return None


def normalize_sections(value: Any) -> List[BillSection]:
    """Coerce list-shaped or mapping-shaped sections into titled entries."""
    out: List[BillSection] = []
    if isinstance(value, (list, tuple)):
        for idx, item in enumerate(value):
            if item is None:
                continue
            if isinstance(item, Mapping):
                title = _first_text(item, F.SECTION_TITLE_KEYS) or f"Section {idx + 1}"
                body = _first_text(item, F.SECTION_BODY_KEYS) or stringify(dict(item))
            else:
                title = f"Section {idx + 1}"
                body = stringify(item)
            out.append(BillSection(title=title, description=body))
    elif isinstance(value, Mapping):
        for key, item in value.items():
            if isinstance(item, Mapping):
                body = _first_text(item, F.SECTION_MAPPING_BODY_KEYS) or stringify(dict(item))
            elif item is None:
                body = ""
            else:
                body = stringify(item)
            out.append(BillSection(title=str(key), description=body))
    return out


def normalize(raw: Any) -> BillRecord:
    """Return a complete BillRecord for any decoded payload.

    Never raises: unknown shapes degrade to defaults and placeholder text.
    """
    if not isinstance(raw, Mapping):
        logger.warning("normalize_non_mapping_payload type=%s", type(raw).__name__)
        raw = {}

    values: Dict[str, Any] = {}
    for name in ("billNumber", "billName", "state", "committee"):
        values[name] = _identity_string(
            resolve(raw, F.CANDIDATE_KEYS[name], F.NOT_SPECIFIED), name
        )
    values["yearIntroduced"] = _year(
        resolve(raw, F.CANDIDATE_KEYS["yearIntroduced"], F.NOT_SPECIFIED)
    )
    for name in ("sponsors", "cosponsors"):
        values[name] = _people(resolve(raw, F.CANDIDATE_KEYS[name], F.NOT_SPECIFIED))

    values["summary"] = _apply_summary_floor(_summary_text(raw))
    for name in F.RESEARCH_FIELDS:
        values[name] = as_flat_string(resolve(raw, F.CANDIDATE_KEYS[name]), name)

    values["sections"] = normalize_sections(_raw_sections(raw))
    values["citations"] = as_string_array(resolve(raw, F.CANDIDATE_KEYS["citations"]))

    return BillRecord.model_validate(values)
