"""Total, pure coercion helpers for untrusted generator payloads.

Model output may use any key spelling and any value shape. These helpers
never raise: a missing or malformed value always degrades to a default or a
deterministic placeholder so the normalizer can build a complete record.
"""

import json
import re
from typing import Any, List, Mapping, Sequence, Union

from bill_reader.analysis.fields import MALFORMED_TEMPLATE, MISSING_TEMPLATE

_UPPER_RX = re.compile(r"([A-Z])")


def humanize(field_name: str) -> str:
    """``financialImplications`` -> ``financial implications``."""
    return _UPPER_RX.sub(r" \1", field_name).lower().strip()


def stringify(value: Any) -> str:
    """Render any JSON-ish value as text; containers become compact JSON."""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def resolve(bag: Any, candidate_keys: Union[str, Sequence[str]], default: Any = None) -> Any:
    """Return the first present, non-null value among ``candidate_keys``.

    Falls back to ``default`` when none of the keys resolves or when ``bag``
    is not a mapping at all.
    """
    if not isinstance(bag, Mapping):
        return default
    if isinstance(candidate_keys, str):
        candidate_keys = (candidate_keys,)
    for key in candidate_keys:
        value = bag.get(key)
        if value is not None:
            return value
    return default


def missing_placeholder(field_name: str) -> str:
    return MISSING_TEMPLATE.format(field=humanize(field_name))


def malformed_placeholder(field_name: str) -> str:
    return MALFORMED_TEMPLATE.format(field=humanize(field_name))


def as_flat_string(value: Any, field_name: str) -> str:
    """Coerce a value expected to be one prose string.

    Strings pass through, null or blank text becomes the "not available"
    placeholder and a nested object becomes the "not properly formatted"
    placeholder. Lists are treated as paragraphs and joined.
    """
    if isinstance(value, str) and value.strip():
        return value
    if value is None or isinstance(value, str):
        return missing_placeholder(field_name)
    if isinstance(value, Mapping):
        return malformed_placeholder(field_name)
    if isinstance(value, (list, tuple)):
        joined = "\n\n".join(stringify(v) for v in value if v is not None)
        return joined if joined.strip() else missing_placeholder(field_name)
    return str(value)


def as_string_array(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [stringify(v) for v in value if v is not None]
