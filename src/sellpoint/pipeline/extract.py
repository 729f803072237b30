"""Locate, parse and shape-check the JSON object inside a model reply."""
from __future__ import annotations
import json
import re
from typing import Any

from sellpoint.common.errors import MalformedJsonError, NoJsonFoundError

_JSON_FENCE = re.compile(r"```json\s*", re.IGNORECASE)
_BARE_FENCE = re.compile(r"```\s*")

REQUIRED_TEXT_FIELDS = ("valueProposition", "targetUser", "elevatorPitch", "wechatCopy")

def strip_fences(text: str) -> str:
    """Remove markdown code-fence markers anywhere in the text."""
    return _BARE_FENCE.sub("", _JSON_FENCE.sub("", text)).strip()

def extract_json(text: str) -> Any:
    """
    Parse the span from the first ``{`` to the last ``}`` of the reply.

    Leading and trailing prose is tolerated. A reply that holds several
    independent objects yields one span covering all of them, which normally
    fails to parse.

    Raises:
        NoJsonFoundError: no brace pair, or the last ``}`` is not after the first ``{``.
        MalformedJsonError: the span is not valid JSON.
    """
    cleaned = strip_fences(text)
    first = cleaned.find("{")
    last = cleaned.rfind("}")
    if first == -1 or last == -1 or last <= first:
        raise NoJsonFoundError()
    try:
        return json.loads(cleaned[first:last + 1])
    except (ValueError, RecursionError) as e:
        raise MalformedJsonError(str(e)) from e

def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""

def validate_result(obj: Any) -> bool:
    """Return True only if every required field is present and well-typed.

    Selling point items are counted, not inspected.
    """
    if not isinstance(obj, dict):
        return False
    if not _non_empty_str(obj.get("valueProposition")):
        return False
    points = obj.get("sellingPoints")
    if not isinstance(points, list) or len(points) < 1:
        return False
    return all(_non_empty_str(obj.get(field)) for field in REQUIRED_TEXT_FIELDS[1:])
