import json
import re
from typing import Any, Dict

from documents.errors import GenerationFailure

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.I)


def parse_json_object(raw: str) -> Dict[str, Any]:
    """
    Parse the JSON object in a model reply. Models sometimes wrap it in code
    fences or add a sentence around it, so fall back to the outermost {...}.
    """
    s = _FENCE_RE.sub("", (raw or "").strip())
    try:
        obj = json.loads(s)
    except ValueError:
        start = s.find("{"); end = s.rfind("}") + 1
        if start < 0 or end <= start:
            raise GenerationFailure("The model did not return a JSON object.")
        try:
            obj = json.loads(s[start:end])
        except ValueError as e:
            raise GenerationFailure(f"The model returned malformed JSON: {e}") from e
    if not isinstance(obj, dict):
        raise GenerationFailure("The model returned JSON that is not an object.")
    return obj


def text_field(obj: Dict[str, Any], key: str) -> str:
    """A required string field of a text-only prompt contract."""
    value = obj.get(key)
    if not isinstance(value, str) or not value.strip():
        raise GenerationFailure(f"The model reply is missing the '{key}' text.")
    return value.strip()
