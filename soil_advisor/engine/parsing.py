import json
import re
from typing import Any, Dict, Union
from pydantic import BaseModel
from soil_advisor.errors import MalformedModelOutput

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)

class Parsed(BaseModel):
    data: Dict[str, Any]

class Malformed(BaseModel):
    raw: str
    reason: str

ParseResult = Union[Parsed, Malformed]

def strip_fences(s: str) -> str:
    return _FENCE.sub("", s or "").strip()

def parse_model_json(text: str) -> ParseResult:
    """Turn a model reply into a JSON object, or say why it isn't one.

    Markdown fences are dropped first. If the rest is not valid JSON, the
    span between the first "{" and the last "}" is tried, which covers a
    single object wrapped in prose.
    """
    s = strip_fences(text)
    if not s:
        return Malformed(raw=text or "", reason="empty reply")
    try:
        data = json.loads(s)
    except json.JSONDecodeError as exc:
        start, end = s.find("{"), s.rfind("}")
        if start == -1 or end <= start:
            return Malformed(raw=text, reason=str(exc))
        try:
            data = json.loads(s[start:end + 1])
        except json.JSONDecodeError:
            return Malformed(raw=text, reason=str(exc))
    if not isinstance(data, dict):
        return Malformed(raw=text, reason=f"expected a JSON object, got {type(data).__name__}")
    return Parsed(data=data)

def expect_json_object(text: str, what: str) -> Dict[str, Any]:
    result = parse_model_json(text)
    if isinstance(result, Malformed):
        raise MalformedModelOutput(f"Model returned malformed {what}", result.reason, raw=result.raw)
    return result.data
