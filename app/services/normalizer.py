"""Response normalisation: turns a raw API response into a tagged result."""

import base64
import json
from typing import Any, Mapping

from app.models.result import NormalizedResult


def normalize(headers: Mapping[str, Any], body: Any) -> NormalizedResult:
    """Classify *body* as JSON, text, or binary and wrap it accordingly.

    The checks run in priority order:

    1. ``application/json`` content type – body parsed as JSON; a non-object
       top-level value is wrapped as ``{"data": value}``.
    2. ``text/*`` content type – body decoded as UTF-8 and returned verbatim.
    3. Body that is already structured (dict/list) – passed through as JSON.
    4. Anything else – raw bytes, base64-encoded as ``{"base64": "..."}``.
    """
    content_type = get_header_value(headers, "content-type")

    if "application/json" in content_type:
        return NormalizedResult(content_type=content_type, type="json", response=_parse_json_body(body))

    if "text/" in content_type:
        return NormalizedResult(content_type=content_type, type="text", response=_decode_text(body))

    if _is_structured(body):
        return NormalizedResult(content_type=content_type, type="json", response=body)

    encoded = base64.b64encode(_to_bytes(body)).decode("ascii")
    return NormalizedResult(content_type=content_type, type="base64", response={"base64": encoded})


def get_header_value(headers: Mapping[str, Any], target_header: str) -> str:
    """Return the first value of *target_header* (case-insensitive), or ``""``.

    Multi-valued headers contribute their first element.
    """
    target = target_header.lower()
    for name, value in headers.items():
        if name.lower() != target or value is None:
            continue
        if isinstance(value, (list, tuple)):
            return str(value[0]) if value else ""
        return str(value)
    return ""


def _parse_json_body(body: Any) -> dict:
    if isinstance(body, dict):
        return body

    if _is_structured(body):
        parsed = body
    else:
        text = _decode_text(body).strip()
        parsed = json.loads(text) if text else {}

    if isinstance(parsed, dict):
        return parsed
    return {"data": parsed}


def _decode_text(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body).decode("utf-8", errors="replace")
    return str(body)


def _to_bytes(body: Any) -> bytes:
    if body is None:
        return b""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    return str(body).encode("utf-8")


def _is_structured(body: Any) -> bool:
    return isinstance(body, (dict, list))
