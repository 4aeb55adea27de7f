"""Parsing of JSON objects returned by chat-completion models."""

from __future__ import annotations

import json
import re
from typing import Any, cast

_THINK_BLOCK_RE = re.compile(r"^\s*<think>[\s\S]*?</think>\s*", re.IGNORECASE)
_FENCED_RE = (
    re.compile(r"```json\s*([\s\S]*?)\s*```"),
    re.compile(r"```\s*([\s\S]*?)\s*```"),
)


def parse_llm_json(text: str) -> dict[str, Any]:
    """Parse a JSON object from model output.

    Accepts plain JSON, a fenced ```json block, or a JSON object surrounded by
    stray prose. Only objects are accepted; arrays and scalars are rejected.

    Raises:
        json.JSONDecodeError: If no JSON object can be recovered.
    """
    text = _THINK_BLOCK_RE.sub("", (text or "").strip()).strip()

    for pattern in _FENCED_RE:
        match = pattern.search(text)
        if match:
            text = match.group(1).strip()
            break

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            raise exc
        data = json.loads(text[start : end + 1])

    if not isinstance(data, dict):
        raise json.JSONDecodeError("Expected a JSON object", text, 0)
    return cast(dict[str, Any], data)
