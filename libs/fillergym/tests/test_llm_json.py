from __future__ import annotations

import json

import pytest

from fillergym.utils.llm_json import parse_llm_json


@pytest.mark.parametrize(
    "text",
    [
        '{"a": 1}',
        '```json\n{"a": 1}\n```',
        '<think>hmm</think>\n```\n{"a": 1}\n```',
        'Here you go: {"a": 1} hope it helps',
    ],
)
def test_parse_llm_json_recovers_object(text: str) -> None:
    assert parse_llm_json(text) == {"a": 1}


@pytest.mark.parametrize("text", ["", "[1, 2]", "no json", "{broken"])
def test_parse_llm_json_rejects_non_objects(text: str) -> None:
    with pytest.raises(json.JSONDecodeError):
        parse_llm_json(text)
