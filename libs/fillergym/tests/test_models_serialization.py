from __future__ import annotations

import pytest

from fillergym.exceptions import DecodeError
from fillergym.models.analysis import AggregateReport, SegmentResult

_PAYLOAD = {
    "total_filler_count": 2,
    "filler_rate_per_minute": 3.5,
    "speaking_speed": 320.0,
    "filler_words": [
        {
            "word": "えー",
            "count": 2,
            "positions": [0, 12],
            "confidence": 0.9,
            "contexts": ["a", "b", "c", "d"],
        },
        {"word": "あの", "count": 0, "positions": [], "confidence": 0.4},
    ],
    "improvement_suggestions": ["間を取りましょう"],
    "extra_field": "ignored",
}


def test_segment_result_from_payload_tags_offset_and_trims_contexts() -> None:
    result = SegmentResult.from_payload(_PAYLOAD, 300.0, segment_index=1)
    assert result.segment_start_offset_seconds == 300.0
    assert result.segment_index == 1
    assert result.total_count == 2
    assert result.classified[0].positions == (0, 12)
    assert result.classified[0].contexts == ("a", "b", "c")
    assert result.classified[1].contexts == ()
    assert result.suggestions == ("間を取りましょう",)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.pop("filler_words"),
        lambda p: p.update(total_filler_count="many"),
        lambda p: p["filler_words"][0].update(confidence=1.5),
        lambda p: p["filler_words"][0].pop("word"),
    ],
)
def test_segment_result_rejects_shape_mismatch(mutate) -> None:  # noqa: ANN001
    payload = {**_PAYLOAD, "filler_words": [dict(w) for w in _PAYLOAD["filler_words"]]}
    mutate(payload)
    with pytest.raises(DecodeError):
        SegmentResult.from_payload(payload, 0.0)


def test_aggregate_report_payload_uses_wire_field_names() -> None:
    result = SegmentResult.from_payload(_PAYLOAD, 0.0)
    report = AggregateReport(
        total_filler_count=result.total_count,
        filler_rate_per_minute=3.5,
        speaking_speed=320.0,
        filler_words=result.classified,
        suggestions=result.suggestions,
    )
    payload = report.to_payload()
    assert set(payload) == {
        "total_filler_count",
        "filler_rate_per_minute",
        "speaking_speed",
        "filler_words",
        "improvement_suggestions",
    }
    assert set(payload["filler_words"][0]) == {"word", "count", "positions", "confidence", "contexts"}
    assert AggregateReport.from_payload(payload) == report
