"""Local, network-free filler candidate scan.

The scan is diagnostic only: it gives a cheap lower bound on filler usage and a
way to check lexicon coverage before the remote classifier runs. Its output
never feeds the aggregate report.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from fillergym.models.analysis import CandidateMatch

logger = logging.getLogger(__name__)

_LATIN = "a-zA-Z0-9"
_KANA = "ぁ-ゖァ-ヺー"
_IDEOGRAPHS = "一-鿿"

# A term must not continue a preceding word of any script. On the right, a kanji
# noun commonly follows a demonstrative filler ("その話"), so only kana and Latin
# characters count as a continuation.
_BEFORE = f"(?<![{_LATIN}{_KANA}{_IDEOGRAPHS}])"
_AFTER = f"(?![{_LATIN}{_KANA}])"


def build_term_pattern(term: str) -> re.Pattern[str]:
    return re.compile(f"{_BEFORE}{re.escape(term)}{_AFTER}", re.IGNORECASE)


def scan(text: str, lexicon: Iterable[str], *, context_radius: int = 10) -> list[CandidateMatch]:
    """Find word-boundary matches of each lexicon term in ``text``.

    Positions are zero-based character offsets. Each context is the match plus
    up to ``context_radius`` characters on either side, clipped to the text.
    Terms without matches are omitted.
    """
    results: list[CandidateMatch] = []
    if not text:
        return results

    n = len(text)
    for term in lexicon:
        if not term:
            continue
        positions: list[int] = []
        contexts: list[str] = []
        for match in build_term_pattern(term).finditer(text):
            positions.append(match.start())
            lo = max(0, match.start() - context_radius)
            hi = min(n, match.end() + context_radius)
            contexts.append(text[lo:hi])
        if positions:
            results.append(
                CandidateMatch(word=term, positions=tuple(positions), contexts=tuple(contexts))
            )

    logger.debug(
        "prefilter scan (chars=%d, terms_matched=%d, matches=%d)",
        n,
        len(results),
        sum(r.count for r in results),
    )
    return results
