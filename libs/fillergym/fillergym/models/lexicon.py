"""Filler lexicon: built-in terms per language plus user terms."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

DISABLED_PREFIX = "DISABLED:"

DEFAULT_FILLER_WORDS: dict[str, tuple[str, ...]] = {
    "ja": ("えー", "あー", "その", "あの", "えっと", "まあ", "なんか", "ちょっと", "やっぱり"),
    "en": ("um", "uh", "like", "you know", "actually", "basically", "literally"),
}


def default_filler_words(language: str) -> tuple[str, ...]:
    """Built-in terms for a language; unknown languages use the Japanese list."""
    key = str(language or "").strip().lower()
    return DEFAULT_FILLER_WORDS.get(key, DEFAULT_FILLER_WORDS["ja"])


def parse_custom_words(raw: str | None) -> tuple[list[str], list[str]]:
    """Split a comma-separated settings value into (custom, disabled) terms."""
    custom: list[str] = []
    disabled: list[str] = []
    for item in str(raw or "").split(","):
        word = item.strip()
        if not word:
            continue
        if word.startswith(DISABLED_PREFIX):
            name = word[len(DISABLED_PREFIX) :].strip()
            if name:
                disabled.append(name)
        else:
            custom.append(word)
    return custom, disabled


@dataclass(frozen=True)
class FillerLexicon:
    """Ordered, duplicate-free set of filler terms for one language."""

    language: str
    terms: tuple[str, ...]

    @classmethod
    def build(
        cls,
        language: str,
        custom_words: Iterable[str] = (),
        disabled: Iterable[str] = (),
    ) -> "FillerLexicon":
        builtin = default_filler_words(language)
        builtin_keys = {w.casefold() for w in builtin}
        skip = {str(w).strip().casefold() for w in disabled}
        ordered: list[str] = []
        # Unique by casefold; the first spelling wins.
        seen: set[str] = set()
        for word in [*builtin, *custom_words]:
            term = str(word or "").strip()
            key = term.casefold()
            if not term or key in seen:
                continue
            if key in skip and key in builtin_keys:
                continue
            seen.add(key)
            ordered.append(term)
        return cls(language=str(language or "ja"), terms=tuple(ordered))

    @classmethod
    def from_setting(cls, language: str, raw_custom_words: str | None) -> "FillerLexicon":
        custom, disabled = parse_custom_words(raw_custom_words)
        return cls.build(language, custom_words=custom, disabled=disabled)

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term: object) -> bool:
        if not isinstance(term, str):
            return False
        key = term.strip().casefold()
        return any(t.casefold() == key for t in self.terms)
