from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, Mapping

# Brand names and connectives that would otherwise link everything together.
STOP_WORDS: frozenset[str] = frozenset(
    {
        "MICROSOFT",
        "AZURE",
        "WINDOWS",
        "AND",
        "OF",
        "ON",
        "FOR",
        "TO",
        "+",
        "10",
    }
)

# Plural and near-synonym forms collapse onto one keyword.
SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        "APP": "APPLICATION",
        "APPS": "APPLICATION",
        "APPLICATIONS": "APPLICATION",
        "CONTAINERS": "CONTAINER",
        "DESKTOPS": "DESKTOP",
        "HUBS": "HUB",
        "INSTANCES": "INSTANCE",
        "LABS": "LAB",
        "MACHINES": "MACHINE",
        "SERVICES": "SERVICE",
        "STREAMING": "STREAM",
        "TRANSLATOR": "TRANSLATION",
    }
)


@dataclass(frozen=True)
class KeywordNormalizer:
    stop_words: frozenset[str] = STOP_WORDS
    synonyms: Mapping[str, str] = field(default_factory=lambda: SYNONYMS)

    def canonical(self, word: str) -> str:
        w = word.strip().upper()
        return self.synonyms.get(w, w)

    def normalize(self, title: str | None) -> list[str]:
        """Return the keywords of a title, in title order.

        Words are uppercased; blanks, parenthesized words such as "(Preview)"
        and stop words are dropped; the rest go through the synonym table.
        Repeated words are kept, since adjacent keywords form links.
        """
        if not title:
            return []

        out: list[str] = []
        for raw in title.split():
            w = raw.strip().upper()
            if not w:
                continue
            if w.startswith("("):
                continue
            if w in self.stop_words:
                continue
            out.append(self.synonyms.get(w, w))
        return out

    __call__ = normalize

    def extend(
        self,
        *,
        stop_words: Iterable[str] = (),
        synonyms: Mapping[str, str] | None = None,
    ) -> "KeywordNormalizer":
        """Return a copy with extra stop words and synonyms (case-insensitive)."""
        merged = dict(self.synonyms)
        for k, v in (synonyms or {}).items():
            merged[k.strip().upper()] = v.strip().upper()
        return replace(
            self,
            stop_words=self.stop_words | {w.strip().upper() for w in stop_words if w.strip()},
            synonyms=MappingProxyType(merged),
        )


DEFAULT_NORMALIZER = KeywordNormalizer()


def extract_keywords(title: str | None) -> list[str]:
    return DEFAULT_NORMALIZER.normalize(title)
