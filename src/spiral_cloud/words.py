"""Ranked word lists: tokenizing raw text, counting and ranking words."""

from __future__ import annotations

import collections
import re
from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Mapping

WORD_PATTERN = re.compile(r"(?<!<)\b([\w\-']+)\b(?!>)")
NON_WORD = re.compile(r"\W")

_ENGLISH_STOP_WORDS = frozenset(
    """a about above after again against all am an and any are aren't as at be because been before being
below between both but by can can't cannot could couldn't did didn't do does doesn't doing don't down during
each few for from further had hadn't has hasn't have haven't having he he'd he'll he's her here here's hers
herself him himself his how how's i i'd i'll i'm i've if in into is isn't it it's its itself let's me more
most mustn't my myself no nor not of off on once only or other ought our ours ourselves out over own same
shan't she she'd she'll she's should shouldn't so some such than that that's the their theirs them
themselves then there there's these they they'd they'll they're they've this those through to too under
until up very was wasn't we we'd we'll we're we've were weren't what what's when when's where where's which
while who who's whom why why's with won't would wouldn't you you'd you'll you're you've your yours yourself
yourselves""".split()
)

DEFAULT_STOP_WORDS: frozenset[str] = _ENGLISH_STOP_WORDS | frozenset(
    NON_WORD.sub("", word) for word in _ENGLISH_STOP_WORDS
)
"""English stop words, with and without apostrophes since tokens lose them."""


@dataclass(frozen=True, slots=True)
class Word:
    """A word ready for layout. Rank 1 is the most frequent word."""

    text: str
    rank: int
    count: int = 1

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("word text must be non-empty")
        if self.rank < 1:
            raise ValueError("rank must be >= 1")
        if self.count < 1:
            raise ValueError("count must be >= 1")


def normalize_token(token: str) -> str:
    return NON_WORD.sub("", token.lower())


def tokenize(text: str) -> List[str]:
    """Split ``text`` into lower-cased tokens with non-word characters removed."""

    tokens: List[str] = []
    for match in WORD_PATTERN.finditer(text):
        token = normalize_token(match.group(1))
        if token:
            tokens.append(token)
    return tokens


def count_words(
    tokens: Iterable[str],
    *,
    stop_words: AbstractSet[str] | None = None,
) -> collections.Counter[str]:
    counts = collections.Counter(token for token in tokens if token)
    if stop_words:
        for word in list(counts):
            if word in stop_words:
                del counts[word]
    return counts


def rank_words(
    counts: Mapping[str, int],
    *,
    word_count: int = 70,
    stop_words: AbstractSet[str] | None = None,
) -> List[Word]:
    """Return at most ``word_count`` words ordered by descending count.

    Ties are ordered alphabetically so the ranking is reproducible.
    """

    if word_count <= 0:
        return []
    candidates = [
        (word, int(count))
        for word, count in counts.items()
        if word and count > 0 and not (stop_words and word in stop_words)
    ]
    candidates.sort(key=lambda pair: (-pair[1], pair[0]))
    return [
        Word(text=word, rank=index, count=count)
        for index, (word, count) in enumerate(candidates[:word_count], start=1)
    ]


def rank_text(
    text: str,
    *,
    word_count: int = 70,
    stop_words: AbstractSet[str] | None = DEFAULT_STOP_WORDS,
) -> List[Word]:
    return rank_words(count_words(tokenize(text), stop_words=stop_words), word_count=word_count)


def longest_word(words: Iterable[Word]) -> str:
    """Return the longest word text; ties go to the better-ranked word."""

    best = ""
    for word in sorted(words, key=lambda w: w.rank):
        if len(word.text) > len(best):
            best = word.text
    return best


__all__ = [
    "DEFAULT_STOP_WORDS",
    "Word",
    "count_words",
    "longest_word",
    "normalize_token",
    "rank_text",
    "rank_words",
    "tokenize",
]
