"""
Whole-word and whole-phrase keyword matching.

A keyword matches only where it is not part of a larger token: the
character before and after the match must not be a word character.
Matching is case-insensitive and counts non-overlapping occurrences.
"""

import re
from functools import lru_cache
from typing import Protocol


class KeywordMatcher(Protocol):
    """Counts occurrences of a keyword or phrase in a text."""

    def count(self, text: str, keyword: str) -> int:
        ...


@lru_cache(maxsize=4096)
def compile_keyword(keyword: str) -> re.Pattern[str]:
    """
    Compile a keyword into a word-boundary pattern.

    Lookarounds are used instead of ``\\b`` so that keywords starting or
    ending with punctuation (``next.js``, ``o(n)``, ``ci/cd``) still need
    a token boundary on both sides.
    """
    return re.compile(rf"(?<!\w){re.escape(keyword.strip())}(?!\w)", re.IGNORECASE)


class PhraseMatcher:
    """
    Regular-expression keyword matcher.

    Compiled patterns are cached process-wide, so one matcher can be
    shared freely between threads.

    Example:
        >>> matcher = PhraseMatcher()
        >>> matcher.count("react hooks in react", "react")
        2
        >>> matcher.count("reactive streams", "react")
        0
    """

    def count(self, text: str, keyword: str) -> int:
        if not text or not keyword.strip():
            return 0
        return sum(1 for _ in compile_keyword(keyword).finditer(text))
