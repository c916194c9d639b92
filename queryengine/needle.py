"""Text matching strategies used by text-based predicates."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Literal, Union

MatchType = Literal["exact", "partial", "word"]


class Needle(ABC):
    """Something that can be searched for in a string."""

    @abstractmethod
    def is_match(self, haystack: str) -> bool:
        """Return True if the haystack matches."""


class StringMatch(Needle):
    """Plain string matching with exact, partial or whole-word semantics.

    Defaults to a case-sensitive partial (substring) match. Use the builder
    methods to change it::

        StringMatch("pure-button").word()
        StringMatch("submit").exact().case_insensitive()
    """

    def __init__(
        self,
        value: str,
        match_type: MatchType = "partial",
        case_sensitive: bool = True,
    ) -> None:
        self.value = value
        self.match_type = match_type
        self.case_sensitive = case_sensitive

    def exact(self) -> StringMatch:
        self.match_type = "exact"
        return self

    def partial(self) -> StringMatch:
        self.match_type = "partial"
        return self

    def word(self) -> StringMatch:
        self.match_type = "word"
        return self

    def case_insensitive(self) -> StringMatch:
        self.case_sensitive = False
        return self

    def is_match(self, haystack: str) -> bool:
        needle = self.value
        if not self.case_sensitive:
            needle = needle.lower()
            haystack = haystack.lower()

        if self.match_type == "exact":
            return haystack == needle
        if self.match_type == "word":
            # Words are separated by whitespace, as in class lists.
            return needle in haystack.split()
        return needle in haystack

    def __repr__(self) -> str:
        flag = "" if self.case_sensitive else ", case_insensitive"
        return f"StringMatch({self.value!r}, {self.match_type}{flag})"


class RegexMatch(Needle):
    """Regular expression search."""

    def __init__(self, pattern: str | re.Pattern[str], flags: int = 0) -> None:
        if isinstance(pattern, str):
            pattern = re.compile(pattern, flags)
        self.pattern = pattern

    def is_match(self, haystack: str) -> bool:
        return self.pattern.search(haystack) is not None

    def __repr__(self) -> str:
        return f"RegexMatch({self.pattern.pattern!r})"


NeedleLike = Union[Needle, str, "re.Pattern[str]"]


def as_needle(value: NeedleLike) -> Needle:
    """Coerce a plain string (exact match) or compiled pattern into a Needle."""
    if isinstance(value, Needle):
        return value
    if isinstance(value, str):
        return StringMatch(value, match_type="exact")
    if isinstance(value, re.Pattern):
        return RegexMatch(value)
    raise TypeError(f"Cannot match against {type(value).__name__}")
