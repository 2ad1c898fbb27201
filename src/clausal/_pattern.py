"""Regular-expression guards.

``pattern()`` compiles with ``google-re2`` for guaranteed linear-time
matching, so guards stay safe on untrusted arguments. RE2 rejects
backreferences and lookaround at compile time.

Compiled stdlib ``re.Pattern`` objects are still accepted as raw guards by
match_guard(); Pattern is the RE2 route.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import re2

from clausal._guards import GuardError

MAX_REGEX_PATTERN_LENGTH = 4096


class PatternTooLongError(GuardError):
    """A regex pattern exceeds the length limit."""

    def __init__(self, length: int, max_: int) -> None:
        self.length = length
        self.max = max_
        super().__init__(f"pattern length {length} exceeds maximum {max_}")


@dataclass(frozen=True, slots=True)
class Pattern:
    """Match strings in which the regex is found (search, not fullmatch).

    Non-string values never match.

    Raises:
        PatternTooLongError: If the pattern exceeds MAX_REGEX_PATTERN_LENGTH.
        GuardError: If the pattern is not valid RE2 syntax.
    """

    pattern: str
    _compiled: Any = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.pattern) > MAX_REGEX_PATTERN_LENGTH:
            raise PatternTooLongError(len(self.pattern), MAX_REGEX_PATTERN_LENGTH)
        try:
            compiled = re2.compile(self.pattern)
        except re2.error as e:
            msg = f'invalid regex pattern "{self.pattern}": {e}'
            raise GuardError(msg) from e
        object.__setattr__(self, "_compiled", compiled)

    def matches(self, value: Any, ctx: Any, /) -> bool:
        if not isinstance(value, str):
            return False
        return self._compiled.search(value) is not None


def pattern(regex: str) -> Pattern:
    return Pattern(regex)
