# ================================================================================
# Version ordering for external tool version strings
# ================================================================================

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering

from preflight.errors import InvalidVersionError

_VERSION_RE = re.compile(r"^(\d+(?:\.\d+)*)(.*)$")


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """
    A dot-separated numeric version with an optional trailing qualifier.

    Numeric segments compare left to right with the shorter side padded with
    zeros, so ``1.2 == 1.2.0``. The qualifier (everything after the numeric
    part, e.g. ``-r1122`` or ``b3``) is only compared, lexicographically,
    when the numeric parts are equal. An empty qualifier sorts first.
    """

    segments: tuple[int, ...]
    suffix: str = ""
    text: str = ""

    @classmethod
    def parse(cls, text: str) -> Version:
        m = _VERSION_RE.match(text.strip())
        if not m:
            raise InvalidVersionError(f"Not a valid version string: {text!r}")
        segments = tuple(int(part) for part in m.group(1).split("."))
        return cls(segments=segments, suffix=m.group(2), text=text.strip())

    def _padded(self, width: int) -> tuple[int, ...]:
        return self.segments + (0,) * (width - len(self.segments))

    def _key(self, other: Version) -> tuple[tuple, tuple]:
        width = max(len(self.segments), len(other.segments))
        return (self._padded(width), self.suffix), (other._padded(width), other.suffix)

    def __eq__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        mine, theirs = self._key(other)
        return mine == theirs

    def __lt__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        mine, theirs = self._key(other)
        return mine < theirs

    def __hash__(self):
        segments = list(self.segments)
        while len(segments) > 1 and segments[-1] == 0:
            segments.pop()
        return hash((tuple(segments), self.suffix))

    def __str__(self):
        return self.text or ".".join(str(s) for s in self.segments) + self.suffix
