"""
Glob pattern compilation.

A pattern is split into path components, and each component is compiled on its own:

- `?` matches any single character, `*` any run of characters (within one component).
- `**` matches zero or more directories and must be a whole component.
- `[abc]`, `[a-z]`, `[!abc]` are character classes. A `]` right after `[` or `[!`
  is a literal member. A reversed range such as `[z-a]` matches nothing.

Wildcards match names that start with `.`. Matching is case sensitive.
Compilation raises `PatternSyntaxError` for input that is not a valid pattern.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

# Characters that make a component a wildcard rather than a literal name.
WILDCARD_CHARS = frozenset("*?[")

_SEPARATORS = frozenset(c for c in ("/", os.sep, os.altsep) if c)


class PatternSyntaxError(ValueError):
    """The string is not a syntactically valid glob pattern."""

    def __init__(self, pattern: str, position: int, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r} at position {position}: {reason}")
        self.pattern: str = pattern
        self.position: int = position
        self.reason: str = reason


@dataclass(frozen=True)
class PatternComponent:
    """One path component of a pattern. `regex` is `None` for literal names."""

    text: str
    regex: re.Pattern[str] | None = None
    recursive: bool = False

    @property
    def is_literal(self) -> bool:
        return self.regex is None and not self.recursive

    def matches(self, name: str) -> bool:
        if self.regex is None:
            return name == self.text
        return self.regex.fullmatch(name) is not None


@dataclass(frozen=True)
class GlobPattern:
    """
    A compiled pattern. `anchor` is the drive and/or root separator of an absolute
    pattern, or the empty string for a relative one.
    """

    source: str
    anchor: str
    components: tuple[PatternComponent, ...]

    @property
    def has_wildcards(self) -> bool:
        return any(not c.is_literal for c in self.components)


def compile_pattern(pattern: str) -> GlobPattern:
    """Compile `pattern`, raising `PatternSyntaxError` if it is not valid glob syntax."""
    drive, rest = os.path.splitdrive(pattern)
    anchor = drive
    offset = len(drive)
    if rest[:1] in _SEPARATORS:
        anchor += rest[0]
        stripped = rest.lstrip("".join(_SEPARATORS))
        offset += len(rest) - len(stripped)
        rest = stripped

    components: list[PatternComponent] = []
    start = 0
    for i in range(len(rest) + 1):
        if i == len(rest) or rest[i] in _SEPARATORS:
            text = rest[start:i]
            if text:
                components.append(_compile_component(text, pattern, offset + start))
            start = i + 1

    return GlobPattern(source=pattern, anchor=anchor, components=tuple(components))


def _compile_component(text: str, pattern: str, offset: int) -> PatternComponent:
    if text == "**":
        return PatternComponent(text=text, recursive=True)
    if not any(c in WILDCARD_CHARS for c in text):
        return PatternComponent(text=text)

    parts: list[str] = []
    i = 0
    while i < len(text):
        c = text[i]
        if c == "*":
            run_end = i
            while run_end < len(text) and text[run_end] == "*":
                run_end += 1
            if run_end - i > 2:
                raise PatternSyntaxError(pattern, offset + i, "wildcards are either '*' or '**'")
            if run_end - i == 2:
                raise PatternSyntaxError(
                    pattern, offset + i, "'**' must form a whole path component"
                )
            parts.append(".*")
            i = run_end
        elif c == "?":
            parts.append(".")
            i += 1
        elif c == "[":
            regex, i = _compile_class(text, i, pattern, offset)
            parts.append(regex)
        else:
            parts.append(re.escape(c))
            i += 1

    return PatternComponent(text=text, regex=re.compile("(?s:" + "".join(parts) + ")"))


def _compile_class(text: str, start: int, pattern: str, offset: int) -> tuple[str, int]:
    """Compile the character class opening at `text[start]`; return regex and next index."""
    i = start + 1
    negated = i < len(text) and text[i] == "!"
    if negated:
        i += 1

    members: list[str] = []
    first = True
    while True:
        if i >= len(text):
            raise PatternSyntaxError(pattern, offset + start, "unterminated character class")
        c = text[i]
        if c == "]" and not first:
            i += 1
            break
        first = False
        if i + 2 < len(text) and text[i + 1] == "-" and text[i + 2] != "]":
            low, high = c, text[i + 2]
            # A reversed range is valid but contains no characters.
            if low <= high:
                members.append(f"{re.escape(low)}-{re.escape(high)}")
            i += 3
        else:
            members.append(re.escape(c))
            i += 1

    if not members:
        return (".", i) if negated else ("(?!)", i)
    return ("[^" if negated else "[") + "".join(members) + "]", i
