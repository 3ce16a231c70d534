"""Settings types for input resolution and file loading."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ResolveSettings:
    """
    How raw inputs are resolved and how their files are loaded.

    `allow_globs=False` treats every input as a literal path, even when it contains
    wildcard characters. `trim_contents=True` strips leading and trailing whitespace
    from each loaded file. Settings are immutable; the `with_*` methods return a new
    value and leave the receiver untouched.
    """

    allow_globs: bool = True
    trim_contents: bool = True

    def with_allow_globs(self, allow_globs: bool) -> ResolveSettings:
        return replace(self, allow_globs=allow_globs)

    def with_trim_contents(self, trim_contents: bool) -> ResolveSettings:
        return replace(self, trim_contents=trim_contents)
