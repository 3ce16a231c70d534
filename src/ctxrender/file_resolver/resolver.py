"""
PatternResolver: main entry point for input resolution.

Turns raw input strings into a flat, ordered list of concrete paths. Each input is
either expanded as a glob pattern or, when it is not valid pattern syntax (or globs
are disabled), passed through as a literal path.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from pathlib import Path

from ctxrender.errors import PatternError
from ctxrender.file_resolver.patterns import (
    GlobPattern,
    PatternComponent,
    PatternSyntaxError,
    compile_pattern,
)
from ctxrender.file_resolver.types import ResolveSettings

log = logging.getLogger(__name__)


class PatternResolver:
    """
    Expands inputs in the order given. Matches of one pattern are yielded with each
    directory's entries in lexical name order. There is no deduplication or sorting
    across inputs: the same file matched by two patterns appears twice.
    """

    def __init__(self, settings: ResolveSettings | None = None) -> None:
        self._settings: ResolveSettings = settings if settings is not None else ResolveSettings()

    def resolve(self, patterns: Sequence[str]) -> list[Path]:
        """
        Resolve input strings into a list of paths.

        With globs disabled every input maps to exactly one `Path`, unchecked.
        Otherwise each input is handled as:
        - Valid pattern → every match, possibly none
        - Invalid pattern syntax → the input itself as a literal path

        Raises `PatternError` if listing a directory fails during expansion.
        """
        if not self._settings.allow_globs:
            return [Path(raw) for raw in patterns]

        result: list[Path] = []
        for raw in patterns:
            try:
                glob = compile_pattern(raw)
            except PatternSyntaxError as e:
                log.debug("Treating %r as a literal path: %s", raw, e.reason)
                result.append(Path(raw))
                continue
            matches = [Path(p) for p in self._expand(glob)]
            log.debug("Pattern %r matched %d path(s)", raw, len(matches))
            result.extend(matches)
        return result

    def _expand(self, glob: GlobPattern) -> Iterator[str]:
        if not glob.components:
            if glob.anchor and os.path.lexists(glob.anchor):
                yield glob.anchor
            return
        yield from self._match(glob.anchor, glob.components, glob.source)

    def _match(
        self, base: str, components: tuple[PatternComponent, ...], source: str
    ) -> Iterator[str]:
        """Yield paths under `base` matching `components`, depth first."""
        head, rest = components[0], components[1:]

        if head.is_literal:
            candidate = _join(base, head.text)
            if rest:
                if os.path.isdir(candidate):
                    yield from self._match(candidate, rest, source)
            elif os.path.lexists(candidate):
                yield candidate
            return

        if head.recursive:
            # `**` matches zero directories here, then recurses into each subdirectory.
            # As the last component it yields only the subdirectories themselves.
            if rest:
                yield from self._match(base, rest, source)
            for entry in self._list_dir(base, source):
                if not entry.is_dir():
                    continue
                child = _join(base, entry.name)
                if not rest:
                    yield child
                yield from self._match(child, components, source)
            return

        for entry in self._list_dir(base, source):
            if not head.matches(entry.name):
                continue
            child = _join(base, entry.name)
            if not rest:
                yield child
            elif entry.is_dir():
                yield from self._match(child, rest, source)

    def _list_dir(self, directory: str, source: str) -> list[os.DirEntry[str]]:
        """List a directory sorted by name, wrapping OS failures in `PatternError`."""
        try:
            with os.scandir(directory or ".") as it:
                return sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            reason = e.strerror or str(e)
            raise PatternError(
                f"Could not expand {source!r}: cannot list {directory or '.'}: {reason}",
                pattern=source,
                path=Path(directory or "."),
            ) from e


def resolve_patterns(patterns: Sequence[str], settings: ResolveSettings) -> list[Path]:
    """Convenience wrapper: `PatternResolver(settings).resolve(patterns)`."""
    return PatternResolver(settings).resolve(patterns)


def _join(base: str, name: str) -> str:
    return os.path.join(base, name) if base else name
