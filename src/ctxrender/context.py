"""
Context construction: load resolved files into `FileEntry` records and shape them
into the plain object graph handed to a template renderer.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ctxrender.errors import DecodeError, InvalidPathError, error_from_os
from ctxrender.file_resolver import PatternResolver, ResolveSettings

log = logging.getLogger(__name__)

# Input files and templates are always read as UTF-8.
ENCODING = "utf-8"


@dataclass(frozen=True)
class FileEntry:
    """One loaded input file."""

    name: str
    path: Path
    contents: str

    @property
    def display_path(self) -> str:
        """
        The path as text with platform separators, or `name` if the path holds
        bytes that have no text form.
        """
        text = os.fspath(self.path)
        try:
            text.encode(ENCODING)
        except UnicodeEncodeError:
            return self.name
        return text

    def to_render_object(self) -> dict[str, str]:
        return {"name": self.name, "path": self.display_path, "contents": self.contents}


@dataclass(frozen=True)
class Context:
    """Loaded files in resolution order. Never deduplicated or modified after building."""

    files: tuple[FileEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self.files)

    def to_render_object(self) -> dict[str, Any]:
        """
        Shape the context as `{"files": [{"name", "path", "contents"}, ...]}` using only
        dicts, lists and strings, so any template engine can consume it.
        """
        return {"files": [entry.to_render_object() for entry in self.files]}


def to_render_object(context: Context) -> dict[str, Any]:
    return context.to_render_object()


class ContextBuilder:
    """
    Loads paths into a `Context`, one at a time and in order. Loading is
    all-or-nothing: the first file that fails aborts the build with that file's error.
    """

    def __init__(self, settings: ResolveSettings | None = None) -> None:
        self._settings: ResolveSettings = settings if settings is not None else ResolveSettings()

    def build(self, paths: Sequence[Path]) -> Context:
        entries = [self.load_entry(Path(path)) for path in paths]
        log.debug("Built context with %d file(s)", len(entries))
        return Context(files=tuple(entries))

    def load_entry(self, path: Path) -> FileEntry:
        """
        Load a single file.

        Raises `InvalidPathError` if the path has no file name, `NotFoundError` or
        `IoError` if it can't be read, and `DecodeError` if it isn't valid text.
        """
        name = file_name(path)
        contents = read_text(path)
        if self._settings.trim_contents:
            contents = contents.strip()
        log.debug("Loaded %s (%d chars)", path, len(contents))
        return FileEntry(name=name, path=path, contents=contents)


def file_name(path: Path) -> str:
    """
    Final component of `path`. Raises `InvalidPathError` for `""`, roots, `.` and `..`,
    and for names holding bytes that are not valid UTF-8.
    """
    name = path.name
    if name in ("", ".", ".."):
        raise InvalidPathError(f"Path has no file name: {os.fspath(path)!r}", path)
    try:
        name.encode(ENCODING)
    except UnicodeEncodeError as e:
        raise InvalidPathError(
            f"File name is not valid {ENCODING} text: {os.fspath(path)!r}", path
        ) from e
    return name


def read_text(path: Path) -> str:
    """Read a whole file as UTF-8, preserving line endings exactly."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise error_from_os(e, path) from e
    try:
        return data.decode(ENCODING)
    except UnicodeDecodeError as e:
        raise DecodeError(f"File is not valid {ENCODING} text: {path}", path) from e


def build_context(paths: Sequence[Path], settings: ResolveSettings) -> Context:
    return ContextBuilder(settings).build(paths)


def populate_from(inputs: Sequence[str], settings: ResolveSettings) -> Context:
    """Resolve raw inputs (paths or patterns) and load them into a `Context`."""
    paths = PatternResolver(settings).resolve(inputs)
    return ContextBuilder(settings).build(paths)
