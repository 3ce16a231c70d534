"""
Error types raised while resolving inputs, loading files, and rendering.

Every error the core raises is a `CtxRenderError` tagged with an `ErrorKind`, so
callers can handle each kind exhaustively without probing exception types.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ErrorKind(str, Enum):
    PATTERN = "pattern"
    NOT_FOUND = "not_found"
    IO = "io"
    DECODE = "decode"
    INVALID_PATH = "invalid_path"
    RENDER = "render"


class CtxRenderError(Exception):
    """Base class for all ctxrender failures. `path` is the offending path, if any."""

    kind: ErrorKind

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path: Path | None = path


class PatternError(CtxRenderError):
    """The file-system walk failed while expanding a glob pattern."""

    kind = ErrorKind.PATTERN

    def __init__(self, message: str, pattern: str, path: Path | None = None) -> None:
        super().__init__(message, path)
        self.pattern: str = pattern


class NotFoundError(CtxRenderError):
    kind = ErrorKind.NOT_FOUND


class IoError(CtxRenderError):
    kind = ErrorKind.IO


class DecodeError(CtxRenderError):
    kind = ErrorKind.DECODE


class InvalidPathError(CtxRenderError):
    """A path has no final component to use as a file name."""

    kind = ErrorKind.INVALID_PATH


class RenderError(CtxRenderError):
    kind = ErrorKind.RENDER


def error_from_os(exc: OSError, path: Path) -> CtxRenderError:
    """Map an `OSError` from opening or reading `path` to `NotFoundError` or `IoError`."""
    reason = exc.strerror or str(exc)
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(f"File not found: {path}", path)
    return IoError(f"Could not read {path}: {reason}", path)
