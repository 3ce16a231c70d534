"""
ctxrender: render a template with the contents of files selected by paths or globs.

Usage::

    from pathlib import Path

    from ctxrender import ResolveSettings, populate_from, render_template_file

    context = populate_from(["docs/*.md"], ResolveSettings())
    print(render_template_file(Path("summary.md.j2"), context))
"""

from ctxrender.context import (
    Context,
    ContextBuilder,
    FileEntry,
    build_context,
    populate_from,
    to_render_object,
)
from ctxrender.errors import (
    CtxRenderError,
    DecodeError,
    ErrorKind,
    InvalidPathError,
    IoError,
    NotFoundError,
    PatternError,
    RenderError,
)
from ctxrender.file_resolver import PatternResolver, ResolveSettings, resolve_patterns
from ctxrender.render import JinjaRenderer, Renderer, render_context, render_template_file

__all__ = [
    "Context",
    "ContextBuilder",
    "CtxRenderError",
    "DecodeError",
    "ErrorKind",
    "FileEntry",
    "InvalidPathError",
    "IoError",
    "JinjaRenderer",
    "NotFoundError",
    "PatternError",
    "PatternResolver",
    "RenderError",
    "Renderer",
    "ResolveSettings",
    "build_context",
    "populate_from",
    "render_context",
    "render_template_file",
    "resolve_patterns",
    "to_render_object",
]
