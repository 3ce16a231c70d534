"""
Input resolution: glob expansion with a literal-path fallback.

No imports from `ctxrender` outside this package except `ctxrender.errors`.

Usage::

    from ctxrender.file_resolver import PatternResolver, ResolveSettings

    settings = ResolveSettings().with_allow_globs(True)
    paths = PatternResolver(settings).resolve(["docs/*.md", "notes[draft.txt"])
"""

from ctxrender.file_resolver.patterns import GlobPattern, PatternSyntaxError, compile_pattern
from ctxrender.file_resolver.resolver import PatternResolver, resolve_patterns
from ctxrender.file_resolver.types import ResolveSettings

__all__ = [
    "GlobPattern",
    "PatternResolver",
    "PatternSyntaxError",
    "ResolveSettings",
    "compile_pattern",
    "resolve_patterns",
]
