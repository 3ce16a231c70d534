"""
Rendering seam. The core only produces a context object graph; a `Renderer` turns a
template source plus that graph into text. `JinjaRenderer` is the default.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from jinja2 import Environment, StrictUndefined, TemplateError, TemplateSyntaxError

from ctxrender.context import Context, read_text
from ctxrender.errors import RenderError

log = logging.getLogger(__name__)


class Renderer(Protocol):
    def render(self, template_source: str, context: Mapping[str, Any]) -> str:
        """Render `template_source` against `context`, raising `RenderError` on failure."""
        ...


class JinjaRenderer:
    """Renders with Jinja2. Undefined variables are errors; output is not escaped."""

    def __init__(self) -> None:
        self._environment: Environment = Environment(
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def render(self, template_source: str, context: Mapping[str, Any]) -> str:
        try:
            template = self._environment.from_string(template_source)
            return template.render(**context)
        except TemplateSyntaxError as e:
            raise RenderError(f"Template syntax error on line {e.lineno}: {e.message}") from e
        except TemplateError as e:
            raise RenderError(f"Template rendering failed: {e}") from e


def render_context(
    template_source: str, context: Context, renderer: Renderer | None = None
) -> str:
    renderer = renderer if renderer is not None else JinjaRenderer()
    return renderer.render(template_source, context.to_render_object())


def render_template_file(
    template_path: Path, context: Context, renderer: Renderer | None = None
) -> str:
    """
    Read the template at `template_path` and render it with `context`.

    Template read failures raise the same `NotFoundError`/`IoError`/`DecodeError` as
    input files; renderer failures raise `RenderError` with the template path attached.
    """
    source = read_text(template_path)
    log.debug("Rendering %s with %d file(s)", template_path, len(context))
    try:
        return render_context(source, context, renderer)
    except RenderError as e:
        if e.path is None:
            e.path = template_path
        raise
