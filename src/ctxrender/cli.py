#!/usr/bin/env python3
"""
ctxrender: Render a template with the contents of a set of files

Common usage:
  ctxrender format --template summary.md.j2 --input 'docs/*.md'
  ctxrender format --template index.j2 --input 'src/**/*.py' README.md -o index.txt
  ctxrender format --template t.j2 --input 'odd[name.txt' --no-globs --no-trim
  ctxrender format --list-files --input 'docs/**/*.md'

Each input is expanded as a glob pattern (`*`, `**`, `?`, `[...]`). Inputs that are
not valid pattern syntax are read as literal paths; use --no-globs to read every
input literally. Templates see a `files` list whose items have `name`, `path` and
`contents`.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from strif import atomic_output_file

from ctxrender.config import ConfigError, find_config_file, load_config, merge_settings
from ctxrender.context import populate_from
from ctxrender.errors import CtxRenderError, ErrorKind
from ctxrender.file_resolver import PatternResolver, ResolveSettings
from ctxrender.render import render_template_file

log = logging.getLogger(__name__)

# Exit codes
EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_UNEXPECTED_ERROR = 2
EXIT_RENDER_ERROR = 3


@dataclass
class Options:
    """Command-line options for `ctxrender format`."""

    template: Path | None
    inputs: list[str]
    no_globs: bool
    no_trim: bool
    output: str
    list_files: bool
    verbose: bool

    @property
    def explicit_flags(self) -> set[str]:
        """Settings the user set on the command line (these take precedence over config)."""
        flags: set[str] = set()
        if self.no_globs:
            flags.add("allow_globs")
        if self.no_trim:
            flags.add("trim_contents")
        return flags

    def settings(self) -> ResolveSettings:
        return (
            ResolveSettings()
            .with_allow_globs(not self.no_globs)
            .with_trim_contents(not self.no_trim)
        )


def _build_parser() -> argparse.ArgumentParser:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="ctxrender",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    fmt = subparsers.add_parser(
        "format",
        help="Render a template with the contents of the input files",
        description="Render a template with the contents of the input files.",
    )
    fmt.add_argument(
        "--template",
        type=Path,
        default=None,
        metavar="PATH",
        help="Template file to render (required unless --list-files is used)",
    )
    fmt.add_argument(
        "--input",
        dest="inputs",
        nargs="+",
        default=[],
        metavar="INPUT",
        help="File paths or glob patterns. Each input is expanded as a glob unless it is "
        "not valid pattern syntax, in which case it is read as a file path",
    )
    fmt.add_argument(
        "--no-globs",
        action="store_true",
        default=False,
        help="Disable glob expansion; every input is read as a file path",
    )
    fmt.add_argument(
        "--no-trim",
        action="store_true",
        default=False,
        help="Keep leading and trailing whitespace of file contents (trimmed by default)",
    )
    fmt.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file (use '-' for stdout, the default)",
    )
    fmt.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print resolved input paths without loading or rendering",
    )
    fmt.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log resolution and loading details to stderr",
    )
    return parser


def _parse_args(args: list[str] | None = None) -> tuple[argparse.Namespace, Options | None]:
    """
    Parse command-line arguments. Returns the raw namespace and, for the `format`
    command, its `Options`.
    """
    opts = _build_parser().parse_args(args)
    if opts.command != "format":
        return opts, None
    return opts, Options(
        template=opts.template,
        inputs=opts.inputs,
        no_globs=opts.no_globs,
        no_trim=opts.no_trim,
        output=opts.output,
        list_files=opts.list_files,
        verbose=opts.verbose,
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_settings(options: Options) -> ResolveSettings:
    settings = options.settings()
    config_path = find_config_file(Path.cwd())
    if config_path:
        log.debug("Using config file %s", config_path)
        settings = merge_settings(settings, load_config(config_path), options.explicit_flags)
    return settings


def _write_output(output: str, destination: str) -> None:
    if destination == "-":
        print(output)
        return
    with atomic_output_file(Path(destination), make_parents=True) as temp_path:
        Path(temp_path).write_text(output, encoding="utf-8")


def _error_message(error: CtxRenderError) -> str:
    if error.kind == ErrorKind.RENDER:
        return f"Error: failed to process template: {error}"
    if error.kind == ErrorKind.PATTERN:
        return f"Error: failed to expand input pattern: {error}"
    return f"Error: failed to read input(s): {error}"


def _report_error(error: CtxRenderError) -> int:
    print(_error_message(error), file=sys.stderr)
    return EXIT_RENDER_ERROR if error.kind == ErrorKind.RENDER else EXIT_INPUT_ERROR


def _path_text(path: Path) -> str:
    """Printable form of a path; bytes that aren't UTF-8 are shown as `\\xNN` escapes."""
    return os.fsencode(path).decode("utf-8", "backslashreplace")


def _list_files(inputs: list[str], settings: ResolveSettings) -> int:
    try:
        paths = PatternResolver(settings).resolve(inputs)
    except CtxRenderError as e:
        return _report_error(e)
    for path in paths:
        print(_path_text(path))
    return EXIT_OK


def run_format(options: Options) -> int:
    """
    Run the `format` command: resolve inputs, build the context, render the
    template and write the result.
    """
    if not options.inputs:
        print(
            "Error: format requires at least one --input path or pattern"
            " (use --help for more options)",
            file=sys.stderr,
        )
        return EXIT_INPUT_ERROR

    try:
        settings = _load_settings(options)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if options.list_files:
        return _list_files(options.inputs, settings)

    if options.template is None:
        print(
            "Error: format requires --template unless --list-files is used",
            file=sys.stderr,
        )
        return EXIT_INPUT_ERROR

    try:
        context = populate_from(options.inputs, settings)
        output = render_template_file(options.template, context)
        _write_output(output, options.output)
    except CtxRenderError as e:
        return _report_error(e)
    except OSError as e:
        # Writing the output file failed.
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_UNEXPECTED_ERROR

    return EXIT_OK


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the ctxrender CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    opts, options = _parse_args(args)

    if opts.version:
        try:
            version = importlib.metadata.version("ctxrender")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return EXIT_OK

    if options is None:
        print(
            "Error: No command specified. Use `ctxrender format --help` for usage.",
            file=sys.stderr,
        )
        return EXIT_INPUT_ERROR

    _configure_logging(options.verbose)
    return run_format(options)


if __name__ == "__main__":
    sys.exit(main())
