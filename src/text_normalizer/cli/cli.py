#!/usr/bin/env python3
"""
text_normalizer.cli.cli

Typer-based CLI that detects and converts text encodings and line endings.

Examples
--------
Convert every file below ``docs`` to Unix line endings:

    converttext -r -u docs

Preview converting a file to UTF-8 with Windows line endings:

    converttext -n -8 -w notes.txt
"""

from __future__ import annotations

import logging
import sys
import traceback
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import click
import typer
from typer.core import TyperCommand

from text_normalizer.errors import (
    ConfigurationError,
    MissingCapabilityError,
    NormalizerError,
)
from text_normalizer.types import EncodingName, LineEnding

if TYPE_CHECKING:
    from text_normalizer.application.results import ConversionOutcome

RAW_ARGS_KEY = "text_normalizer.raw_args"
LINE_ENDING_PANEL = "Line ending options (mutually exclusive, last one wins)"
ENCODING_PANEL = "Encoding options (mutually exclusive, last one wins)"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

LINE_ENDING_FLAGS: dict[str, LineEnding] = {
    "-w": "CRLF",
    "--windows": "CRLF",
    "-m": "CR",
    "--mac": "CR",
    "-u": "LF",
    "--unix": "LF",
}
ENCODING_FLAGS: dict[str, EncodingName] = {
    "-a": "ASCII",
    "--ascii": "ASCII",
    "-8": "UTF-8",
    "--utf8": "UTF-8",
    "-s": "UTF-16",
    "--utf16": "UTF-16",
}


class ConvertTextCommand(TyperCommand):
    """Command that keeps the raw arguments and exits with 1 on usage errors."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.meta[RAW_ARGS_KEY] = tuple(args)
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


app = typer.Typer(
    name="converttext",
    help="Detect and convert text file encodings and line endings.",
    add_completion=False,
)


# -----------------------------
# Host capability checks
# -----------------------------
@dataclass(frozen=True)
class MissingDep:
    """Represent a required host capability."""

    import_name: str
    distribution: str
    purpose: str


REQUIRED_CAPABILITIES: tuple[MissingDep, ...] = (
    MissingDep("chardet", "chardet", "text/binary classification of legacy encodings"),
)


def _is_importable(module: str) -> bool:
    """Check whether a module can be resolved.

    Parameters
    ----------
    module : str
        Module name to resolve.

    Returns
    -------
    bool
        ``True`` if the module can be imported, otherwise ``False``.
    """
    try:
        import importlib.util

        return importlib.util.find_spec(module) is not None
    except (ImportError, ValueError):
        return False


def _require_capabilities(required: Sequence[MissingDep]) -> None:
    """Raise if any required capability is missing.

    Raises
    ------
    MissingCapabilityError
        Listing every missing capability and how to install it.
    """
    not_found = [dep for dep in required if not _is_importable(dep.import_name)]
    if not not_found:
        return

    details = "\n".join(
        f"  - {dep.import_name} ({dep.purpose}); install: pip install {dep.distribution}"
        for dep in not_found
    )
    raise MissingCapabilityError(f"Missing required tools:\n{details}\nAborting.")


# -----------------------------
# Flag resolution / reporting
# -----------------------------
def _last_selected[T](tokens: Sequence[str], flags: Mapping[str, T]) -> T | None:
    """Return the value of the last flag from ``flags`` present in ``tokens``.

    Short flags may be clustered (``-rw``). Scanning stops at ``--``.
    """
    selected: T | None = None
    for token in tokens:
        if token == "--":
            break
        if token.startswith("--"):
            selected = flags.get(token, selected)
        elif token.startswith("-") and len(token) > 1:
            for char in token[1:]:
                selected = flags.get(f"-{char}", selected)
    return selected


def _resolve_group[T](
    ctx: typer.Context,
    flags: Mapping[str, T],
    chosen: Mapping[T, bool],
) -> T | None:
    """Resolve one mutually exclusive flag group with last-wins semantics."""
    if not any(chosen.values()):
        return None
    selected = _last_selected(ctx.meta.get(RAW_ARGS_KEY, ()), flags)
    if selected is not None:
        return selected
    return next(value for value, enabled in chosen.items() if enabled)


def _configure_logging(verbose: bool, debug: bool) -> None:
    """Route log records to stderr at the level implied by the flags."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def _print_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly error.

    Parameters
    ----------
    exc : Exception
        Exception that stops the run.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(str(exc), err=True)
    if isinstance(exc, ConfigurationError) and not isinstance(exc, MissingCapabilityError):
        typer.echo("Try 'converttext -h' for help.", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo(
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            err=True,
        )
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _echo_outcome(outcome: ConversionOutcome) -> None:
    typer.echo(outcome.describe())


# -----------------------------
# Command
# -----------------------------
@app.command(
    cls=ConvertTextCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
)
def convert_cmd(
    ctx: typer.Context,
    paths: list[Path] | None = typer.Argument(
        None,
        help="Files or directories to process.",
        show_default=False,
    ),
    recursive: bool = typer.Option(
        False, "-r", "--recursive", help="Process directories recursively."
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Log detection details to stderr."
    ),
    dry_run: bool = typer.Option(
        False, "-n", "--dry-run", help="Dry run (no changes)."
    ),
    windows: bool = typer.Option(
        False,
        "-w",
        "--windows",
        help="Convert to Windows (CRLF).",
        rich_help_panel=LINE_ENDING_PANEL,
    ),
    mac: bool = typer.Option(
        False,
        "-m",
        "--mac",
        help="Convert to Macintosh (CR).",
        rich_help_panel=LINE_ENDING_PANEL,
    ),
    unix: bool = typer.Option(
        False,
        "-u",
        "--unix",
        help="Convert to Unix (LF).",
        rich_help_panel=LINE_ENDING_PANEL,
    ),
    ascii_: bool = typer.Option(
        False,
        "-a",
        "--ascii",
        help="Convert to ASCII (lossy transliteration).",
        rich_help_panel=ENCODING_PANEL,
    ),
    utf8: bool = typer.Option(
        False,
        "-8",
        "--utf8",
        help="Convert to UTF-8.",
        rich_help_panel=ENCODING_PANEL,
    ),
    utf16: bool = typer.Option(
        False,
        "-s",
        "--utf16",
        help="Convert to UTF-16 (with byte-order mark).",
        rich_help_panel=ENCODING_PANEL,
    ),
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
) -> None:
    """Detect text vs. binary, current encoding and line endings, and convert.

    Binary files are skipped. Each processed file is reported on its own
    line; per-file errors do not change the exit status.

    Notes
    -----
    - Exits with status 1 when no target is requested, no paths are given,
      an option is not recognized or a required capability is missing.
    """
    try:
        _require_capabilities(REQUIRED_CAPABILITIES)

        from text_normalizer.application.use_cases import (
            build_conversion_request,
            normalize_paths,
        )

        request = build_conversion_request(
            recursive=recursive,
            dry_run=dry_run,
            verbose=verbose,
            target_line_ending=_resolve_group(
                ctx,
                LINE_ENDING_FLAGS,
                {"CRLF": windows, "CR": mac, "LF": unix},
            ),
            target_encoding=_resolve_group(
                ctx,
                ENCODING_FLAGS,
                {"ASCII": ascii_, "UTF-8": utf8, "UTF-16": utf16},
            ),
        )
        _configure_logging(request.verbose, debug)
        normalize_paths(paths or [], request, report=_echo_outcome)
    except NormalizerError as exc:
        raise typer.Exit(code=_print_error(exc, debug))


if __name__ == "__main__":
    app()
