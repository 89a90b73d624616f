"""Top-level API for text encoding and line-ending normalization."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from text_normalizer.types import EncodingName, LineEnding

if TYPE_CHECKING:
    from text_normalizer.application.results import ConversionOutcome

__version__ = "0.1.0"


def normalize(
    paths: Iterable[Path | str],
    *,
    target_encoding: EncodingName | None = None,
    target_line_ending: LineEnding | None = None,
    recursive: bool = False,
    dry_run: bool = False,
) -> list[ConversionOutcome]:
    """Normalize files and directories in place.

    Parameters
    ----------
    paths : Iterable[Path | str]
        Files and/or directories to process.
    target_encoding : {"ASCII", "UTF-8", "UTF-16"}, optional
        Encoding to convert text files to.
    target_line_ending : {"CRLF", "CR", "LF"}, optional
        Line-ending convention to convert text files to.
    recursive : bool, default=False
        Walk directories to any depth.
    dry_run : bool, default=False
        Report what would change without writing anything.

    Returns
    -------
    list[ConversionOutcome]
        One outcome per processed file.

    Raises
    ------
    ConfigurationError
        If no target is requested or no paths are given.
    """
    from text_normalizer.application.use_cases import (
        build_conversion_request,
        normalize_paths,
    )

    request = build_conversion_request(
        recursive=recursive,
        dry_run=dry_run,
        target_encoding=target_encoding,
        target_line_ending=target_line_ending,
    )
    return normalize_paths(paths, request)


def detect(path: Path | str) -> tuple[str, str]:
    """Detect the encoding and line-ending convention of a text file.

    Parameters
    ----------
    path : Path | str
        File to inspect.

    Returns
    -------
    tuple[str, str]
        Detected encoding (``ASCII``, ``UTF-8``, ``UTF-16`` or ``UNKNOWN``)
        and line ending (``CRLF``, ``CR`` or ``LF``).
    """
    from text_normalizer.detection import detect_encoding, detect_line_ending
    from text_normalizer.transform import decode_content

    content = Path(path).read_bytes()
    encoding = detect_encoding(content)
    return encoding, detect_line_ending(decode_content(content, encoding))
