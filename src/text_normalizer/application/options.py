"""Typed request object shared across normalization use-cases."""

from __future__ import annotations

from dataclasses import dataclass

from text_normalizer.types import EncodingName, LineEnding


@dataclass(frozen=True)
class ConversionRequest:
    """Immutable configuration for one normalization run.

    At least one of ``target_encoding`` / ``target_line_ending`` must be set;
    requests are validated by :func:`build_conversion_request` and again
    before any file is processed.
    """

    recursive: bool = False
    dry_run: bool = False
    verbose: bool = False
    target_encoding: EncodingName | None = None
    target_line_ending: LineEnding | None = None
