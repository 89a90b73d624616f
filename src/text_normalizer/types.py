"""Shared type aliases for normalizer modules."""

from __future__ import annotations

from typing import Literal

type EncodingName = Literal["ASCII", "UTF-8", "UTF-16"]
type DetectedEncoding = Literal["ASCII", "UTF-8", "UTF-16", "UNKNOWN"]
type LineEnding = Literal["CRLF", "CR", "LF"]
type OutcomeKind = Literal[
    "skipped",
    "permission_error",
    "conversion_error",
    "unknown_error",
    "converted",
    "dry_run",
]
