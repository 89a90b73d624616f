"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from text_normalizer.types import (
    DetectedEncoding,
    EncodingName,
    LineEnding,
    OutcomeKind,
)

ENCODING_LABELS: dict[DetectedEncoding, str] = {
    "ASCII": "ASCII",
    "UTF-8": "UTF8",
    "UTF-16": "UTF16",
    "UNKNOWN": "UNKNOWN",
}

LINE_ENDING_LABELS: dict[LineEnding, str] = {
    "CRLF": "Windows",
    "CR": "Macintosh",
    "LF": "Unix",
}

_STATUS_MESSAGES: dict[OutcomeKind, str] = {
    "skipped": "skipped",
    "permission_error": "permissions error",
    "conversion_error": "corruption error",
    "unknown_error": "unknown error",
}


def _encoding_label(value: DetectedEncoding | None) -> str:
    return ENCODING_LABELS[value] if value is not None else "UNKNOWN"


def _line_ending_label(value: LineEnding | None) -> str:
    return LINE_ENDING_LABELS[value] if value is not None else "Unknown"


@dataclass(frozen=True)
class ConversionOutcome:
    """Structured per-file normalization outcome.

    Parameters
    ----------
    path : Path
        File the outcome refers to, as it was discovered.
    kind : OutcomeKind
        Which of the possible outcomes occurred.
    source_encoding : DetectedEncoding | None, default=None
        Encoding detected before conversion, when detection ran.
    source_line_ending : LineEnding | None, default=None
        Line-ending convention detected before conversion, when detection ran.
    target_encoding : EncodingName | None, default=None
        Requested output encoding, if any.
    target_line_ending : LineEnding | None, default=None
        Requested output line ending, if any.
    detail : str | None, default=None
        Extra diagnostic information for error outcomes.
    """

    path: Path
    kind: OutcomeKind
    source_encoding: DetectedEncoding | None = None
    source_line_ending: LineEnding | None = None
    target_encoding: EncodingName | None = None
    target_line_ending: LineEnding | None = None
    detail: str | None = None

    @property
    def modified(self) -> bool:
        """Return whether the file content was rewritten."""
        return self.kind == "converted"

    @property
    def failed(self) -> bool:
        """Return whether the outcome is a per-file error."""
        return self.kind in {"permission_error", "conversion_error", "unknown_error"}

    def description(self) -> str:
        """Render the outcome description used in console reports."""
        if self.kind == "dry_run":
            transitions: list[str] = []
            if self.target_encoding is not None:
                transitions.append(
                    f"encoding {_encoding_label(self.source_encoding)}"
                    f" -> {_encoding_label(self.target_encoding)}"
                )
            if self.target_line_ending is not None:
                transitions.append(
                    f"line endings {_line_ending_label(self.source_line_ending)}"
                    f" -> {_line_ending_label(self.target_line_ending)}"
                )
            return "DRY RUN: " + "; ".join(transitions)
        if self.kind == "converted":
            changes: list[str] = []
            if self.target_line_ending is not None:
                changes.append(
                    f"converted line ending to {_line_ending_label(self.target_line_ending)}"
                )
            if self.target_encoding is not None:
                changes.append(
                    f"converted encoding to {_encoding_label(self.target_encoding)}"
                )
            return "; ".join(changes)
        return _STATUS_MESSAGES[self.kind]

    def describe(self) -> str:
        """Render the full ``<path> - <description>`` report line."""
        return f"{self.path} - {self.description()}"
