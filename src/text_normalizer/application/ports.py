"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from text_normalizer.application.results import ConversionOutcome


class TextClassifier(Protocol):
    """Guess the character set of content that is neither ASCII nor UTF-8."""

    def guess_encoding(self, sample: bytes) -> tuple[str | None, float]:
        """Return a codec name (or ``None``) and a confidence in ``[0, 1]``."""


class FileReplacer(Protocol):
    """Replace a file's content as a single final step."""

    def replace(self, path: Path, data: bytes) -> None:
        """Swap ``data`` in for the current content of ``path``."""


type OutcomeReporter = Callable[[ConversionOutcome], None]
