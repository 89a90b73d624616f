"""Shared pytest configuration, marker assignment and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


class StaticClassifier:
    """Charset guesser double returning a fixed guess."""

    def __init__(self, encoding: str | None = "ISO-8859-1", confidence: float = 0.9) -> None:
        self.encoding = encoding
        self.confidence = confidence
        self.samples: list[bytes] = []

    def guess_encoding(self, sample: bytes) -> tuple[str | None, float]:
        self.samples.append(sample)
        return self.encoding, self.confidence


class RecordingReplacer:
    """File replacer double that records writes and can fail on demand."""

    def __init__(self, error: OSError | None = None) -> None:
        self.error = error
        self.calls: list[tuple[Path, bytes]] = []

    def replace(self, path: Path, data: bytes) -> None:
        self.calls.append((path, data))
        if self.error is not None:
            raise self.error
        path.write_bytes(data)


@pytest.fixture
def classifier() -> StaticClassifier:
    """Return a classifier that recognizes legacy single-byte text."""
    return StaticClassifier()


@pytest.fixture
def make_classifier() -> Callable[..., StaticClassifier]:
    """Return a factory for classifiers with a chosen guess."""
    return StaticClassifier


@pytest.fixture
def make_replacer() -> Callable[..., RecordingReplacer]:
    """Return a factory for replacers that may fail."""
    return RecordingReplacer


@pytest.fixture
def replacer() -> RecordingReplacer:
    """Return a replacer that writes through and records calls."""
    return RecordingReplacer()


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """Undo ``logging.basicConfig(force=True)`` calls made by the CLI."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
