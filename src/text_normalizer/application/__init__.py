"""Application-layer use-cases, request and result objects."""

from __future__ import annotations

from text_normalizer.application.options import ConversionRequest
from text_normalizer.application.ports import FileReplacer, TextClassifier
from text_normalizer.application.results import ConversionOutcome
from text_normalizer.application.use_cases import (
    build_conversion_request,
    normalize_paths,
    process_file,
)

__all__ = [
    "ConversionOutcome",
    "ConversionRequest",
    "FileReplacer",
    "TextClassifier",
    "build_conversion_request",
    "normalize_paths",
    "process_file",
]
