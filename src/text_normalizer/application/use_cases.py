"""Application use-cases orchestrating normalization workflows."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import asdict
from functools import partial
from pathlib import Path

from pydantic import ValidationError

from text_normalizer.adapters.classifiers import ChardetTextClassifier
from text_normalizer.application.options import ConversionRequest
from text_normalizer.application.ports import (
    FileReplacer,
    OutcomeReporter,
    TextClassifier,
)
from text_normalizer.application.results import ConversionOutcome
from text_normalizer.detection import count_line_endings, detect_encoding, is_binary
from text_normalizer.errors import ConfigurationError, ConversionError
from text_normalizer.infrastructure.filesystem import (
    AtomicFileWriter,
    iter_target_files,
)
from text_normalizer.schemas import ConversionRequestConfig
from text_normalizer.transform import (
    convert_line_endings,
    decode_content,
    encode_text,
    transcode,
    utf16_byte_order,
)
from text_normalizer.types import EncodingName, LineEnding

logger = logging.getLogger(__name__)


def _validation_message(exc: ValidationError) -> str:
    messages = [
        str(error["msg"]).removeprefix("Value error, ") for error in exc.errors()
    ]
    return "; ".join(messages)


def _validate_request(config: dict[str, object]) -> ConversionRequestConfig:
    try:
        return ConversionRequestConfig.model_validate(config)
    except ValidationError as exc:
        raise ConfigurationError(_validation_message(exc)) from exc


def build_conversion_request(
    *,
    recursive: bool = False,
    dry_run: bool = False,
    verbose: bool = False,
    target_encoding: EncodingName | None = None,
    target_line_ending: LineEnding | None = None,
) -> ConversionRequest:
    """Build a validated request from command/API params.

    Raises
    ------
    ConfigurationError
        If neither a target encoding nor a target line ending is requested,
        or a target is not one of the supported values.
    """
    config = _validate_request(
        {
            "recursive": recursive,
            "dry_run": dry_run,
            "verbose": verbose,
            "target_encoding": target_encoding,
            "target_line_ending": target_line_ending,
        }
    )
    return ConversionRequest(**config.model_dump())


def process_file(
    path: Path,
    request: ConversionRequest,
    *,
    classifier: TextClassifier | None = None,
    replacer: FileReplacer | None = None,
) -> ConversionOutcome | None:
    """Use-case: detect and optionally rewrite a single file.

    Parameters
    ----------
    path : Path
        File to process.
    request : ConversionRequest
        Targets and run flags.
    classifier : TextClassifier | None, default=None
        Charset guesser used for binary sniffing of legacy-encoded content.
    replacer : FileReplacer | None, default=None
        Final content swap; defaults to :class:`AtomicFileWriter`.

    Returns
    -------
    ConversionOutcome | None
        Exactly one outcome, or ``None`` when ``path`` is not an existing
        regular file.

    Notes
    -----
    - The original content is left byte-for-byte unchanged on every outcome
      other than ``converted``.
    - Per-file failures are reported as outcomes and never raised.
    """
    if not path.is_file():
        logger.debug("%s is not a regular file, ignoring", path)
        return None

    classifier = classifier or ChardetTextClassifier()
    replacer = replacer or AtomicFileWriter()
    outcome = partial(
        ConversionOutcome,
        path=path,
        target_encoding=request.target_encoding,
        target_line_ending=request.target_line_ending,
    )
    # Links are rewritten through to their target so the link itself survives.
    target = path.resolve()

    try:
        content = target.read_bytes()
    except PermissionError as exc:
        return outcome(kind="permission_error", detail=str(exc))
    except OSError as exc:
        logger.warning("could not read %s: %s", path, exc)
        return outcome(kind="unknown_error", detail=str(exc))

    try:
        binary = is_binary(content, classifier.guess_encoding)
    except Exception as exc:
        logger.exception("unexpected error while classifying %s", path)
        return outcome(kind="unknown_error", detail=str(exc))
    if binary:
        return outcome(kind="skipped")

    if not os.access(target, os.R_OK | os.W_OK):
        return outcome(kind="permission_error")

    source_encoding = detect_encoding(content)
    try:
        text = decode_content(content, source_encoding)
    except ConversionError as exc:
        return outcome(
            kind="conversion_error",
            source_encoding=source_encoding,
            detail=str(exc),
        )

    counts = count_line_endings(text)
    source_line_ending = counts.dominant()
    logger.info(
        "%s: encoding %s, line endings %s (crlf=%d cr=%d lf=%d)",
        path,
        source_encoding,
        source_line_ending,
        counts.crlf,
        counts.cr,
        counts.lf,
    )
    outcome = partial(
        outcome,
        source_encoding=source_encoding,
        source_line_ending=source_line_ending,
    )

    if request.dry_run:
        return outcome(kind="dry_run")

    try:
        output_encoding = source_encoding
        if request.target_encoding is not None:
            text = transcode(text, source_encoding, request.target_encoding)
            output_encoding = request.target_encoding
        if request.target_line_ending is not None:
            text = convert_line_endings(text, request.target_line_ending)
        data = encode_text(
            text,
            output_encoding,
            byte_order=utf16_byte_order(content),
        )
    except ConversionError as exc:
        return outcome(kind="conversion_error", detail=str(exc))
    except Exception as exc:
        logger.exception("unexpected error while normalizing %s", path)
        return outcome(kind="unknown_error", detail=str(exc))

    try:
        replacer.replace(target, data)
    except PermissionError as exc:
        return outcome(kind="permission_error", detail=str(exc))
    except OSError as exc:
        logger.warning("could not replace %s: %s", path, exc)
        return outcome(kind="unknown_error", detail=str(exc))

    return outcome(kind="converted")


def normalize_paths(
    paths: Iterable[Path | str],
    request: ConversionRequest,
    *,
    classifier: TextClassifier | None = None,
    replacer: FileReplacer | None = None,
    report: OutcomeReporter | None = None,
) -> list[ConversionOutcome]:
    """Use-case: normalize every file reachable from ``paths``.

    Parameters
    ----------
    paths : Iterable[Path | str]
        Files and/or directories to process.
    request : ConversionRequest
        Targets and run flags shared by every file.
    classifier : TextClassifier | None, default=None
        Charset guesser passed through to :func:`process_file`.
    replacer : FileReplacer | None, default=None
        Content swap passed through to :func:`process_file`.
    report : OutcomeReporter | None, default=None
        Called with each outcome as soon as it is produced.

    Returns
    -------
    list[ConversionOutcome]
        Outcomes in processing order.

    Raises
    ------
    ConfigurationError
        If the request has no target or no paths were given. Nothing is
        touched in that case.
    """
    _validate_request(asdict(request))
    roots = [Path(item) for item in paths]
    if not roots:
        raise ConfigurationError("No files or directories specified.")

    classifier = classifier or ChardetTextClassifier()
    replacer = replacer or AtomicFileWriter()

    outcomes: list[ConversionOutcome] = []
    for root in roots:
        for path in iter_target_files(root, recursive=request.recursive):
            result = process_file(
                path, request, classifier=classifier, replacer=replacer
            )
            if result is None:
                continue
            outcomes.append(result)
            if report is not None:
                report(result)
    return outcomes
