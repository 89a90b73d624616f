"""Unit tests for application use-case contracts."""

from __future__ import annotations

import codecs
import dataclasses
import os
from collections.abc import Callable
from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

import text_normalizer.application.use_cases as use_cases
from text_normalizer.application.options import ConversionRequest
from text_normalizer.application.results import ConversionOutcome
from text_normalizer.application.use_cases import (
    build_conversion_request,
    normalize_paths,
    process_file,
)
from text_normalizer.errors import ConfigurationError

_HYPOTHESIS_MAX_EXAMPLES = int(os.getenv("HYPOTHESIS_MAX_EXAMPLES", "30"))


def _write(path: Path, content: bytes) -> Path:
    path.write_bytes(content)
    return path


def test_build_request_requires_a_target() -> None:
    """Reject a request that has nothing to do."""
    with pytest.raises(ConfigurationError, match="nothing to do"):
        build_conversion_request(recursive=True)


def test_build_request_rejects_unsupported_target() -> None:
    """Reject targets outside the supported encodings."""
    with pytest.raises(ConfigurationError):
        build_conversion_request(target_encoding="EBCDIC")  # type: ignore[arg-type]


def test_build_request_returns_frozen_request() -> None:
    """Return an immutable request carrying the validated values."""
    request = build_conversion_request(
        recursive=True, dry_run=True, target_encoding="UTF-8", target_line_ending="CR"
    )
    assert request == ConversionRequest(
        recursive=True,
        dry_run=True,
        verbose=False,
        target_encoding="UTF-8",
        target_line_ending="CR",
    )
    with pytest.raises(dataclasses.FrozenInstanceError):
        request.dry_run = False  # type: ignore[misc]


def test_missing_path_and_directory_produce_no_outcome(
    tmp_path: Path, classifier: object, replacer: object
) -> None:
    """Silently ignore paths that are not existing regular files."""
    request = ConversionRequest(target_line_ending="LF")
    assert process_file(tmp_path / "missing.txt", request, classifier=classifier) is None
    assert process_file(tmp_path, request, classifier=classifier, replacer=replacer) is None


def test_binary_file_is_skipped_and_untouched(tmp_path: Path, replacer: object) -> None:
    """Skip binaries before any permission check or conversion."""
    content = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\r\n"
    path = _write(tmp_path / "logo.png", content)

    outcome = process_file(
        path, ConversionRequest(target_line_ending="LF"), replacer=replacer
    )

    assert outcome is not None
    assert outcome.kind == "skipped"
    assert path.read_bytes() == content
    assert replacer.calls == []


def test_unwritable_file_reports_permission_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, replacer: object
) -> None:
    """Report files the process may not both read and write."""
    path = _write(tmp_path / "ro.txt", b"a\r\n")
    monkeypatch.setattr(use_cases.os, "access", lambda _path, _mode: False)

    outcome = process_file(path, ConversionRequest(target_line_ending="LF"), replacer=replacer)

    assert outcome is not None
    assert outcome.kind == "permission_error"
    assert path.read_bytes() == b"a\r\n"
    assert replacer.calls == []


def test_dry_run_reports_detection_without_writing(tmp_path: Path, replacer: object) -> None:
    """Preview the transitions and leave content and mtime untouched."""
    path = _write(tmp_path / "a.txt", b"one\r\ntwo\r\n")
    before = path.stat().st_mtime_ns
    request = ConversionRequest(dry_run=True, target_encoding="UTF-16", target_line_ending="LF")

    outcome = process_file(path, request, replacer=replacer)

    assert outcome == ConversionOutcome(
        path=path,
        kind="dry_run",
        source_encoding="ASCII",
        source_line_ending="CRLF",
        target_encoding="UTF-16",
        target_line_ending="LF",
    )
    assert path.read_bytes() == b"one\r\ntwo\r\n"
    assert path.stat().st_mtime_ns == before
    assert replacer.calls == []


def test_mixed_line_endings_convert_to_lf(tmp_path: Path) -> None:
    """Rewrite mixed endings in place with the default atomic writer."""
    path = _write(tmp_path / "mixed.txt", b"line1\r\nline2\nline3\r")

    outcome = process_file(path, ConversionRequest(target_line_ending="LF"))

    assert outcome is not None
    assert outcome.kind == "converted"
    assert outcome.source_line_ending == "CRLF"
    assert path.read_bytes() == b"line1\nline2\nline3\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["mixed.txt"]


def test_ascii_to_utf16_is_lossless(tmp_path: Path) -> None:
    """Write a BOM-prefixed UTF-16 file that decodes back to the original."""
    path = _write(tmp_path / "a.txt", b"hello\nworld\n")

    outcome = process_file(path, ConversionRequest(target_encoding="UTF-16"))

    assert outcome is not None
    assert outcome.kind == "converted"
    data = path.read_bytes()
    assert data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE))
    assert data.decode("utf-16") == "hello\nworld\n"


def test_utf8_to_ascii_transliterates(tmp_path: Path) -> None:
    """Convert to ASCII with best-effort transliteration."""
    path = _write(tmp_path / "a.txt", "caf\u00e9 \u201cok\u201d\r\n".encode())

    outcome = process_file(
        path, ConversionRequest(target_encoding="ASCII", target_line_ending="LF")
    )

    assert outcome is not None
    assert outcome.kind == "converted"
    assert path.read_bytes() == b'cafe "ok"\n'


def test_big_endian_utf16_keeps_byte_order(tmp_path: Path) -> None:
    """Preserve big-endian UTF-16 when only line endings change."""
    bom = codecs.BOM_UTF16_BE
    path = _write(tmp_path / "be.txt", bom + "a\r\nb\r\n".encode("utf-16-be"))

    outcome = process_file(path, ConversionRequest(target_line_ending="LF"))

    assert outcome is not None
    assert outcome.source_encoding == "UTF-16"
    assert outcome.source_line_ending == "CRLF"
    assert path.read_bytes() == bom + "a\nb\n".encode("utf-16-be")


def test_corrupt_utf16_reports_corruption(tmp_path: Path, replacer: object) -> None:
    """Report UTF-16 content that cannot be decoded."""
    content = codecs.BOM_UTF16_LE + b"a\x00b"
    path = _write(tmp_path / "bad.txt", content)

    outcome = process_file(path, ConversionRequest(target_line_ending="LF"), replacer=replacer)

    assert outcome is not None
    assert outcome.kind == "conversion_error"
    assert path.read_bytes() == content


def test_unknown_encoding_cannot_be_transcoded(
    tmp_path: Path, classifier: object, replacer: object
) -> None:
    """Report a corruption error and keep the original for unknown encodings."""
    content = b"caf\xe9\r\n"
    path = _write(tmp_path / "latin1.txt", content)

    outcome = process_file(
        path,
        ConversionRequest(target_encoding="UTF-8"),
        classifier=classifier,
        replacer=replacer,
    )

    assert outcome is not None
    assert outcome.kind == "conversion_error"
    assert outcome.source_encoding == "UNKNOWN"
    assert path.read_bytes() == content
    assert replacer.calls == []


def test_unknown_encoding_line_endings_are_byte_exact(
    tmp_path: Path, classifier: object
) -> None:
    """Convert line endings of legacy text without touching other bytes."""
    path = _write(tmp_path / "latin1.txt", b"caf\xe9\r\nna\xefve\r\n")

    outcome = process_file(path, ConversionRequest(target_line_ending="LF"), classifier=classifier)

    assert outcome is not None
    assert outcome.kind == "converted"
    assert path.read_bytes() == b"caf\xe9\nna\xefve\n"


def test_failed_replace_reports_permission_error(
    tmp_path: Path, make_replacer: Callable[..., object]
) -> None:
    """Map a permission failure of the final swap to a permission error."""
    path = _write(tmp_path / "a.txt", b"a\r\n")
    replacer = make_replacer(PermissionError(13, "Permission denied"))

    outcome = process_file(path, ConversionRequest(target_line_ending="LF"), replacer=replacer)

    assert outcome is not None
    assert outcome.kind == "permission_error"
    assert path.read_bytes() == b"a\r\n"


def test_other_replace_failures_report_unknown_error(
    tmp_path: Path, make_replacer: Callable[..., object]
) -> None:
    """Map non-permission OS errors of the final swap to an unknown error."""
    path = _write(tmp_path / "a.txt", b"a\r\n")
    replacer = make_replacer(OSError(28, "No space left on device"))

    outcome = process_file(path, ConversionRequest(target_line_ending="LF"), replacer=replacer)

    assert outcome is not None
    assert outcome.kind == "unknown_error"
    assert path.read_bytes() == b"a\r\n"


def test_unexpected_transform_failure_reports_unknown_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, replacer: object
) -> None:
    """Contain unexpected exceptions to the file being processed."""
    path = _write(tmp_path / "a.txt", b"a\r\n")

    def boom(_text: str, _target: str) -> str:
        raise RuntimeError("boom")

    monkeypatch.setattr(use_cases, "convert_line_endings", boom)

    outcome = process_file(path, ConversionRequest(target_line_ending="LF"), replacer=replacer)

    assert outcome is not None
    assert outcome.kind == "unknown_error"
    assert outcome.detail == "boom"
    assert path.read_bytes() == b"a\r\n"
    assert replacer.calls == []


def test_symlink_is_converted_through_to_its_target(tmp_path: Path) -> None:
    """Rewrite the link target and keep the link itself."""
    target = _write(tmp_path / "real.txt", b"a\r\n")
    link = tmp_path / "link.txt"
    link.symlink_to(target)

    outcome = process_file(link, ConversionRequest(target_line_ending="LF"))

    assert outcome is not None
    assert outcome.path == link
    assert link.is_symlink()
    assert target.read_bytes() == b"a\n"


@settings(
    max_examples=_HYPOTHESIS_MAX_EXAMPLES,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
@given(
    payload=st.binary(max_size=512),
    encoding=st.sampled_from([None, "ASCII", "UTF-8", "UTF-16"]),
    ending=st.sampled_from([None, "CRLF", "CR", "LF"]),
)
def test_binary_files_are_never_modified(
    tmp_path: Path,
    payload: bytes,
    encoding: str | None,
    ending: str | None,
) -> None:
    """Property: content with a NUL byte is always skipped and left as is."""
    content = b"\x00" + payload
    path = _write(tmp_path / "blob.bin", content)
    request = ConversionRequest(
        target_encoding=encoding,  # type: ignore[arg-type]
        target_line_ending=ending if encoding or ending else "LF",  # type: ignore[arg-type]
    )

    outcome = process_file(path, request)

    assert outcome is not None
    assert outcome.kind == "skipped"
    assert path.read_bytes() == content


def test_normalize_paths_requires_paths_and_target(tmp_path: Path) -> None:
    """Fail fast on an empty path list or a request without targets."""
    path = _write(tmp_path / "a.txt", b"a\r\n")
    with pytest.raises(ConfigurationError, match="No files or directories"):
        normalize_paths([], ConversionRequest(target_line_ending="LF"))
    with pytest.raises(ConfigurationError, match="nothing to do"):
        normalize_paths([path], ConversionRequest())
    assert path.read_bytes() == b"a\r\n"


def test_normalize_paths_walks_directories_in_order(tmp_path: Path) -> None:
    """Process direct children only unless the request is recursive."""
    _write(tmp_path / "b.txt", b"b\r\n")
    _write(tmp_path / "a.txt", b"a\r\n")
    (tmp_path / "sub").mkdir()
    nested = _write(tmp_path / "sub" / "c.txt", b"c\r\n")

    flat = normalize_paths([tmp_path], ConversionRequest(target_line_ending="LF"))
    assert [outcome.path.name for outcome in flat] == ["a.txt", "b.txt"]
    assert nested.read_bytes() == b"c\r\n"

    deep = normalize_paths(
        [str(tmp_path)], ConversionRequest(recursive=True, target_line_ending="CRLF")
    )
    assert [outcome.path.name for outcome in deep] == ["a.txt", "b.txt", "c.txt"]
    assert nested.read_bytes() == b"c\r\n"
    assert (tmp_path / "a.txt").read_bytes() == b"a\r\n"


def test_normalize_paths_reports_and_continues_after_errors(
    tmp_path: Path, make_replacer: Callable[..., object]
) -> None:
    """Keep processing after a per-file failure and report every outcome."""
    first = _write(tmp_path / "a.txt", b"a\r\n")
    second = _write(tmp_path / "b.txt", b"b\r\n")
    failing = make_replacer(PermissionError(13, "Permission denied"))

    class _FailFirst:
        def replace(self, path: Path, data: bytes) -> None:
            if path.name == "a.txt":
                failing.replace(path, data)
            path.write_bytes(data)

    reported: list[ConversionOutcome] = []
    outcomes = normalize_paths(
        [first, tmp_path / "missing.txt", second],
        ConversionRequest(target_line_ending="LF"),
        replacer=_FailFirst(),
        report=reported.append,
    )

    assert [outcome.kind for outcome in outcomes] == ["permission_error", "converted"]
    assert reported == outcomes
    assert first.read_bytes() == b"a\r\n"
    assert second.read_bytes() == b"b\n"
