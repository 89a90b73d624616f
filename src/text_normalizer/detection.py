"""Content sniffing: text vs. binary, encoding and line-ending detection."""

from __future__ import annotations

import codecs
from collections.abc import Callable
from dataclasses import dataclass

from text_normalizer.types import DetectedEncoding, LineEnding

UTF16_LE_BOM = codecs.BOM_UTF16_LE
UTF16_BE_BOM = codecs.BOM_UTF16_BE
UTF8_BOM = codecs.BOM_UTF8

SNIFF_BYTES = 64 * 1024
MIN_GUESS_CONFIDENCE = 0.5

# Signatures that identify binary formats even when the header is printable.
MAGIC_SIGNATURES: tuple[bytes, ...] = (
    b"\x89PNG\r\n\x1a\n",
    b"\xff\xd8\xff",
    b"GIF87a",
    b"GIF89a",
    b"%PDF-",
    b"PK\x03\x04",
    b"PK\x05\x06",
    b"PK\x07\x08",
    b"\x1f\x8b",
    b"\xfd7zXZ\x00",
    b"7z\xbc\xaf\x27\x1c",
    b"Rar!\x1a\x07",
    b"\x28\xb5\x2f\xfd",
    b"\x7fELF",
    b"\xca\xfe\xba\xbe",
    b"\xfe\xed\xfa\xce",
    b"\xfe\xed\xfa\xcf",
    b"\xce\xfa\xed\xfe",
    b"\xcf\xfa\xed\xfe",
    b"\x00asm",
    b"SQLite format 3\x00",
    b"OggS",
    b"fLaC",
)

# C0 controls that never appear in text: everything below 0x20 except
# BEL, BS, TAB, LF, VT, FF, CR and ESC, plus DEL.
_NON_TEXT_BYTES = frozenset(
    set(range(0x00, 0x07)) | set(range(0x0E, 0x1B)) | set(range(0x1C, 0x20)) | {0x7F}
)

type EncodingGuesser = Callable[[bytes], tuple[str | None, float]]


@dataclass(frozen=True)
class LineEndingCounts:
    """Occurrences of each line terminator in a piece of text.

    ``cr`` and ``lf`` only count bare terminators, never the halves of a CRLF.
    """

    crlf: int = 0
    cr: int = 0
    lf: int = 0

    @property
    def total(self) -> int:
        """Return the number of line terminators found."""
        return self.crlf + self.cr + self.lf

    def dominant(self) -> LineEnding:
        """Return the majority convention, ties broken CRLF >= CR >= LF."""
        if self.total == 0:
            return "LF"
        if self.crlf >= self.cr and self.crlf >= self.lf:
            return "CRLF"
        if self.cr >= self.lf:
            return "CR"
        return "LF"


def has_utf16_bom(content: bytes) -> bool:
    """Return whether content starts with a UTF-16 byte-order mark."""
    return content.startswith((UTF16_LE_BOM, UTF16_BE_BOM))


def _has_magic_signature(content: bytes) -> bool:
    return content.startswith(MAGIC_SIGNATURES)


def _has_non_text_bytes(sample: bytes) -> bool:
    return not _NON_TEXT_BYTES.isdisjoint(sample)


def _decodes_cleanly(sample: bytes, encoding: str, *, final: bool) -> bool:
    """Check a possibly truncated sample decodes in the given encoding."""
    try:
        decoder = codecs.getincrementaldecoder(encoding)()
        decoder.decode(sample, final=final)
    except (LookupError, UnicodeDecodeError):
        return False
    return True


def is_binary(content: bytes, guess_encoding: EncodingGuesser) -> bool:
    """Classify content as binary (``True``) or text (``False``).

    Parameters
    ----------
    content : bytes
        Full file content.
    guess_encoding : EncodingGuesser
        Charset detector used for content that is neither ASCII nor UTF-8.
        Returns the guessed encoding name (or ``None``) and its confidence.

    Returns
    -------
    bool
        ``True`` when the content should be treated as binary.

    Notes
    -----
    - Empty content is text.
    - A UTF-16 or UTF-8 byte-order mark marks the content as text.
    - Known magic signatures, NUL bytes and other non-text control bytes
      mark the content as binary.
    """
    if not content:
        return False
    if has_utf16_bom(content) or content.startswith(UTF8_BOM):
        return False
    if _has_magic_signature(content):
        return True

    sample = content[:SNIFF_BYTES]
    if _has_non_text_bytes(sample):
        return True
    if sample.isascii():
        return False
    complete = len(content) <= SNIFF_BYTES
    if _decodes_cleanly(sample, "utf-8", final=complete):
        return False

    encoding, confidence = guess_encoding(sample)
    if encoding is None or confidence < MIN_GUESS_CONFIDENCE:
        return True
    return not _decodes_cleanly(sample, encoding, final=complete)


def detect_encoding(content: bytes) -> DetectedEncoding:
    """Detect the encoding of text content.

    UTF-16 byte-order marks win over UTF-8 multi-byte sequences, which win
    over plain 7-bit ASCII. Anything else is ``"UNKNOWN"``.
    """
    if has_utf16_bom(content):
        return "UTF-16"
    if content.isascii():
        return "ASCII"
    try:
        content.decode("utf-8")
    except UnicodeDecodeError:
        return "UNKNOWN"
    return "UTF-8"


def count_line_endings(text: str) -> LineEndingCounts:
    """Count CRLF, bare CR and bare LF terminators in text."""
    crlf = text.count("\r\n")
    return LineEndingCounts(
        crlf=crlf,
        cr=max(text.count("\r") - crlf, 0),
        lf=max(text.count("\n") - crlf, 0),
    )


def detect_line_ending(text: str) -> LineEnding:
    """Return the majority line-ending convention of text (``"LF"`` if none)."""
    return count_line_endings(text).dominant()
