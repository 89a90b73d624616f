"""Encoding and line-ending transformations on in-memory text."""

from __future__ import annotations

import unicodedata
from typing import Literal

from text_normalizer.detection import UTF16_BE_BOM, UTF16_LE_BOM
from text_normalizer.errors import ConversionError
from text_normalizer.types import DetectedEncoding, EncodingName, LineEnding

type ByteOrder = Literal["little", "big"]

BOM_CHAR = "\ufeff"
ASCII_PLACEHOLDER = "?"

_LINE_TERMINATORS: dict[LineEnding, str] = {"CRLF": "\r\n", "CR": "\r", "LF": "\n"}

_CODECS: dict[DetectedEncoding, str] = {
    "ASCII": "ascii",
    "UTF-8": "utf-8",
    "UTF-16": "utf-16",
    # Unknown single-byte content is carried through byte-for-byte.
    "UNKNOWN": "latin-1",
}

# Characters NFKD leaves alone but that have a conventional ASCII spelling.
_ASCII_FALLBACKS: dict[str, str] = {
    "\u2018": "'",
    "\u2019": "'",
    "\u201a": "'",
    "\u201b": "'",
    "\u2032": "'",
    "\u201c": '"',
    "\u201d": '"',
    "\u201e": '"',
    "\u201f": '"',
    "\u2033": '"',
    "\u00ab": "<<",
    "\u00bb": ">>",
    "\u2039": "<",
    "\u203a": ">",
    "\u2010": "-",
    "\u2011": "-",
    "\u2012": "-",
    "\u2013": "-",
    "\u2014": "-",
    "\u2015": "-",
    "\u2212": "-",
    "\u2022": "*",
    "\u00d7": "x",
    "\u00f7": "/",
    "\u00df": "ss",
    "\u00e6": "ae",
    "\u00c6": "AE",
    "\u0153": "oe",
    "\u0152": "OE",
    "\u00f8": "o",
    "\u00d8": "O",
    "\u0142": "l",
    "\u0141": "L",
    "\u0111": "d",
    "\u0110": "D",
    "\u00f0": "d",
    "\u00d0": "D",
    "\u00fe": "th",
    "\u00de": "TH",
    "\u20ac": "EUR",
    "\u00a3": "GBP",
    "\u00a9": "(C)",
    "\u00ae": "(R)",
}


def utf16_byte_order(content: bytes) -> ByteOrder:
    """Return the byte order announced by a UTF-16 BOM (little if absent)."""
    return "big" if content.startswith(UTF16_BE_BOM) else "little"


def decode_content(content: bytes, encoding: DetectedEncoding) -> str:
    """Decode file content using the codec for a detected encoding.

    Raises
    ------
    ConversionError
        If the content is not valid in the detected encoding.
    """
    try:
        return content.decode(_CODECS[encoding])
    except UnicodeDecodeError as exc:
        raise ConversionError(f"content is not valid {encoding}: {exc}") from exc


def encode_text(
    text: str,
    encoding: DetectedEncoding,
    *,
    byte_order: ByteOrder = "little",
) -> bytes:
    """Encode text for writing back to disk.

    UTF-16 output always starts with a byte-order mark in ``byte_order``.
    Empty text encodes to empty bytes for every encoding.

    Raises
    ------
    ConversionError
        If the text cannot be represented in the encoding.
    """
    if not text:
        return b""
    try:
        if encoding == "UTF-16":
            if byte_order == "big":
                return UTF16_BE_BOM + text.encode("utf-16-be")
            return UTF16_LE_BOM + text.encode("utf-16-le")
        return text.encode(_CODECS[encoding])
    except UnicodeEncodeError as exc:
        raise ConversionError(f"text cannot be encoded as {encoding}: {exc}") from exc


def _transliterate_char(char: str) -> str:
    if char.isascii():
        return char
    fallback = _ASCII_FALLBACKS.get(char)
    if fallback is not None:
        return fallback
    decomposed = "".join(
        part
        for part in unicodedata.normalize("NFKD", char)
        if not unicodedata.combining(part)
    )
    if decomposed and decomposed.isascii():
        return decomposed
    if unicodedata.category(char) == "Cf":
        return ""
    return ASCII_PLACEHOLDER


def transliterate_ascii(text: str) -> str:
    """Approximate text in 7-bit ASCII.

    Accented letters lose their marks, typographic punctuation becomes its
    ASCII look-alike, invisible format characters (such as a BOM) are dropped
    and anything else becomes ``?``. Never fails.
    """
    if text.isascii():
        return text
    return "".join(_transliterate_char(char) for char in text)


def transcode(text: str, source: DetectedEncoding, target: EncodingName) -> str:
    """Prepare decoded text for encoding in ``target``.

    Parameters
    ----------
    text : str
        Decoded file content.
    source : DetectedEncoding
        Encoding the content was detected as.
    target : EncodingName
        Requested output encoding.

    Returns
    -------
    str
        Text ready to be passed to :func:`encode_text` with ``target``.

    Raises
    ------
    ConversionError
        If the source encoding is unknown, so the content cannot be
        interpreted reliably.
    """
    if source == "UNKNOWN":
        raise ConversionError(f"cannot convert from an unrecognized encoding to {target}")
    if target == "ASCII":
        return transliterate_ascii(text)
    if target == "UTF-16":
        # The encoder writes its own byte-order mark.
        return text.removeprefix(BOM_CHAR)
    return text


def normalize_line_endings(text: str) -> str:
    """Rewrite every CRLF and bare CR as LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def convert_line_endings(text: str, target: LineEnding) -> str:
    """Rewrite all line endings to ``target``.

    Endings are first normalized to LF and then expanded, so mixed or
    inconsistent input converts correctly and the operation is idempotent.
    """
    normalized = normalize_line_endings(text)
    if target == "LF":
        return normalized
    return normalized.replace("\n", _LINE_TERMINATORS[target])
