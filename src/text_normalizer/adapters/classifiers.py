"""Charset-detection adapter used for text/binary classification."""

from __future__ import annotations

import logging

import chardet

logger = logging.getLogger(__name__)


class ChardetTextClassifier:
    """Guess legacy encodings with :mod:`chardet`."""

    def guess_encoding(self, sample: bytes) -> tuple[str | None, float]:
        """Run charset detection on a content sample.

        Parameters
        ----------
        sample : bytes
            Leading bytes of the file being classified.

        Returns
        -------
        tuple[str | None, float]
            Guessed encoding name, or ``None`` when nothing matched, and the
            detector's confidence.
        """
        result = chardet.detect(sample)
        encoding = result.get("encoding")
        confidence = float(result.get("confidence") or 0.0)
        logger.debug("chardet guessed %s (confidence %.2f)", encoding, confidence)
        return encoding, confidence
