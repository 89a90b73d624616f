"""Exception hierarchy for text normalization."""

from __future__ import annotations


class NormalizerError(Exception):
    """Base error for the normalizer; ``exit_code`` is used by the CLI."""

    exit_code: int = 1


class ConfigurationError(NormalizerError):
    """Raised when a run cannot start (no target, no paths, bad flags)."""

    exit_code = 1


class MissingCapabilityError(ConfigurationError):
    """Raised when a required host capability is unavailable."""


class ConversionError(NormalizerError):
    """Raised when a file's content cannot be converted to the target encoding."""
