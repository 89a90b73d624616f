"""Pydantic schemas for runtime validation of normalization requests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from text_normalizer.types import EncodingName, LineEnding


class ConversionRequestConfig(BaseModel):
    """Validated input for a normalization run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    recursive: bool = False
    dry_run: bool = False
    verbose: bool = False
    target_encoding: EncodingName | None = None
    target_line_ending: LineEnding | None = None

    @model_validator(mode="after")
    def _require_target(self) -> ConversionRequestConfig:
        if self.target_encoding is None and self.target_line_ending is None:
            raise ValueError(
                "No line ending or encoding specified - nothing to do"
            )
        return self
