"""Token usage value object."""

from typing import Any

from pydantic import Field, model_validator

from ...shared import ValueObject


class TokenUsage(ValueObject):
    """Token accounting reported at the end of a turn.

    ``total_tokens`` is always ``input_tokens + output_tokens``. Cache
    accounting is not reported by the wire format yet, so ``cached_tokens``
    stays 0 unless a caller sets it.
    """

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    cached_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def compute_total(cls, data: Any) -> Any:
        """Derive total_tokens from the input and output counts."""
        if isinstance(data, dict):
            data = dict(data)
            data["total_tokens"] = int(data.get("input_tokens") or 0) + int(
                data.get("output_tokens") or 0
            )
        return data

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            cached_tokens=self.cached_tokens + other.cached_tokens,
        )
