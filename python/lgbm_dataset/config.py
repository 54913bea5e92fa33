"""Dataset construction parameters.

`DatasetParams` renders the native parameter string passed to every dataset
constructor. The default instance renders the empty string, which leaves every
setting at the native library's default.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__: list[str] = ["DatasetParams"]

ParamValue = bool | int | float | str


def _format_value(value: ParamValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class DatasetParams(BaseModel):
    """Native dataset parameters.

    Only fields that are set are rendered. Anything without a dedicated field
    can be passed through ``extra``.

    Example:
        >>> DatasetParams(max_bin=63, use_missing=False).to_param_string()
        'max_bin=63 use_missing=false'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_bin: int | None = None
    min_data_in_bin: int | None = None
    bin_construct_sample_cnt: int | None = None
    use_missing: bool | None = None
    zero_as_missing: bool | None = None
    header: bool | None = None
    label_column: str | None = None
    verbose: int | None = None
    extra: dict[str, ParamValue] = Field(default_factory=dict)

    @field_validator("max_bin")
    @classmethod
    def validate_max_bin(cls, v: int | None) -> int | None:
        """Validate max_bin leaves room for at least two bins."""
        if v is not None and v <= 1:
            raise ValueError("max_bin must be greater than 1")
        return v

    @field_validator("min_data_in_bin", "bin_construct_sample_cnt")
    @classmethod
    def validate_positive(cls, v: int | None) -> int | None:
        """Validate counts are positive."""
        if v is not None and v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("extra")
    @classmethod
    def validate_extra_keys(cls, v: dict[str, ParamValue]) -> dict[str, ParamValue]:
        """Validate extra keys are single tokens."""
        for key in v:
            if not key or any(c.isspace() or c == "=" for c in key):
                raise ValueError(f"invalid parameter name {key!r}")
        return v

    def to_param_string(self) -> str:
        """Render as space-separated ``key=value`` pairs."""
        pairs: list[str] = []
        for name in type(self).model_fields:
            if name == "extra":
                continue
            value = getattr(self, name)
            if value is not None:
                pairs.append(f"{name}={_format_value(value)}")
        pairs.extend(f"{key}={_format_value(value)}" for key, value in self.extra.items())
        return " ".join(pairs)
