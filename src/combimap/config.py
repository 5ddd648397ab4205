from __future__ import annotations

from typing import Self

import pydantic

from combimap import exceptions

DEFAULT_DELIMITER = ","
DEFAULT_WILDCARD = "*"


class MapConfig(pydantic.BaseModel):
    """Settings shared by a combination map and every map derived from it."""

    model_config = pydantic.ConfigDict(frozen=True, strict=True)

    delimiter: str = DEFAULT_DELIMITER
    wildcard: str | None = DEFAULT_WILDCARD

    @pydantic.field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """Ensure delimiter is non-empty."""
        if not v:
            raise ValueError("delimiter must be a non-empty string")
        return v

    @pydantic.field_validator("wildcard")
    @classmethod
    def validate_wildcard(cls, v: str | None) -> str | None:
        """Ensure wildcard marker, when set, is non-empty."""
        if v is not None and not v:
            raise ValueError("wildcard marker must be a non-empty string or None")
        return v

    @pydantic.model_validator(mode="after")
    def validate_marker_is_single_token(self) -> Self:
        """A marker containing the delimiter could never be a single token."""
        if self.wildcard is not None and self.delimiter in self.wildcard:
            raise ValueError(
                f"wildcard marker {self.wildcard!r} contains delimiter {self.delimiter!r}"
            )
        return self

    @classmethod
    def get_default(cls) -> Self:
        """Get default configuration."""
        return cls()


def make_config(
    delimiter: object = DEFAULT_DELIMITER, wildcard: object = DEFAULT_WILDCARD
) -> MapConfig:
    """Validate settings, raising ConfigurationError instead of pydantic's ValidationError."""
    try:
        return MapConfig.model_validate({"delimiter": delimiter, "wildcard": wildcard})
    except pydantic.ValidationError as e:
        problems = "; ".join(str(err["msg"]) for err in e.errors())
        raise exceptions.ConfigurationError(f"Invalid map configuration: {problems}") from e
