"""Normalizer settings: which HTTP methods to report and how deep to flatten."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")

DEFAULT_MAX_DEPTH = 5


class NormalizerConfig(BaseModel):
    """Fixed for the lifetime of one normalizer."""

    model_config = ConfigDict(frozen=True)

    methods: tuple[str, ...] = HTTP_METHODS
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0)

    @field_validator("methods")
    @classmethod
    def _upper_methods(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(method.upper() for method in value)
