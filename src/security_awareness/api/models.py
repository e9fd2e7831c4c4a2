"""Pydantic models for session request payloads."""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    field_validator,
)


class ProgressRequest(BaseModel):
    """Body of a progress update."""

    token: str = Field(min_length=1)
    step: StrictInt | StrictFloat
    data: Any = None

    @field_validator("step")
    @classmethod
    def _whole_steps_as_int(cls, value: int | float) -> int | float:
        """Normalize `2.0` to `2`; fractional steps fail the progression check."""
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


class CompleteRequest(BaseModel):
    """Body of a completion request."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(min_length=1)
    game_score: int | float | None = Field(default=None, alias="gameScore")
    total_time: int | float | None = Field(default=None, alias="totalTime")
