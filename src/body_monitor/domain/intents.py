"""Validated user intents emitted by the presentation layer."""

from collections.abc import Mapping
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from body_monitor.domain.errors import InvalidInputError

MAX_AGE_YEARS = 150
MAX_HEIGHT_CM = 300
MAX_WEIGHT_KG = 700.0

_IntentT = TypeVar("_IntentT", bound=BaseModel)


class RegisterIntent(BaseModel):
    """First-time profile setup."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    age: int = Field(gt=0, le=MAX_AGE_YEARS)
    height: int = Field(gt=0, le=MAX_HEIGHT_CM)
    weight: float = Field(gt=0, le=MAX_WEIGHT_KG)

    @field_validator("age", "height", "weight", mode="before")
    @classmethod
    def reject_booleans(cls, value: object) -> object:
        return _reject_bool(value)


class AppendWeightIntent(BaseModel):
    """A new weight sample for a registered profile."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    weight: float = Field(gt=0, le=MAX_WEIGHT_KG)

    @field_validator("weight", mode="before")
    @classmethod
    def reject_booleans(cls, value: object) -> object:
        return _reject_bool(value)


def parse_register_form(form: Mapping[str, object]) -> RegisterIntent:
    """Parse raw registration fields into a typed intent."""
    return _parse(RegisterIntent, form)


def parse_weight_form(form: Mapping[str, object]) -> AppendWeightIntent:
    """Parse a raw weight field into a typed intent."""
    return _parse(AppendWeightIntent, form)


def _reject_bool(value: object) -> object:
    # bool is an int subclass; lax parsing would turn true into 1.
    if isinstance(value, bool):
        raise ValueError("must be a number")
    return value


def _parse(model: type[_IntentT], form: Mapping[str, object]) -> _IntentT:
    try:
        return model.model_validate(dict(form))
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        raise InvalidInputError(errors) from exc
