from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from errors import BadRequestError
from money import parse_datetime, positive_amount, to_decimal

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


def _strict_int(value):
    # "3" from a query string is fine, 3.5 / True / "abc" are not
    if isinstance(value, bool):
        raise ValueError("must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError("must be an integer")


PositiveAmount = Annotated[Decimal, BeforeValidator(positive_amount)]
SignedAmount = Annotated[Decimal, BeforeValidator(to_decimal)]
DateValue = Annotated[datetime, BeforeValidator(parse_datetime)]
EndDateValue = Annotated[datetime, BeforeValidator(lambda v: parse_datetime(v, end_of_day=True))]
IntRef = Annotated[int, BeforeValidator(_strict_int), Field(gt=0)]
Currency = Annotated[
    str,
    BeforeValidator(lambda v: v.strip().upper() if isinstance(v, str) else v),
    Field(pattern=r"^[A-Z]{3}$"),
]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DateWindow(CamelModel):
    start_date: Optional[DateValue] = Field(None, alias="startDate")
    end_date: Optional[EndDateValue] = Field(None, alias="endDate")

    @model_validator(mode="after")
    def _ordered(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self


class Paging(CamelModel):
    limit: int = DEFAULT_LIMIT
    offset: int = 0

    @field_validator("limit", mode="before")
    @classmethod
    def _limit(cls, value):
        if value in (None, ""):
            return DEFAULT_LIMIT
        return min(max(_strict_int(value), 1), MAX_LIMIT)

    @field_validator("offset", mode="before")
    @classmethod
    def _offset(cls, value):
        if value in (None, ""):
            return 0
        return max(_strict_int(value), 0)


def parse_id(raw) -> int:
    """Path ids must be positive integers; anything else is a 400."""
    try:
        value = _strict_int(raw)
    except ValueError:
        raise BadRequestError("Invalid ID") from None
    if value <= 0:
        raise BadRequestError("Invalid ID")
    return value


def query_args(args) -> dict:
    """Flatten request.args, dropping empty values."""
    return {k: v for k, v in args.items() if v not in (None, "")}
