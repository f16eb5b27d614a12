from typing import Optional

from pydantic import Field, model_validator

from common_schemas import CamelModel, Currency, DateValue, DateWindow, Paging, SignedAmount


class BalanceCreateSchema(CamelModel):
    amount: SignedAmount
    currency: Currency = "USD"
    date: DateValue


class BalanceUpdateSchema(CamelModel):
    amount: Optional[SignedAmount] = None
    currency: Optional[Currency] = None
    date: Optional[DateValue] = None

    @model_validator(mode="after")
    def _no_nulls(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class BalanceListQuery(DateWindow, Paging):
    currency: Optional[Currency] = None


class LatestBalanceQuery(CamelModel):
    currency: Currency = Field("USD")
