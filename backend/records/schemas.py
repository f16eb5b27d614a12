from typing import Optional

from pydantic import Field, model_validator

from common_schemas import CamelModel, Currency, DateValue, DateWindow, IntRef, Paging, PositiveAmount


class RecordCreateSchema(CamelModel):
    category_id: IntRef = Field(alias="categoryId")
    amount: PositiveAmount
    description: Optional[str] = Field(None, max_length=500)
    date: DateValue

    # move the latest balance snapshot by this record's amount, atomically
    adjust_balance: bool = Field(False, alias="adjustBalance")
    currency: Currency = "USD"


class RecordUpdateSchema(CamelModel):
    """Partial update: only the fields present in the body change."""

    category_id: Optional[IntRef] = Field(None, alias="categoryId")
    amount: Optional[PositiveAmount] = None
    description: Optional[str] = Field(None, max_length=500)
    date: Optional[DateValue] = None

    @model_validator(mode="after")
    def _no_nulls(self):
        for name in ("category_id", "amount", "date"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{type(self).model_fields[name].alias or name} cannot be null")
        return self


class RecordListQuery(DateWindow, Paging):
    category_id: Optional[IntRef] = Field(None, alias="categoryId")
