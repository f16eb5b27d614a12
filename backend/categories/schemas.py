from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class CategoryCreateSchema(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    type: Literal["income", "expense"]

    @field_validator("name")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value


class CategoryQuerySchema(BaseModel):
    type: Optional[Literal["income", "expense"]] = None
