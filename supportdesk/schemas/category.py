"""Schemas for the category registry endpoints."""

from pydantic import BaseModel, Field, field_validator

from supportdesk.core.config import RESERVED_CATEGORY_KEYS


class CategoryCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=64, pattern=r"^[a-z0-9][a-z0-9-]*$")
    title: str = Field(..., min_length=1, max_length=255)

    @field_validator("id")
    @classmethod
    def id_not_reserved(cls, v: str) -> str:
        if v in RESERVED_CATEGORY_KEYS:
            raise ValueError(f"'{v}' is a reserved path and cannot be a category key")
        return v


class CategoryOut(BaseModel):
    id: str
    title: str
