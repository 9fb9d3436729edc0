# complaints/category/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: str | None = None
    department: str = Field(..., min_length=2, max_length=100)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = None
    department: str | None = Field(default=None, min_length=2, max_length=100)


class CategoryBrief(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class CategoryOut(CategoryBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryDetail(CategoryOut):
    ticket_count: int = 0
