from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime


class CategoryCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Category name is required")
        return v.strip()


class CategoryUpdate(CategoryCreate):
    pass


class CategoryResponse(BaseModel):
    id: str
    studio_id: str
    name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
