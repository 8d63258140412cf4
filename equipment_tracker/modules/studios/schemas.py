from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime


class StudioCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Studio name is required")
        return v.strip()


class StudioJoin(BaseModel):
    studio_id: str


class StudioResponse(BaseModel):
    id: str
    name: str
    owner_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudioSetupResponse(BaseModel):
    studio: StudioResponse
    role: str
    categories: List[str] = []
