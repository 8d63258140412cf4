from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime

MaintenanceType = Literal["repair", "routine", "inspection", "upgrade"]

MAINTENANCE_TYPES = ("repair", "routine", "inspection", "upgrade")


class MaintenanceCreate(BaseModel):
    equipment_id: str
    maintenance_type: MaintenanceType
    description: str
    cost: Optional[float] = Field(default=None, ge=0)
    performed_by: Optional[str] = None
    performed_at: Optional[datetime] = None

    @field_validator("description")
    @classmethod
    def description_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Description is required")
        return v.strip()


class MaintenanceResponse(BaseModel):
    id: str
    studio_id: str
    equipment_id: str
    equipment_name: Optional[str] = None
    maintenance_type: MaintenanceType
    description: str
    cost: Optional[float] = None
    performed_by: Optional[str] = None
    performed_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
