from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import date, datetime

EquipmentStatus = Literal["available", "issued", "maintenance", "retired"]
EquipmentCondition = Literal["excellent", "good", "fair", "poor", "needs_repair"]

EQUIPMENT_STATUSES = ("available", "issued", "maintenance", "retired")
EQUIPMENT_CONDITIONS = ("excellent", "good", "fair", "poor", "needs_repair")


class EquipmentCreate(BaseModel):
    name: str = Field(min_length=1)
    code: Optional[str] = None
    serial_number: Optional[str] = None
    quantity: int = Field(default=1, ge=0)
    category_id: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    vendor_name: Optional[str] = None
    vendor_contact: Optional[str] = None
    vendor_email: Optional[str] = None
    condition: Optional[EquipmentCondition] = "excellent"
    status: EquipmentStatus = "available"
    notes: Optional[str] = None


class EquipmentUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    serial_number: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    category_id: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    vendor_name: Optional[str] = None
    vendor_contact: Optional[str] = None
    vendor_email: Optional[str] = None
    condition: Optional[EquipmentCondition] = None
    status: Optional[EquipmentStatus] = None
    notes: Optional[str] = None


class EquipmentResponse(BaseModel):
    id: str
    studio_id: str
    name: str
    code: Optional[str] = None
    serial_number: Optional[str] = None
    quantity: int
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = None
    vendor_name: Optional[str] = None
    vendor_contact: Optional[str] = None
    vendor_email: Optional[str] = None
    condition: Optional[str] = None
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ImportRowError(BaseModel):
    row: int  # 1-based data row number, header excluded
    name: Optional[str] = None
    message: str


class ImportResult(BaseModel):
    imported: int
    errors: List[ImportRowError] = []
    items: List[EquipmentResponse] = []
