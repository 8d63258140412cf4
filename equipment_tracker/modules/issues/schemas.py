from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal, Union
from datetime import date, datetime

IssueStatus = Literal["issued", "returned"]
ReturnCondition = Literal["excellent", "good", "fair", "poor", "needs_repair", "damaged"]

# Quantities stay loosely typed here so zero, negative and fractional values
# reach the stock ledger and fail with InvalidQuantity
Quantity = Union[int, float]


class IssueCreate(BaseModel):
    equipment_id: str
    quantity_issued: Quantity = 1
    person_name: str
    person_contact: Optional[str] = None
    expected_return_date: Optional[date] = None
    issue_notes: Optional[str] = None

    @field_validator("person_name")
    @classmethod
    def person_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Person Name is required")
        return v.strip()


class CartLine(BaseModel):
    equipment_id: str
    quantity: Quantity = 1


class BulkIssueCreate(BaseModel):
    person_name: str
    person_contact: Optional[str] = None
    expected_return_date: Optional[date] = None
    issue_notes: Optional[str] = None
    items: List[CartLine] = Field(default_factory=list)

    @field_validator("person_name")
    @classmethod
    def person_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Person Name is required")
        return v.strip()


class ReturnRequest(BaseModel):
    damaged_qty: Quantity = 0
    return_notes: Optional[str] = None
    return_condition: Optional[ReturnCondition] = None


class IssueResponse(BaseModel):
    id: str
    studio_id: str
    equipment_id: str
    equipment_name: Optional[str] = None
    person_name: Optional[str] = None
    person_contact: Optional[str] = None
    quantity_issued: int
    issued_by: Optional[str] = None
    issued_at: Optional[datetime] = None
    expected_return_date: Optional[date] = None
    actual_return_date: Optional[datetime] = None
    issue_condition: Optional[str] = None
    return_condition: Optional[str] = None
    damaged_qty: Optional[int] = 0
    issue_notes: Optional[str] = None
    return_notes: Optional[str] = None
    status: IssueStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
