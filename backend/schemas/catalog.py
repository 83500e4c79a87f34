from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator


class CategoryRead(BaseModel):
    id: str
    name: str


class CategoryCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class CategoryUpdate(BaseModel):
    name: Optional[str] = None


class VendorRead(BaseModel):
    id: str
    name: str
    contact_name: Optional[str] = None
    internal_contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class VendorCreate(BaseModel):
    name: str
    contact_name: Optional[str] = None
    internal_contact_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class VendorUpdate(BaseModel):
    name: Optional[str] = None
    contact_name: Optional[str] = None
    internal_contact_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class VendorAssignment(BaseModel):
    assign_item_ids: List[str] = []
    unassign_item_ids: List[str] = []
