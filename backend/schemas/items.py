import math
from typing import Optional

from pydantic import BaseModel, field_validator


def _finite(v: Optional[float]) -> Optional[float]:
    if v is None:
        return None
    if not math.isfinite(v):
        raise ValueError("cost must be a finite number")
    return v


class ItemRead(BaseModel):
    id: str
    human_id: Optional[str] = None
    name: str
    normalized_name: str = ""
    short_name: str = ""
    description: str = ""
    # None when the caller may not see costs
    cost_a: Optional[float] = 0
    cost_b: Optional[float] = 0
    sku: Optional[str] = ""
    is_discontinued: bool = False
    name_en: Optional[str] = ""
    jan_code: Optional[str] = ""
    supplier: Optional[str] = ""
    category_id: Optional[str] = None
    vendor_id: Optional[str] = None
    image_url: Optional[str] = None
    image_file_id: Optional[str] = None

    class Config:
        from_attributes = True


class ItemCreate(BaseModel):
    name: str
    human_id: Optional[str] = None
    short_name: str = ""
    description: str = ""
    cost_a: float = 0
    cost_b: float = 0
    sku: Optional[str] = ""
    is_discontinued: bool = False
    name_en: Optional[str] = ""
    jan_code: Optional[str] = ""
    supplier: Optional[str] = ""
    category_id: Optional[str] = None
    vendor_id: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("human_id")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("cost_a", "cost_b")
    @classmethod
    def _cost(cls, v: float) -> float:
        return _finite(v)


class ItemUpdate(BaseModel):
    name: Optional[str] = None
    human_id: Optional[str] = None
    short_name: Optional[str] = None
    description: Optional[str] = None
    cost_a: Optional[float] = None
    cost_b: Optional[float] = None
    sku: Optional[str] = None
    is_discontinued: Optional[bool] = None
    name_en: Optional[str] = None
    jan_code: Optional[str] = None
    supplier: Optional[str] = None
    category_id: Optional[str] = None
    vendor_id: Optional[str] = None

    @field_validator("name", "human_id")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty")
        return v

    @field_validator("cost_a", "cost_b")
    @classmethod
    def _cost(cls, v: Optional[float]) -> Optional[float]:
        return _finite(v)


class NextHumanId(BaseModel):
    human_id: str