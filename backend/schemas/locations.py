from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SubLocationRead(BaseModel):
    id: str
    human_id: str
    name: str
    description: str = ""
    image_url: Optional[str] = None
    image_file_id: Optional[str] = None


class LocationRead(BaseModel):
    id: str
    store_id: str
    human_id: str
    name: str
    description: str = ""
    image_url: Optional[str] = None
    image_file_id: Optional[str] = None
    sublocations: List[SubLocationRead] = Field(default_factory=list)

    class Config:
        from_attributes = True


class LocationCreate(BaseModel):
    store_id: str
    name: str
    # allocated from the store's letter sequence when omitted
    human_id: Optional[str] = None
    description: str = ""

    @field_validator("name", "store_id")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("human_id")
    @classmethod
    def _upper(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().upper()
        return v or None


class LocationUpdate(BaseModel):
    name: Optional[str] = None
    human_id: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name", "human_id")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty")
        return v


class SubLocationCreate(BaseModel):
    name: str
    description: str = ""

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class SubLocationUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty")
        return v
