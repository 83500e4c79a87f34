from typing import Literal, Optional

from pydantic import BaseModel, field_validator

Role = Literal["Admin", "Editor", "Viewer", "No Access"]


class StoreRead(BaseModel):
    id: str
    name: str


class StoreCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class PermissionRead(BaseModel):
    id: str
    user_id: str
    store_id: str
    role: Role
    can_view_cost: bool = False


class PermissionUpsert(BaseModel):
    user_id: str
    store_id: str
    role: Role
    can_view_cost: Optional[bool] = False
