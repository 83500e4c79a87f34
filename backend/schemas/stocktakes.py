from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

# ids with this prefix come from unsaved rows in the counting sheet
NEW_ID_PREFIX = "new-"


class StocktakeRead(BaseModel):
    id: str
    store_id: str
    item_id: str
    location_id: str
    sub_location_id: Optional[str] = None
    last_count: int = 0
    last_counted_at: Optional[datetime] = None
    description: Optional[str] = None


class StocktakeWrite(BaseModel):
    id: Optional[str] = None
    store_id: str
    item_id: str
    location_id: str
    sub_location_id: Optional[str] = None
    last_count: int
    last_counted_at: Optional[datetime] = None
    description: Optional[str] = None

    @field_validator("last_count")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("last_count must be >= 0")
        return v

    @field_validator("sub_location_id", "description")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def is_new(self) -> bool:
        return not self.id or self.id.startswith(NEW_ID_PREFIX)


class StocktakeDelete(BaseModel):
    store_id: str
    ids: List[str]
