import uuid
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from .database import Base


class Stocktake(Base):
    """Last counted quantity of an item at a location (optionally a sub-location)"""
    __tablename__ = "stocktakes"
    __table_args__ = (
        CheckConstraint("last_count >= 0", name="ck_stocktakes_last_count_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(UUID(as_uuid=True), ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(UUID(as_uuid=True), ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)
    # id of an embedded sub-location document of the location
    sub_location_id = Column(String, nullable=True)

    last_count = Column(Integer, nullable=False, default=0)
    last_counted_at = Column(DateTime(timezone=True), nullable=True)
    description = Column(Text, nullable=True)

    @property
    def to_schema(self):
        return {
            "id": str(self.id),
            "store_id": str(self.store_id),
            "item_id": str(self.item_id),
            "location_id": str(self.location_id),
            "sub_location_id": self.sub_location_id,
            "last_count": self.last_count,
            "last_counted_at": self.last_counted_at,
            "description": self.description,
        }
