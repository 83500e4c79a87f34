import uuid
from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship
from .database import Base


class Location(Base):
    """Storage location in a store; sub-locations are embedded documents"""
    __tablename__ = "locations"
    __table_args__ = (
        UniqueConstraint("store_id", "human_id", name="ux_locations_store_human_id"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)

    # A, B, ... Z, AA within the store
    human_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")

    image_url = Column(Text, nullable=True)
    image_file_id = Column(String, nullable=True)

    # [{"id", "human_id", "name", "description", "image_url", "image_file_id"}, ...]
    # Always assign a new list; in-place mutation is not tracked.
    sublocations = Column(JSONB, nullable=False, default=list)

    store = relationship("Store", back_populates="locations")

    @property
    def to_schema(self):
        return {
            "id": str(self.id),
            "store_id": str(self.store_id),
            "human_id": self.human_id,
            "name": self.name,
            "description": self.description or "",
            "image_url": self.image_url,
            "image_file_id": self.image_file_id,
            "sublocations": [dict(s) for s in (self.sublocations or [])],
        }
