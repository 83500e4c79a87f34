import uuid
from sqlalchemy import Boolean, Column, ForeignKey, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from .database import Base


def _str_or_none(value):
    return str(value) if value is not None else None


class Item(Base):
    __tablename__ = "items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # ITM-0001, unique across the catalog once assigned
    human_id = Column(String, nullable=True, unique=True, index=True)

    name = Column(String, nullable=False)
    normalized_name = Column(String, nullable=False, default="", index=True)
    short_name = Column(String, nullable=False, default="")
    description = Column(Text, nullable=False, default="")

    cost_a = Column(Numeric, nullable=False, default=0)
    cost_b = Column(Numeric, nullable=False, default=0)

    sku = Column(String, nullable=True, index=True)
    is_discontinued = Column(Boolean, nullable=False, default=False)
    name_en = Column(String, nullable=True)
    jan_code = Column(String, nullable=True)
    supplier = Column(String, nullable=True)

    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    vendor_id = Column(UUID(as_uuid=True), ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True, index=True)

    image_url = Column(Text, nullable=True)
    image_file_id = Column(String, nullable=True)

    @property
    def to_schema(self):
        return {
            "id": str(self.id),
            "human_id": self.human_id,
            "name": self.name,
            "normalized_name": self.normalized_name or "",
            "short_name": self.short_name or "",
            "description": self.description or "",
            "cost_a": float(self.cost_a or 0),
            "cost_b": float(self.cost_b or 0),
            "sku": self.sku or "",
            "is_discontinued": bool(self.is_discontinued),
            "name_en": self.name_en or "",
            "jan_code": self.jan_code or "",
            "supplier": self.supplier or "",
            "category_id": _str_or_none(self.category_id),
            "vendor_id": _str_or_none(self.vendor_id),
            "image_url": self.image_url,
            "image_file_id": self.image_file_id,
        }
