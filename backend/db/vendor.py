import uuid
from sqlalchemy import Column, String, Text
from sqlalchemy.dialects.postgresql import UUID
from .database import Base


class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True, index=True)
    contact_name = Column(String, nullable=True)
    # staff member who owns the relationship with this vendor
    internal_contact_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    @property
    def to_schema(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "contact_name": self.contact_name,
            "internal_contact_name": self.internal_contact_name,
            "email": self.email,
            "phone": self.phone,
            "notes": self.notes,
        }
