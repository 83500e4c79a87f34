import uuid
from sqlalchemy import Boolean, Column, ForeignKey, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .database import Base


class Permission(Base):
    """Role of one user in one store"""
    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="ux_permissions_user_store"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    store_id = Column(UUID(as_uuid=True), ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)

    # 'Admin' | 'Editor' | 'Viewer' | 'No Access'
    role = Column(Text, nullable=False, default="Viewer")
    can_view_cost = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="permissions")
    store = relationship("Store", back_populates="permissions")

    @property
    def to_schema(self):
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "store_id": str(self.store_id),
            "role": self.role,
            "can_view_cost": bool(self.can_view_cost),
        }
