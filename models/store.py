import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database.base import Base

class Store(Base):
    __tablename__ = "stores"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    name = Column(String(60), nullable=False)
    address = Column(String(400), nullable=False, default="")
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="store")
    ratings = relationship(
        "Rating",
        back_populates="store",
        cascade="all, delete",
        order_by="Rating.created_at.desc()"
    )

    def __repr__(self):
        return f"<Store(id={self.id}, name={self.name}, owner_id={self.owner_id})>"
