import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, func
from sqlalchemy.orm import relationship, Session
from database.base import Base

class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_ratings_user_store"),
        CheckConstraint("rating_value BETWEEN 1 AND 5", name="ck_ratings_value_range"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    store_id = Column(String, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    rating_value = Column(Integer, nullable=False)  # 1-5 stars
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="ratings")
    store = relationship("Store", back_populates="ratings")

    def __repr__(self):
        return f"<Rating(id={self.id}, user_id={self.user_id}, store_id={self.store_id}, rating_value={self.rating_value})>"

    @classmethod
    def get_store_average_rating(cls, db: Session, store_id: str):
        """Calculate average rating for a store"""
        result = db.query(
            func.avg(cls.rating_value).label('average'),
            func.count(cls.id).label('total_ratings')
        ).filter(cls.store_id == store_id).first()

        return {
            'average_rating': float(result.average) if result.average is not None else 0.0,
            'total_ratings': result.total_ratings or 0
        }

    @classmethod
    def get_rating_distribution(cls, db: Session, store_id: str):
        """Get rating distribution (how many 1-star, 2-star, etc.)"""
        result = db.query(
            cls.rating_value,
            func.count(cls.id).label('count')
        ).filter(cls.store_id == store_id).group_by(cls.rating_value).all()

        distribution = {i: 0 for i in range(1, 6)}
        for value, count in result:
            distribution[value] = count

        return distribution
