from typing import List
from datetime import datetime
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import and_

from models.rating import Rating
from models.store import Store
from schemas.rating import RatingCreate, RatingUpdate
from core.exceptions import ConflictError, ResourceNotFoundError

logger = logging.getLogger(__name__)

DUPLICATE_RATING_MESSAGE = "You have already rated this store. Use PUT to update your rating."

class RatingService:

    @staticmethod
    def get_rating(db: Session, user_id: str, store_id: str) -> Rating:
        return db.query(Rating).filter(
            and_(Rating.user_id == user_id, Rating.store_id == store_id)
        ).first()

    @staticmethod
    def create_rating(db: Session, user_id: str, rating_data: RatingCreate) -> Rating:
        """Create the user's single rating for a store"""

        if RatingService.get_rating(db, user_id, rating_data.store_id):
            logger.warning(f"Duplicate rating attempt by {user_id} on store {rating_data.store_id}")
            raise ConflictError(DUPLICATE_RATING_MESSAGE)

        store = db.query(Store).filter(Store.id == rating_data.store_id).first()
        if not store:
            raise ResourceNotFoundError("Store", rating_data.store_id)

        rating = Rating(
            user_id=user_id,
            store_id=store.id,
            rating_value=rating_data.rating_value,
            created_at=datetime.utcnow(),
            updated_at=datetime.utcnow()
        )
        db.add(rating)

        try:
            db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent POST for the same store
            db.rollback()
            logger.warning(f"Integrity error creating rating: {str(e)}")
            raise ConflictError(DUPLICATE_RATING_MESSAGE)

        db.refresh(rating)
        logger.info(f"Rating {rating.rating_value} recorded by {user_id} for store {store.id}")
        return rating

    @staticmethod
    def update_rating(db: Session, user_id: str, store_id: str, rating_data: RatingUpdate) -> Rating:
        """Overwrite the value of the user's existing rating"""

        rating = RatingService.get_rating(db, user_id, store_id)
        if not rating:
            raise ResourceNotFoundError("Rating", store_id)

        rating.rating_value = rating_data.rating_value
        rating.updated_at = datetime.utcnow()

        db.commit()
        db.refresh(rating)

        logger.info(f"Rating updated to {rating.rating_value} by {user_id} for store {store_id}")
        return rating

    @staticmethod
    def delete_rating(db: Session, user_id: str, store_id: str) -> None:
        rating = RatingService.get_rating(db, user_id, store_id)
        if not rating:
            raise ResourceNotFoundError("Rating", store_id)

        db.delete(rating)
        db.commit()
        logger.info(f"Rating deleted by {user_id} for store {store_id}")

    @staticmethod
    def get_user_ratings(db: Session, user_id: str) -> List[Rating]:
        """Get a user's rating history, newest first"""
        return db.query(Rating).filter(
            Rating.user_id == user_id
        ).order_by(Rating.created_at.desc()).all()
