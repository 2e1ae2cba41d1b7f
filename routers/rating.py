from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from database.connection import get_db
from routers.auth import get_rating_user
from services.rating import RatingService
from schemas.rating import RatingCreate, RatingUpdate, RatingResponse
from schemas.user import UserResponse
from core.exceptions import BaseCustomException
from core.response import MessageResponse, message_response

logger = logging.getLogger(__name__)

router = APIRouter()

def _unexpected(action: str, e: Exception) -> HTTPException:
    logger.error(f"Unexpected error {action}: {str(e)}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred. Please try again."
    )

@router.post("", response_model=RatingResponse, status_code=status.HTTP_201_CREATED)
def create_rating(
    rating_data: RatingCreate,
    current_user: UserResponse = Depends(get_rating_user),
    db: Session = Depends(get_db)
):
    """Submit a rating for a store"""
    try:
        return RatingService.create_rating(db=db, user_id=current_user.id, rating_data=rating_data)
    except BaseCustomException:
        raise
    except Exception as e:
        raise _unexpected("creating rating", e)

@router.get("/mine", response_model=List[RatingResponse])
def get_my_ratings(
    current_user: UserResponse = Depends(get_rating_user),
    db: Session = Depends(get_db)
):
    """Get current user's rating history"""
    try:
        return RatingService.get_user_ratings(db=db, user_id=current_user.id)
    except BaseCustomException:
        raise
    except Exception as e:
        raise _unexpected("listing ratings", e)

@router.put("/{store_id}", response_model=RatingResponse)
def update_rating(
    store_id: str,
    rating_data: RatingUpdate,
    current_user: UserResponse = Depends(get_rating_user),
    db: Session = Depends(get_db)
):
    """Update your existing rating"""
    try:
        return RatingService.update_rating(
            db=db,
            user_id=current_user.id,
            store_id=store_id,
            rating_data=rating_data
        )
    except BaseCustomException:
        raise
    except Exception as e:
        raise _unexpected("updating rating", e)

@router.delete("/{store_id}", response_model=MessageResponse)
def delete_rating(
    store_id: str,
    current_user: UserResponse = Depends(get_rating_user),
    db: Session = Depends(get_db)
):
    """Delete your rating"""
    try:
        RatingService.delete_rating(db=db, user_id=current_user.id, store_id=store_id)
        return message_response("Rating deleted successfully")
    except BaseCustomException:
        raise
    except Exception as e:
        raise _unexpected("deleting rating", e)
