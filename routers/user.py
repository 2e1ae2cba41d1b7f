from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from database.connection import get_db
from services.user import get_profile, update_profile
from schemas.user import ProfileUpdate, UserResponse
from routers.auth import get_current_user
from core.exceptions import BaseCustomException

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/profile", response_model=UserResponse)
def read_profile(
    current_user: UserResponse = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the caller's profile."""
    return UserResponse.model_validate(get_profile(db, current_user.id))

@router.put("/profile", response_model=UserResponse)
def edit_profile(
    profile_data: ProfileUpdate,
    current_user: UserResponse = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the caller's name and/or address."""
    try:
        user = update_profile(db, current_user.id, profile_data)
        return UserResponse.model_validate(user)
    except BaseCustomException:
        raise
    except Exception as e:
        logger.error(f"Error updating profile for {current_user.email}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )
