from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database.connection import get_db
from services.store import list_stores_for_user, get_owner_store_detail
from schemas.store import StoreListing, OwnerStoreDetail
from schemas.user import UserResponse
from routers.auth import get_current_user, get_store_owner_user
from core.exceptions import BaseCustomException

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=List[StoreListing])
def browse_stores(
    search: Optional[str] = Query(None, description="Substring of the store name"),
    address: Optional[str] = Query(None, description="Substring of the store address"),
    current_user: UserResponse = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Search stores by name and address, with ratings and the caller's own rating
    """
    try:
        return list_stores_for_user(db, current_user.id, search=search, address=address)
    except Exception as e:
        logger.error(f"Error listing stores: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve stores"
        )

@router.get("/my-store", response_model=OwnerStoreDetail)
def get_my_store(
    current_user: UserResponse = Depends(get_store_owner_user),
    db: Session = Depends(get_db)
):
    """
    Get the current store owner's store with every rating it received
    """
    try:
        return get_owner_store_detail(db, current_user.id)
    except BaseCustomException:
        raise
    except Exception as e:
        logger.error(f"Error getting store for owner {current_user.email}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve store"
        )
