from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database.connection import get_db
from services.auth import create_user
from services.user import list_users, get_user_detail, delete_user, get_dashboard_stats
from services.store import admin_list_stores, get_store_with_rating, create_store, delete_store
from models.user import UserRole
from schemas.user import AdminUserCreate, UserResponse
from schemas.store import StoreCreate, StoreWithRating
from schemas.admin import DashboardStats, UserWithStore
from routers.auth import get_admin_user
from core.exceptions import BaseCustomException
from core.response import MessageResponse, message_response

logger = logging.getLogger(__name__)

router = APIRouter()

def _unexpected(action: str, e: Exception) -> HTTPException:
    logger.error(f"Error {action}: {str(e)}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed {action}"
    )

@router.get("/stats", response_model=DashboardStats)
def get_stats(
    current_user: UserResponse = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Get total users, stores and ratings for the admin dashboard
    """
    try:
        return get_dashboard_stats(db)
    except Exception as e:
        raise _unexpected("retrieving stats", e)

@router.get("/users", response_model=List[UserWithStore])
def get_users(
    search: Optional[str] = Query(None, description="Matches name, email or address"),
    role: Optional[UserRole] = Query(None),
    current_user: UserResponse = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    List users, optionally filtered by search text and role
    """
    try:
        return list_users(db, search=search, role=role)
    except Exception as e:
        raise _unexpected("retrieving users", e)

@router.get("/users/{user_id}", response_model=UserWithStore)
def get_user(
    user_id: str,
    current_user: UserResponse = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Get one user; store owners include their store's rating
    """
    try:
        return get_user_detail(db, user_id)
    except BaseCustomException:
        raise
    except Exception as e:
        raise _unexpected("retrieving user", e)

@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def add_user(
    user_data: AdminUserCreate,
    current_user: UserResponse = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Create a user of any role
    """
    try:
        user = create_user(
            db=db,
            name=user_data.name,
            email=user_data.email,
            password=user_data.password,
            address=user_data.address,
            role=user_data.role
        )
        logger.info(f"Admin {current_user.email} created user {user.email} ({user.role.value})")
        return UserResponse.model_validate(user)
    except BaseCustomException:
        raise
    except Exception as e:
        raise _unexpected("creating user", e)

@router.delete("/users/{user_id}", response_model=MessageResponse)
def remove_user(
    user_id: str,
    current_user: UserResponse = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Delete a user together with their store and ratings
    """
    try:
        delete_user(db, user_id)
        logger.info(f"Admin {current_user.email} deleted user {user_id}")
        return message_response("User deleted successfully")
    except BaseCustomException:
        raise
    except Exception as e:
        raise _unexpected("deleting user", e)

@router.get("/stores", response_model=List[StoreWithRating])
def get_stores(
    search: Optional[str] = Query(None, description="Matches store name, address or owner email"),
    current_user: UserResponse = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    List stores with owner and aggregate rating
    """
    try:
        return admin_list_stores(db, search=search)
    except Exception as e:
        raise _unexpected("retrieving stores", e)

@router.get("/stores/{store_id}", response_model=StoreWithRating)
def get_store(
    store_id: str,
    current_user: UserResponse = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    try:
        return get_store_with_rating(db, store_id)
    except BaseCustomException:
        raise
    except Exception as e:
        raise _unexpected("retrieving store", e)

@router.post("/stores", response_model=StoreWithRating, status_code=status.HTTP_201_CREATED)
def add_store(
    store_data: StoreCreate,
    current_user: UserResponse = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Create a store for a store owner who has none yet
    """
    try:
        store = create_store(db, store_data)
        logger.info(f"Admin {current_user.email} created store {store.id}")
        return get_store_with_rating(db, store.id)
    except BaseCustomException:
        raise
    except Exception as e:
        raise _unexpected("creating store", e)

@router.delete("/stores/{store_id}", response_model=MessageResponse)
def remove_store(
    store_id: str,
    current_user: UserResponse = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Delete a store and its ratings
    """
    try:
        delete_store(db, store_id)
        logger.info(f"Admin {current_user.email} deleted store {store_id}")
        return message_response("Store deleted successfully")
    except BaseCustomException:
        raise
    except Exception as e:
        raise _unexpected("deleting store", e)
