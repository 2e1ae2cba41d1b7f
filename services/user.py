from typing import List, Optional
from datetime import datetime
import logging

from sqlalchemy.orm import Session
from sqlalchemy import or_

from models.user import User, UserRole
from models.store import Store
from models.rating import Rating
from schemas.user import ProfileUpdate, UserResponse
from schemas.admin import DashboardStats, UserWithStore
from services.auth import get_user_by_id
from services.store import get_store_summaries
from core.exceptions import ResourceNotFoundError

logger = logging.getLogger(__name__)

def get_profile(db: Session, user_id: str) -> User:
    user = get_user_by_id(db, user_id)
    if not user:
        raise ResourceNotFoundError("User", user_id)
    return user

def update_profile(db: Session, user_id: str, profile_data: ProfileUpdate) -> User:
    """Apply a partial name/address update to the caller's profile."""
    user = get_profile(db, user_id)

    update_data = profile_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(user, field, value)

    if update_data:
        user.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(user)
        logger.info(f"Profile updated for {user.email}: {', '.join(sorted(update_data))}")

    return user

def _with_stores(db: Session, users: List[User]) -> List[UserWithStore]:
    # One aggregate query covers every store owner in the list
    owner_ids = [user.id for user in users if user.role == UserRole.STORE_OWNER]
    summaries = get_store_summaries(db, owner_ids)
    return [
        UserWithStore(
            **UserResponse.model_validate(user).model_dump(),
            store=summaries.get(user.id)
        )
        for user in users
    ]

def list_users(db: Session, search: Optional[str] = None,
               role: Optional[UserRole] = None) -> List[UserWithStore]:
    """Users ordered by creation, filtered by a free-text search and/or role."""
    query = db.query(User)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            User.name.ilike(pattern),
            User.email.ilike(pattern),
            User.address.ilike(pattern)
        ))
    if role:
        query = query.filter(User.role == role)

    users = query.order_by(User.created_at).all()
    return _with_stores(db, users)

def get_user_detail(db: Session, user_id: str) -> UserWithStore:
    user = get_profile(db, user_id)
    return _with_stores(db, [user])[0]

def delete_user(db: Session, user_id: str) -> None:
    """Delete a user; their store and every related rating go with them."""
    user = get_user_by_id(db, user_id)
    if not user:
        logger.warning(f"Attempt to delete non-existent user: {user_id}")
        raise ResourceNotFoundError("User", user_id)

    email = user.email
    db.delete(user)
    db.commit()
    logger.info(f"User deleted: {email}")

def get_dashboard_stats(db: Session) -> DashboardStats:
    return DashboardStats(
        total_users=db.query(User).count(),
        total_stores=db.query(Store).count(),
        total_ratings=db.query(Rating).count()
    )
