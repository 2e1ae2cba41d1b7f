from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func, or_
from typing import Dict, List, Optional
from datetime import datetime
import logging

from models.store import Store
from models.user import User, UserRole
from models.rating import Rating
from schemas.store import (
    StoreCreate, StoreWithRating, StoreListing, StoreOwnerInfo,
    StoreSummary, OwnerStoreDetail
)
from schemas.rating import RatingResponse, RatingWithUser
from core.exceptions import ConflictError, ResourceNotFoundError, ValidationError

logger = logging.getLogger(__name__)

def _aggregate_query(db: Session):
    """Stores joined with their owner, average rating and rating count."""
    return db.query(
        Store,
        User,
        func.avg(Rating.rating_value).label("average_rating"),
        func.count(Rating.id).label("total_ratings")
    ).join(
        User, Store.owner_id == User.id
    ).outerjoin(
        Rating, Rating.store_id == Store.id
    ).group_by(Store.id, User.id)

def _as_store_with_rating(store: Store, owner: User, average, total, model=StoreWithRating, **extra):
    return model(
        id=store.id,
        name=store.name,
        address=store.address,
        owner_id=store.owner_id,
        created_at=store.created_at,
        owner=StoreOwnerInfo.model_validate(owner),
        average_rating=float(average) if average is not None else 0.0,
        total_ratings=total or 0,
        **extra
    )

def get_store_by_id(db: Session, store_id: str) -> Optional[Store]:
    """Get a store by ID."""
    return db.query(Store).filter(Store.id == store_id).first()

def get_store_by_owner_id(db: Session, owner_id: str) -> Optional[Store]:
    """Get a store by owner ID."""
    return db.query(Store).filter(Store.owner_id == owner_id).first()

def _search_rows(db: Session, search: Optional[str], address: Optional[str]):
    query = _aggregate_query(db)
    if search:
        query = query.filter(Store.name.ilike(f"%{search}%"))
    if address:
        query = query.filter(Store.address.ilike(f"%{address}%"))
    return query.order_by(Store.created_at).all()

def search_stores(db: Session, search: Optional[str] = None,
                  address: Optional[str] = None) -> List[StoreWithRating]:
    """Stores whose name contains ``search`` and whose address contains ``address``."""
    return [_as_store_with_rating(*row) for row in _search_rows(db, search, address)]

def list_stores_for_user(db: Session, user_id: str, search: Optional[str] = None,
                         address: Optional[str] = None) -> List[StoreListing]:
    """Search results annotated with the caller's own rating on each store."""
    rows = _search_rows(db, search, address)

    own_ratings = {
        rating.store_id: rating
        for rating in db.query(Rating).filter(Rating.user_id == user_id).all()
    }

    listings = []
    for store, owner, average, total in rows:
        own = own_ratings.get(store.id)
        listings.append(_as_store_with_rating(
            store, owner, average, total,
            model=StoreListing,
            user_rating=RatingResponse.model_validate(own) if own else None
        ))
    return listings

def admin_list_stores(db: Session, search: Optional[str] = None) -> List[StoreWithRating]:
    """All stores for the admin dashboard, optionally filtered on name, address or owner email."""
    query = _aggregate_query(db)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Store.name.ilike(pattern),
            Store.address.ilike(pattern),
            User.email.ilike(pattern)
        ))

    rows = query.order_by(Store.created_at).all()
    return [_as_store_with_rating(*row) for row in rows]

def get_store_with_rating(db: Session, store_id: str) -> StoreWithRating:
    row = _aggregate_query(db).filter(Store.id == store_id).first()
    if not row:
        raise ResourceNotFoundError("Store", store_id)
    return _as_store_with_rating(*row)

def get_store_summaries(db: Session, owner_ids: List[str]) -> Dict[str, StoreSummary]:
    """Store summaries with aggregates for the given owners, keyed by owner id."""
    if not owner_ids:
        return {}

    rows = _aggregate_query(db).filter(Store.owner_id.in_(owner_ids)).all()
    return {
        store.owner_id: StoreSummary(
            id=store.id,
            name=store.name,
            address=store.address,
            owner_id=store.owner_id,
            created_at=store.created_at,
            average_rating=float(average) if average is not None else 0.0,
            total_ratings=total or 0
        )
        for store, _owner, average, total in rows
    }

def create_store(db: Session, store_data: StoreCreate) -> Store:
    """Create a store for an existing store owner who does not have one yet."""
    owner = db.query(User).filter(User.id == store_data.owner_id).first()
    if not owner:
        logger.warning(f"Attempt to create store with non-existent owner: {store_data.owner_id}")
        raise ValidationError("Store owner not found", field="owner_id")

    if owner.role != UserRole.STORE_OWNER:
        logger.warning(f"Attempt to create store for non-store-owner: {store_data.owner_id}")
        raise ValidationError("User must be a store owner", field="owner_id")

    if get_store_by_owner_id(db, owner.id):
        logger.warning(f"Attempt to create a second store for owner: {owner.id}")
        raise ValidationError("Store owner already has a store", field="owner_id")

    db_store = Store(
        name=store_data.name,
        address=store_data.address,
        owner_id=owner.id,
        created_at=datetime.utcnow()
    )
    db.add(db_store)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Database integrity error creating store: {str(e)}")
        raise ConflictError("Store owner already has a store", details={"field": "owner_id"})

    db.refresh(db_store)
    logger.info(f"Store created successfully: {db_store.name} for owner {owner.email}")
    return db_store

def delete_store(db: Session, store_id: str) -> None:
    """Delete a store together with its ratings."""
    db_store = get_store_by_id(db, store_id)
    if not db_store:
        logger.warning(f"Attempt to delete non-existent store: {store_id}")
        raise ResourceNotFoundError("Store", store_id)

    db.delete(db_store)
    db.commit()
    logger.info(f"Store deleted successfully: {store_id}")

def get_owner_store_detail(db: Session, owner_id: str) -> OwnerStoreDetail:
    """The owner's store with every rating, its rater, and the aggregates."""
    store = get_store_by_owner_id(db, owner_id)
    if not store:
        raise ResourceNotFoundError("Store", f"owner:{owner_id}")

    ratings = db.query(Rating, User).join(
        User, Rating.user_id == User.id
    ).filter(
        Rating.store_id == store.id
    ).order_by(Rating.created_at.desc()).all()

    stats = Rating.get_store_average_rating(db, store.id)

    return OwnerStoreDetail(
        id=store.id,
        name=store.name,
        address=store.address,
        owner_id=store.owner_id,
        created_at=store.created_at,
        average_rating=stats['average_rating'],
        total_ratings=stats['total_ratings'],
        rating_distribution=Rating.get_rating_distribution(db, store.id),
        ratings=[
            RatingWithUser(
                id=rating.id,
                user_id=rating.user_id,
                store_id=rating.store_id,
                rating_value=rating.rating_value,
                created_at=rating.created_at,
                updated_at=rating.updated_at,
                user={"id": rater.id, "name": rater.name, "email": rater.email}
            )
            for rating, rater in ratings
        ]
    )
