from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime

from schemas.user import check_name, check_address
from schemas.rating import RatingResponse, RatingWithUser

# Store Creation Schema (admin)
class StoreCreate(BaseModel):
    name: str
    address: str
    owner_id: str = Field(..., min_length=1)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return check_name(v, label="Store name")

    @field_validator('address')
    @classmethod
    def validate_address(cls, v):
        return check_address(v)

# Store Response Schema
class StoreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: str
    owner_id: str
    created_at: datetime

class StoreOwnerInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str

class StoreWithRating(StoreResponse):
    """Store joined with its owner and aggregate rating."""
    owner: StoreOwnerInfo
    average_rating: float = 0.0
    total_ratings: int = 0

class StoreListing(StoreWithRating):
    """Store as seen by a browsing user, including their own rating."""
    user_rating: Optional[RatingResponse] = None

class StoreSummary(StoreResponse):
    average_rating: float = 0.0
    total_ratings: int = 0

class OwnerStoreDetail(StoreResponse):
    """The store owner's view: every rating plus aggregates."""
    average_rating: float = 0.0
    total_ratings: int = 0
    rating_distribution: Dict[int, int]
    ratings: List[RatingWithUser]
