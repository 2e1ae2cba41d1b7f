from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

# Rating Schemas
class RatingCreate(BaseModel):
    store_id: str = Field(..., min_length=1)
    rating_value: int = Field(..., ge=1, le=5, strict=True, description="Whole number of stars, 1 to 5")

class RatingUpdate(BaseModel):
    rating_value: int = Field(..., ge=1, le=5, strict=True, description="Whole number of stars, 1 to 5")

class RatingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    store_id: str
    rating_value: int
    created_at: datetime
    updated_at: Optional[datetime] = None

class RaterInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str

class RatingWithUser(RatingResponse):
    user: RaterInfo
