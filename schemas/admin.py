from typing import Optional
from pydantic import BaseModel

from schemas.user import UserResponse
from schemas.store import StoreSummary

class DashboardStats(BaseModel):
    total_users: int
    total_stores: int
    total_ratings: int

class UserWithStore(UserResponse):
    store: Optional[StoreSummary] = None
