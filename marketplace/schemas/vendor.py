from typing import List, Optional
from datetime import datetime
from marketplace.schemas.base import CamelModel

class VendorSummary(CamelModel):
    id: int
    name: str
    avatar: Optional[str] = None
    verified: bool = False

class Vendor(VendorSummary):
    description: Optional[str] = None
    banner_url: Optional[str] = None
    rating: float = 0.0
    total_sales: int = 0
    followers: int = 0
    created_at: Optional[datetime] = None

class StorySummary(CamelModel):
    id: int
    content: str
    image_url: Optional[str] = None
    views: int = 0
    created_at: datetime

class FollowedVendor(VendorSummary):
    has_new_story: bool
    stories: List[StorySummary] = []

class FollowToggle(CamelModel):
    message: str
    following: bool
