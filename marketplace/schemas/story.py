from typing import Optional
from datetime import datetime
from pydantic import constr
from marketplace.schemas.base import CamelModel
from marketplace.schemas.vendor import VendorSummary

class StoryCreate(CamelModel):
    content: Optional[str] = None
    image_url: Optional[constr(strip_whitespace=True, min_length=1)] = None

class Story(CamelModel):
    id: int
    vendor_id: int
    content: str
    image_url: Optional[str] = None
    views: int = 0
    is_active: bool = True
    created_at: datetime
    expires_at: datetime

class FeedStory(Story):
    vendor: VendorSummary

class StoryCreated(CamelModel):
    message: str
    story: Story
