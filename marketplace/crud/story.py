import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from marketplace.core.config import settings
from marketplace.core.errors import Forbidden, ValidationError
from marketplace.crud.vendor import get_for_user
from marketplace.models.story import VendorStory
from marketplace.models.vendor import Vendor

logger = logging.getLogger(__name__)

# Largest value a 64-bit INTEGER primary key can hold
MAX_STORY_ID = 2 ** 63 - 1

def create(db: Session, *, user_id: int, content: Optional[str], image_url: Optional[str] = None) -> VendorStory:
    if not content or not content.strip():
        raise ValidationError("Content is required")

    vendor = get_for_user(db, user_id)
    if not vendor:
        raise Forbidden("Only vendors can create stories")

    story = VendorStory(vendor_id=vendor.id, content=content.strip(), image_url=image_url)
    db.add(story)
    db.commit()
    db.refresh(story)
    logger.info("Vendor %s posted story %s", vendor.id, story.id)
    return story

def feed(db: Session, limit: int = settings.STORY_FEED_LIMIT) -> List[VendorStory]:
    """Active, unexpired stories, newest first."""
    return (
        db.query(VendorStory)
        .options(joinedload(VendorStory.vendor).joinedload(Vendor.user))
        .filter(
            VendorStory.is_active.is_(True),
            VendorStory.expires_at > datetime.utcnow()
        )
        .order_by(VendorStory.created_at.desc(), VendorStory.id.desc())
        .limit(limit)
        .all()
    )

def increment_view(db: Session, story_id: int) -> int:
    """Bump the view counter. Unknown ids are a no-op."""
    if not 0 < story_id <= MAX_STORY_ID:
        return 0
    affected = db.query(VendorStory).filter(VendorStory.id == story_id).update(
        {VendorStory.views: VendorStory.views + 1},
        synchronize_session=False
    )
    db.commit()
    return affected
