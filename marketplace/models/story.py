from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timedelta
from marketplace.core.config import settings
from marketplace.db.session import Base

def default_expiry() -> datetime:
    return datetime.utcnow() + timedelta(hours=settings.STORY_TTL_HOURS)

class VendorStory(Base):
    __tablename__ = "vendor_stories"

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    views = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    expires_at = Column(DateTime, default=default_expiry, nullable=False, index=True)
    is_active = Column(Boolean, default=True)

    vendor = relationship("Vendor", back_populates="stories")
