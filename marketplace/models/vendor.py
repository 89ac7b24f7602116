from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from marketplace.db.session import Base

class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    name = Column(String, index=True, nullable=False)
    description = Column(String)
    banner_url = Column(String)
    rating = Column(Float, default=0.0)
    total_sales = Column(Integer, default=0)
    # Denormalized count of VendorFollower rows
    followers = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="vendor")
    products = relationship("Product", back_populates="vendor")
    stories = relationship("VendorStory", back_populates="vendor", order_by="VendorStory.created_at.desc()")
    follower_links = relationship("VendorFollower", back_populates="vendor", cascade="all, delete-orphan")

    @property
    def avatar(self):
        return self.user.avatar_url if self.user else None

    @property
    def verified(self) -> bool:
        return bool(self.user and self.user.verified)

class VendorFollower(Base):
    __tablename__ = "vendor_followers"
    __table_args__ = (
        UniqueConstraint("user_id", "vendor_id", name="uq_vendor_followers_user_vendor"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User")
    vendor = relationship("Vendor", back_populates="follower_links")
