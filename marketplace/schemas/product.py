from typing import List, Optional
from datetime import datetime
from marketplace.schemas.base import CamelModel
from marketplace.schemas.vendor import VendorSummary

class ProductSummary(CamelModel):
    id: int
    title: str
    price: float
    original_price: Optional[float] = None
    stock: int = 0
    images: List[str] = []

class Product(ProductSummary):
    description: Optional[str] = None
    category_name: str
    vendor_id: int
    vendor: Optional[VendorSummary] = None
    rating: float = 0.0
    review_count: int = 0
    tags: List[str] = []
    is_trending: bool = False
    created_at: Optional[datetime] = None
