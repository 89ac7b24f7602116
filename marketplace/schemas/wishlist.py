from datetime import datetime
from typing import Optional
from marketplace.schemas.base import CamelModel
from marketplace.schemas.product import Product

class WishlistToggle(CamelModel):
    product_id: int

class WishlistStatus(CamelModel):
    message: Optional[str] = None
    in_wishlist: bool

class WishlistProduct(Product):
    added_at: datetime
