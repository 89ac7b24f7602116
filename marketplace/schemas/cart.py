from typing import Optional
from pydantic import Field
from marketplace.schemas.base import CamelModel
from marketplace.schemas.product import ProductSummary

class CartItemCreate(CamelModel):
    product_id: int
    quantity: int = Field(default=1, gt=0)

class CartItemUpdate(CamelModel):
    # Zero or negative removes the item
    quantity: int

class CartItemRow(CamelModel):
    id: int
    product_id: int
    quantity: int

class CartItem(CamelModel):
    id: int
    quantity: int
    product: ProductSummary

class CartItemResponse(CamelModel):
    message: str
    item: Optional[CartItemRow] = None

class CartTotal(CamelModel):
    subtotal: float
    item_count: int
