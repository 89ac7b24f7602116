from typing import Optional
from marketplace.schemas.base import CamelModel

class Category(CamelModel):
    id: int
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
