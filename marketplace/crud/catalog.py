from typing import List, Optional
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.sql import or_
from marketplace.core.config import settings
from marketplace.core.errors import NotFound
from marketplace.models.category import Category
from marketplace.models.product import Product
from marketplace.models.vendor import Vendor

PRODUCT_NOT_FOUND = "Product not found"
MAX_PRODUCT_LIMIT = 100

def _product_query(db: Session):
    return db.query(Product).options(
        joinedload(Product.vendor).joinedload(Vendor.user),
        joinedload(Product.category),
        selectinload(Product.product_images),
        selectinload(Product.product_tags),
    )

def get_active_product(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(
        Product.id == product_id,
        Product.is_active.is_(True)
    ).first()

def list_products(
    db: Session,
    *,
    category: Optional[str] = None,
    search: Optional[str] = None,
    trending: bool = False,
    limit: int = settings.PRODUCT_LIST_LIMIT
) -> List[Product]:
    """Active products, newest first, with optional filtering"""
    query = _product_query(db).filter(Product.is_active.is_(True))

    if category:
        query = query.join(Category, Product.category_id == Category.id).filter(Category.name == category)
    if trending:
        query = query.filter(Product.is_trending.is_(True))
    if search:
        query = query.filter(
            or_(
                Product.title.ilike(f"%{search}%"),
                Product.description.ilike(f"%{search}%")
            )
        )

    limit = max(1, min(limit, MAX_PRODUCT_LIMIT))
    return query.order_by(Product.created_at.desc(), Product.id.desc()).limit(limit).all()

def get_product(db: Session, product_id: int) -> Product:
    product = _product_query(db).filter(
        Product.id == product_id,
        Product.is_active.is_(True)
    ).first()
    if not product:
        raise NotFound(PRODUCT_NOT_FOUND)
    return product

def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name).all()
