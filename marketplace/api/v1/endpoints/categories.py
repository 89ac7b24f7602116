from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from marketplace.api import deps
from marketplace.api.deps import cache_response
from marketplace.crud import catalog as crud_catalog
from marketplace.schemas.category import Category

router = APIRouter()

@router.get("", response_model=List[Category])
@cache_response(key_prefix="categories")
async def get_categories(db: Session = Depends(deps.get_db)):
    """
    Retrieve all categories ordered by name.
    """
    return [Category.model_validate(c) for c in crud_catalog.list_categories(db)]
