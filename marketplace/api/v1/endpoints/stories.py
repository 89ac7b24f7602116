import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from marketplace.api import deps
from marketplace.core.errors import StoreError
from marketplace.crud import story as crud_story
from marketplace.models.user import User as UserModel
from marketplace.schemas.story import FeedStory, StoryCreate, StoryCreated

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("", response_model=StoryCreated, status_code=status.HTTP_201_CREATED)
async def create_story(
    story_in: StoryCreate,
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Post a story to the current user's storefront. Vendors only.
    """
    try:
        story = crud_story.create(
            db,
            user_id=current_user.id,
            content=story_in.content,
            image_url=story_in.image_url
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create story for user %s", current_user.id)
        raise StoreError("Failed to create story")

    return {"message": "Story created successfully", "story": story}

@router.get("/feed", response_model=List[FeedStory])
async def get_feed(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = deps.require_auth
):
    """
    Unexpired stories from all vendors, newest first.
    """
    return crud_story.feed(db)

@router.post("/{story_id}/view")
async def view_story(
    story_id: int,
    db: Session = Depends(deps.get_db)
):
    """
    Record a view. Unknown stories are ignored.
    """
    try:
        crud_story.increment_view(db, story_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to record view of story %s", story_id)
        raise StoreError("Failed to update views")
    return {"message": "View recorded"}
