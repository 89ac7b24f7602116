import logging
from sqlalchemy.orm import Session
from marketplace.core.config import settings
from marketplace.crud import user as crud_user
from marketplace.db.base import Base
from marketplace.db.session import engine

logger = logging.getLogger(__name__)

def init_db(db: Session) -> None:
    Base.metadata.create_all(bind=engine)

    # Bootstrap the first admin account
    if not (settings.FIRST_ADMIN_EMAIL and settings.FIRST_ADMIN_PASSWORD):
        return
    if crud_user.get_by_email(db, settings.FIRST_ADMIN_EMAIL):
        return
    crud_user.create_admin(
        db,
        email=settings.FIRST_ADMIN_EMAIL,
        password=settings.FIRST_ADMIN_PASSWORD
    )
    logger.info("Created admin account %s", settings.FIRST_ADMIN_EMAIL)
