import logging
from sqlalchemy import select
from sqlalchemy.orm import Session

from menuboard.models.core import AppRole, User
from menuboard.routers.users import create_user_account

logger = logging.getLogger("menuboard.bootstrap")


def ensure_admin(db: Session, email: str | None, password: str | None) -> User | None:
    """Seed the first admin account when the user table is still empty."""
    if not email or not password:
        return None
    if db.scalars(select(User)).first() is not None:
        return None
    u = create_user_account(db, email.strip().lower(), password, AppRole.ADMIN)
    logger.info("seeded admin account %s", u.email)
    return u
