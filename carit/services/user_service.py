# carit/services/user_service.py
"""
User document store.
Every write to a users row goes through modify_user(), which applies the change under
the row's optimistic lock (User.version_id) and re-applies it on a stale write.
Used by the users router, flowchart_service and garage_service.
"""

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from carit.config import settings
from carit.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from carit.models.user import User
from carit.utils.logger import get_logger

logger = get_logger(__name__)

USER_CREATED = "User created"
USER_UPDATED = "User updated"
USER_EXISTS = "User already exists"

# Fields a client may change through update_user()
EDITABLE_FIELDS = {"name", "email", "attitude", "crashOut", "experienceLevel"}
PROFILE_FIELDS = ("name", "email", "experienceLevel")


def user_defaults(name: str, email: str) -> dict:
    """Field → value for a brand-new user. Order is the backfill order."""
    return {
        "name": name,
        "email": email,
        "flowcharts": [],
        "attitude": "",
        "crashOut": 0,
        "experienceLevel": settings.DEFAULT_EXPERIENCE_LEVEL,
    }


def is_unset(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def get_user(db: Session, user_id: str) -> Optional[User]:
    """Return the user row, or None if it does not exist."""
    if not user_id:
        raise InvalidArgumentError()
    return db.get(User, user_id)


def require_user(db: Session, user_id: str) -> User:
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def modify_user(db: Session, user_id: str, mutate: Callable[[User], object]):
    """
    Load the user, apply mutate(user) and commit.
    A concurrent writer makes the commit fail with StaleDataError; the session is then
    rolled back and mutate() runs again on the fresh row, up to WRITE_CONFLICT_RETRIES times.
    Returns whatever mutate() returned on the attempt that committed.
    """
    for attempt in range(settings.WRITE_CONFLICT_RETRIES + 1):
        user = require_user(db, user_id)
        result = mutate(user)
        if db.is_modified(user):
            user.updated_at = datetime.utcnow()
        try:
            db.commit()
            return result
        except StaleDataError:
            db.rollback()
            logger.warning(f"[Users] Write conflict on {user_id} (attempt {attempt + 1}), reloading")

    raise ConflictError(f"User {user_id} was modified concurrently, try again")


def create_or_backfill(db: Session, user_id: str, name: str, email: str) -> str:
    """
    Create the user on first contact. For an existing user, fill every default field
    that is missing or blank. Returns USER_CREATED, USER_UPDATED or USER_EXISTS.
    """
    if not user_id or not name or not email:
        logger.info("[Users] create_or_backfill: missing required fields")
        raise InvalidArgumentError()

    defaults = user_defaults(name, email)

    if get_user(db, user_id) is None:
        now = datetime.utcnow()
        user = User(id=user_id, created_at=now, updated_at=now)
        for field, value in defaults.items():
            user.set_field(field, value)
        db.add(user)
        try:
            db.commit()
            logger.info(f"[Users] Created {user_id}")
            return USER_CREATED
        except IntegrityError:
            # Another request created the row first; fall through to the backfill
            db.rollback()

    def backfill(user: User) -> list:
        filled = []
        for field, value in defaults.items():
            current = user.get_field(field)
            if is_unset(current) and current != value:
                user.set_field(field, value)
                filled.append(field)
        return filled

    filled = modify_user(db, user_id, backfill)
    if filled:
        logger.info(f"[Users] Backfilled {user_id}: {', '.join(filled)}")
        return USER_UPDATED

    logger.debug(f"[Users] {user_id} already exists")
    return USER_EXISTS


def update_user(db: Session, user_id: str, fields: dict) -> User:
    """Replace the given top-level fields (last write wins). Raises NotFoundError for unknown users."""
    if not user_id or not fields:
        raise InvalidArgumentError()
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise InvalidArgumentError(f"Unknown user fields: {', '.join(sorted(unknown))}")

    def apply(user: User) -> User:
        for field, value in fields.items():
            user.set_field(field, value)
        return user

    user = modify_user(db, user_id, apply)
    logger.info(f"[Users] Updated {user_id}: {', '.join(sorted(fields))}")
    return user


def get_profile(db: Session, user_id: str) -> dict:
    user = require_user(db, user_id)
    return {field: user.get_field(field) for field in PROFILE_FIELDS}
