from __future__ import annotations

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ewm.api.v1.schemas.users import NewUser, UserOut
from ewm.models import User
from ewm.services.error_codes import ErrorCode
from ewm.services.exceptions import ConflictError, NotFoundError

logger = structlog.get_logger()


def list_users(db: Session, ids: list[int] | None, offset: int, size: int) -> list[UserOut]:
    if ids:
        # Keep the caller's order and drop ids that do not exist
        wanted = list(dict.fromkeys(ids))
        by_id = {u.id: u for u in db.scalars(select(User).where(User.id.in_(wanted))).all()}
        return [UserOut.model_validate(by_id[i]) for i in wanted if i in by_id]

    users = db.scalars(select(User).order_by(User.id).offset(offset).limit(size)).all()
    return [UserOut.model_validate(u) for u in users]


def create_user(db: Session, payload: NewUser) -> UserOut:
    email = str(payload.email)
    taken = db.scalar(select(User.id).where(func.lower(User.email) == email.lower()).limit(1))
    if taken is not None:
        raise ConflictError(ErrorCode.EMAIL_ALREADY_EXISTS.value, f"email already exists: {email}")

    user = User(name=payload.name, email=email)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.EMAIL_ALREADY_EXISTS.value, f"email already exists: {email}") from exc
    db.refresh(user)

    logger.info("user_created", user_id=user.id)
    return UserOut.model_validate(user)


def delete_user(db: Session, user_id: int) -> None:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError(ErrorCode.USER_NOT_FOUND.value, f"user {user_id} not found")

    db.delete(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(
            ErrorCode.INTEGRITY_VIOLATION.value, "user is still referenced by events or requests"
        ) from exc
    logger.info("user_deleted", user_id=user_id)
