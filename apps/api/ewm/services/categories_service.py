from __future__ import annotations

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ewm.api.v1.schemas.categories import NewCategory
from ewm.api.v1.schemas.common import CategoryOut
from ewm.models import Category
from ewm.services.error_codes import ErrorCode
from ewm.services.events_service import count_events_by_category
from ewm.services.exceptions import ConflictError, NotFoundError

logger = structlog.get_logger()


def _get_category_or_404(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFoundError(
            ErrorCode.CATEGORY_NOT_FOUND.value, f"category {category_id} not found"
        )
    return category


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    stmt = select(Category.id).where(func.lower(Category.name) == name.strip().lower())
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    return db.scalar(stmt.limit(1)) is not None


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.CATEGORY_NAME_EXISTS.value, "category name already exists") from exc


def create_category(db: Session, payload: NewCategory) -> CategoryOut:
    if _name_taken(db, payload.name):
        raise ConflictError(ErrorCode.CATEGORY_NAME_EXISTS.value, "category name already exists")

    category = Category(name=payload.name.strip())
    db.add(category)
    _commit(db)
    db.refresh(category)

    logger.info("category_created", category_id=category.id, name=category.name)
    return CategoryOut.model_validate(category)


def rename_category(db: Session, category_id: int, payload: NewCategory) -> CategoryOut:
    category = _get_category_or_404(db, category_id)
    if _name_taken(db, payload.name, exclude_id=category.id):
        raise ConflictError(ErrorCode.CATEGORY_NAME_EXISTS.value, "category name already exists")

    category.name = payload.name.strip()
    db.add(category)
    _commit(db)
    db.refresh(category)

    logger.info("category_renamed", category_id=category.id, name=category.name)
    return CategoryOut.model_validate(category)


def delete_category(db: Session, category_id: int) -> None:
    category = _get_category_or_404(db, category_id)
    if count_events_by_category(db, category.id) > 0:
        raise ConflictError(
            ErrorCode.CATEGORY_IN_USE.value, "cannot delete a category with existing events"
        )

    db.delete(category)
    db.commit()
    logger.info("category_deleted", category_id=category_id)


def list_categories(db: Session, offset: int, size: int) -> list[CategoryOut]:
    categories = db.scalars(
        select(Category).order_by(Category.id).offset(offset).limit(size)
    ).all()
    return [CategoryOut.model_validate(c) for c in categories]


def get_category(db: Session, category_id: int) -> CategoryOut:
    return CategoryOut.model_validate(_get_category_or_404(db, category_id))
