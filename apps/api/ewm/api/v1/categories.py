from __future__ import annotations

from fastapi import APIRouter, Response

from ewm.api.deps import DBSession, Offset, Size
from ewm.api.v1.schemas.categories import NewCategory
from ewm.api.v1.schemas.common import CategoryOut
from ewm.services import categories_service

admin_router = APIRouter(prefix="/admin/categories", tags=["admin"])
router = APIRouter(prefix="/categories", tags=["categories"])


@admin_router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: NewCategory, db: DBSession):
    return categories_service.create_category(db, payload)


@admin_router.patch("/{category_id}", response_model=CategoryOut)
def rename_category(category_id: int, payload: NewCategory, db: DBSession):
    return categories_service.rename_category(db, category_id, payload)


@admin_router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: DBSession):
    categories_service.delete_category(db, category_id)
    return Response(status_code=204)


@router.get("", response_model=list[CategoryOut])
def list_categories(db: DBSession, offset: Offset = 0, size: Size = 10):
    return categories_service.list_categories(db, offset, size)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: DBSession):
    return categories_service.get_category(db, category_id)
