from __future__ import annotations

from fastapi import APIRouter, Query, Response

from ewm.api.deps import DBSession, Offset, Size, split_csv_ints
from ewm.api.v1.schemas.users import NewUser, UserOut
from ewm.services import users_service

router = APIRouter(prefix="/admin/users", tags=["admin"])


@router.get("", response_model=list[UserOut])
def list_users(
    db: DBSession,
    ids: list[str] | None = Query(default=None),
    offset: Offset = 0,
    size: Size = 10,
):
    return users_service.list_users(db, split_csv_ints(ids, "ids"), offset, size)


@router.post("", response_model=UserOut, status_code=201)
def create_user(payload: NewUser, db: DBSession):
    return users_service.create_user(db, payload)


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: int, db: DBSession):
    users_service.delete_user(db, user_id)
    return Response(status_code=204)
