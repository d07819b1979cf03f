from __future__ import annotations

from pydantic import EmailStr, Field

from ewm.api.v1.schemas.common import NonBlankStr, SchemaBase


class NewUser(SchemaBase):
    name: NonBlankStr = Field(min_length=2, max_length=250)
    email: EmailStr = Field(min_length=6, max_length=254)


class UserOut(SchemaBase):
    id: int
    name: str
    email: str
