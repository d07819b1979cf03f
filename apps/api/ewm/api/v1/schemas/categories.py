from __future__ import annotations

from pydantic import Field

from ewm.api.v1.schemas.common import NonBlankStr, SchemaBase


class NewCategory(SchemaBase):
    name: NonBlankStr = Field(min_length=1, max_length=50)
