from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ewm.models.base import Base, IdPrimaryKeyMixin


class User(Base, IdPrimaryKeyMixin):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(250), nullable=False)
    email: Mapped[str] = mapped_column(String(254), unique=True, nullable=False)
