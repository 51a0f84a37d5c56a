from typing import Optional

from sqlmodel import Field

from app.db.models.base import BaseModelDB
from app.domain.categories import Category


class Note(BaseModelDB, table=True):
    """Une note : la seule table de la base (schéma créé par app.db.migrations)."""

    __tablename__ = "notes"
    __table_args__ = {"sqlite_autoincrement": True}

    title: Optional[str] = Field(default=None)
    body: Optional[str] = Field(default=None)
    category: Optional[int] = Field(default=int(Category.NONE))
