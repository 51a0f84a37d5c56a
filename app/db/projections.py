"""
➡️ But : Traduire les noms de colonnes demandés par l'appelant en expressions SQL.

Seuls les noms de NoteColumn sont acceptés (liste blanche, construite une fois au démarrage).
Un nom inconnu lève UnknownColumnError : rien de ce que l'appelant écrit n'est collé tel quel dans le SQL.

Trois alias servent la vue "live folder" : _id, name, icon_package.
"""

from enum import Enum
from typing import Dict, List, Optional, Sequence

from sqlalchemy.sql.elements import ColumnElement

from app.db.models.notes import Note
from app.domain.errors import InvalidArgumentError, UnknownColumnError


class NoteColumn(str, Enum):
    ID = "id"
    TITLE = "title"
    BODY = "body"
    CREATED_AT = "created_at"
    MODIFIED_AT = "modified_at"
    CATEGORY = "category"
    # alias live folder
    LIVE_ID = "_id"
    LIVE_NAME = "name"
    LIVE_ICON = "icon_package"


_c = Note.__table__.c

# colonne logique -> colonne physique (sans alias), utilisé pour le tri
SOURCE_COLUMNS: Dict[NoteColumn, ColumnElement] = {
    NoteColumn.ID: _c.id,
    NoteColumn.TITLE: _c.title,
    NoteColumn.BODY: _c.body,
    NoteColumn.CREATED_AT: _c.created_at,
    NoteColumn.MODIFIED_AT: _c.modified_at,
    NoteColumn.CATEGORY: _c.category,
    NoteColumn.LIVE_ID: _c.id,
    NoteColumn.LIVE_NAME: _c.title,
    NoteColumn.LIVE_ICON: _c.category,
}

# colonne logique -> expression projetée
PROJECTION_MAP: Dict[NoteColumn, ColumnElement] = {
    column: (source if source.name == column.value else source.label(column.value))
    for column, source in SOURCE_COLUMNS.items()
}

DEFAULT_PROJECTION = (
    NoteColumn.ID,
    NoteColumn.TITLE,
    NoteColumn.BODY,
    NoteColumn.CREATED_AT,
    NoteColumn.MODIFIED_AT,
    NoteColumn.CATEGORY,
)

# colonnes qu'un appelant peut fournir à insert/update
WRITABLE_COLUMNS = frozenset({"title", "body", "created_at", "modified_at", "category"})


def resolve_column(name) -> NoteColumn:
    try:
        return NoteColumn(name)
    except ValueError:
        raise UnknownColumnError(f"Invalid column {name!r}") from None


def resolve_projection(names: Optional[Sequence[str]]) -> List[ColumnElement]:
    """Noms demandés -> expressions (ordre conservé, doublons ignorés). Vide/None = colonnes de base."""
    if isinstance(names, str):
        raise InvalidArgumentError("projection must be a sequence of column names")
    if not names:
        names = DEFAULT_PROJECTION

    columns: List[NoteColumn] = []
    for name in names:
        column = resolve_column(name)
        if column not in columns:
            columns.append(column)
    return [PROJECTION_MAP[column] for column in columns]


def resolve_sort_order(sort_order: str) -> List[ColumnElement]:
    """
    "modified_at DESC, title" -> [modified_at.desc(), title.asc()]
    Chaque terme = une colonne de la liste blanche + ASC/DESC optionnel.
    """
    clauses: List[ColumnElement] = []
    for term in sort_order.split(","):
        parts = term.split()
        if not parts:
            raise InvalidArgumentError(f"Invalid sort order {sort_order!r}")
        source = SOURCE_COLUMNS[resolve_column(parts[0])]
        if len(parts) > 2:
            raise InvalidArgumentError(f"Invalid sort order {sort_order!r}")

        direction = parts[1].upper() if len(parts) == 2 else "ASC"
        if direction == "ASC":
            clauses.append(source.asc())
        elif direction == "DESC":
            clauses.append(source.desc())
        else:
            raise InvalidArgumentError(f"Invalid sort direction {parts[1]!r}")
    return clauses
