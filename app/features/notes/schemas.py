from typing import Optional

from pydantic import BaseModel, Field as PydField


class NoteValues(BaseModel):
    """
    Valeurs acceptées par insert/update.
    Seuls les champs fournis comptent (model_dump(exclude_unset=True)) :
    un champ absent garde sa valeur (update) ou reçoit sa valeur par défaut (insert).
    Les horodatages ne sont jamais NULL : un None explicite est refusé.
    """

    title: Optional[str] = None
    body: Optional[str] = None
    created_at: int = PydField(None, ge=0)
    modified_at: int = PydField(None, ge=0)
    category: Optional[int] = None

    model_config = {"extra": "forbid", "strict": True}


class NoteOut(BaseModel):
    id: int
    title: Optional[str]
    body: Optional[str]
    created_at: Optional[int] = None
    modified_at: Optional[int] = None
    category: Optional[int] = 0

    model_config = {"from_attributes": True}


class NoteListItemOut(BaseModel):
    id: int
    title: Optional[str]
    modified: str           # "2024-05-01 14:30"
    category: Optional[int]
    category_label: str     # "[Work]"
