from enum import IntEnum
from typing import Optional, Sequence

from app.domain.errors import InvalidCategoryError


class Category(IntEnum):
    NONE = 0
    WORK = 1
    PERSONAL = 2
    STUDY = 3


def is_valid_category(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return value in Category._value2member_map_


def check_category(value) -> int:
    """Retourne la valeur si elle fait partie de l'enum, sinon lève InvalidCategoryError."""
    if not is_valid_category(value):
        raise InvalidCategoryError(f"Unknown category {value!r}")
    return int(value)


def category_display_name(value, names: Sequence[str], unknown: str) -> str:
    """Nom affichable d'une catégorie ; `unknown` pour une valeur hors enum."""
    if not is_valid_category(value) or value >= len(names):
        return unknown
    return names[int(value)]


def category_from_name(name: str, names: Sequence[str]) -> Optional[Category]:
    """Retrouve une catégorie par son nom d'enum (WORK) ou son nom affiché ("Work")."""
    key = name.strip()
    if key.upper() in Category.__members__:
        return Category[key.upper()]
    for index, display in enumerate(names):
        if display.lower() == key.lower():
            return Category(index)
    return None
