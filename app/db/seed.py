from pathlib import Path
from typing import Any, Dict, List

import yaml

from app.domain.categories import Category, category_from_name
from app.features.notes.services import NoteStore


# -----------------------------
# YAML loader
# -----------------------------
def load_seed_yaml(seed_path: str | Path) -> Dict[str, Any]:
    path = Path(seed_path)
    if not path.exists():
        raise FileNotFoundError(f"Seed YAML introuvable: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Le YAML de seed doit contenir un objet racine (mapping).")
    return data


# -----------------------------
# Helpers
# -----------------------------
def _resolve_category(value: Any, store: NoteStore) -> int:
    """Catégorie YAML : entier (1) ou nom ("Work" / "work" / "WORK")."""
    if value is None:
        return int(Category.NONE)
    if isinstance(value, int):
        return value
    category = category_from_name(str(value), store.settings.CATEGORY_NAMES)
    if category is None:
        raise ValueError(f"Catégorie inconnue dans le seed: {value!r}")
    return int(category)


def _note_values(item: Dict[str, Any], store: NoteStore) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key in ("title", "body", "created_at", "modified_at"):
        if key in item:
            values[key] = item[key]
    if "category" in item:
        values["category"] = _resolve_category(item["category"], store)
    return values


# -----------------------------
# Seed
# -----------------------------
def seed_notes(store: NoteStore, data: Dict[str, Any]) -> List[int]:
    """Insère chaque entrée de `notes:` et retourne les ids créés."""
    notes_yaml: List[Dict[str, Any]] = data.get("notes") or []
    if not isinstance(notes_yaml, list):
        raise ValueError("La clé 'notes' du seed doit être une liste.")

    ids: List[int] = []
    for item in notes_yaml:
        if not isinstance(item, dict):
            raise ValueError(f"Entrée de note invalide dans le seed: {item!r}")
        ids.append(store.insert(_note_values(item, store)))
    return ids


def seed_all(store: NoteStore, seed_path: str | Path) -> List[int]:
    return seed_notes(store, load_seed_yaml(seed_path))
