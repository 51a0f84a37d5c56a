"""
➡️ But : Encapsuler toutes les opérations de base de données sur la table notes.

NoteRepository : lecture projetée, recherche par mot-clé, insertion, mise à jour et suppression par clause WHERE.

Ne contient aucune logique métier (valeurs par défaut, notifications...) : c'est le rôle du NoteStore.

🔹 Avantages :

Réutilisable (le service n'a pas à savoir comment la DB fonctionne).

Testable indépendamment.
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.sql.elements import ColumnElement

from app.db.models.notes import Note
from app.db.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    model = Note

    # ---------- CLAUSES ----------

    @staticmethod
    def id_clause(note_id: int) -> ColumnElement:
        return Note.id == note_id

    @staticmethod
    def keyword_clause(keyword: str) -> ColumnElement:
        """title LIKE %kw% OR body LIKE %kw% (LIKE SQLite : insensible à la casse en ASCII)."""
        like = f"%{keyword}%"
        return or_(Note.title.like(like), Note.body.like(like))

    # ---------- READ ----------

    def select_rows(
        self,
        columns: Sequence[ColumnElement],
        *,
        where: Sequence[ColumnElement] = (),
        order_by: Sequence[ColumnElement] = (),
    ) -> tuple[List[str], List[Dict[str, Any]]]:
        """
        Projection SQL : retourne (noms des colonnes, lignes sous forme de dict).
        """
        statement = select(*columns).select_from(Note).where(*where).order_by(*order_by)
        result = self.session.exec(statement)
        keys = list(result.keys())
        rows = [dict(row) for row in result.mappings().all()]
        return keys, rows

    def get_fields(self, note_id: int) -> Optional[Dict[str, Any]]:
        """Une note sous forme de dict (lecture sans passer par l'identity map)."""
        _, rows = self.select_rows(
            [Note.id, Note.title, Note.body, Note.created_at, Note.modified_at, Note.category],
            where=[self.id_clause(note_id)],
        )
        return rows[0] if rows else None
