from typing import Any, Dict, Generic, Sequence, Type, TypeVar

from sqlalchemy import delete, update
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import SQLModel, Session

# Type générique pour le modèle (Note, ...)
ModelT = TypeVar("ModelT", bound=SQLModel)

class BaseRepository(Generic[ModelT]):
    """
    Repository de base pour les opérations CRUD standards.

    👉 Ne contient aucune logique métier.
    👉 Gère la persistance générique : create, update/delete par clause WHERE.
    👉 Les repositories concrets définissent `model = MaClasseSQLModel`.
    """

    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    # ---------- CREATE ----------

    def create(self, *, commit: bool = True, **fields) -> ModelT:
        """
        Crée et persiste un nouvel enregistrement.
        commit=False permet d'orchestrer une transaction globale au niveau service.
        """
        entity = self.model(**fields)
        self.session.add(entity)
        if commit:
            self.session.commit()
            self.session.refresh(entity)
        else:
            # flush pour obtenir l'ID sans commit
            self.session.flush()
        return entity

    # ---------- UPDATE ----------

    def update_where(
        self,
        where: Sequence[ColumnElement],
        values: Dict[str, Any],
        *,
        commit: bool = True,
    ) -> int:
        """
        Met à jour toutes les lignes qui satisfont `where` et retourne leur nombre.
        Aucune ligne touchée n'est pas une erreur.
        """
        statement = (
            update(self.model)
            .where(*where)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(statement)
        if commit:
            self.session.commit()
        return result.rowcount

    # ---------- DELETE ----------

    def delete_where(self, where: Sequence[ColumnElement], *, commit: bool = True) -> int:
        """Supprime toutes les lignes qui satisfont `where` et retourne leur nombre."""
        statement = delete(self.model).where(*where).execution_options(synchronize_session=False)
        result = self.session.exec(statement)
        if commit:
            self.session.commit()
        return result.rowcount
