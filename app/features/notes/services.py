import logging
from fnmatch import fnmatchcase
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, ProgrammingError, SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from app.core.config import Settings, settings as default_settings
from app.db.filters import bind_selection, is_filter_error
from app.db.models.base import now_ms
from app.db.models.notes import Note
from app.db.projections import WRITABLE_COLUMNS, resolve_projection, resolve_sort_order
from app.db.repositories.notes import NoteRepository
from app.db.session import get_session
from app.domain.addresses import AddressKind, AddressLike, NoteAddress, parse_address
from app.domain.categories import Category, category_display_name, check_category
from app.domain.errors import (
    InvalidAddressError,
    InvalidArgumentError,
    InvalidFilterError,
    UnknownColumnError,
    WriteFailureError,
)
from app.features.notes.cursors import NoteCursor
from app.features.notes.notifications import ChangeNotifier, Observer
from app.features.notes.schemas import NoteOut, NoteValues

LOGGER = logging.getLogger(__name__)

TEXT_PLAIN = "text/plain"

ValuesLike = Union[NoteValues, Mapping[str, Any], None]


class NoteStore:
    """
    Point d'entrée unique vers la table notes.

    - query/search : lecture projetée (liste blanche de colonnes), curseur abonné aux changements.
    - insert       : valeurs par défaut (horodatages, titre, corps, catégorie), retourne l'id.
    - update/delete: par adresse (collection ou note) + filtre optionnel, retourne le nombre de lignes.
    - Chaque mutation notifie l'adresse concernée, même quand aucune ligne n'est touchée.

    Le store ne garde aucun état de session : un seul Engine partagé, une Session courte par appel.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        settings: Settings = default_settings,
        notifier: Optional[ChangeNotifier] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.engine = engine
        self.settings = settings
        self.notifier = notifier or ChangeNotifier()
        self.clock = clock

    # --------------- Helpers ---------------

    def address(self, value: AddressLike) -> NoteAddress:
        return parse_address(value, self.settings.AUTHORITY)

    @property
    def collection_address(self) -> NoteAddress:
        return NoteAddress.collection(self.settings.AUTHORITY)

    def item_address(self, note_id: int) -> NoteAddress:
        return self.collection_address.with_id(note_id)

    def _clean_values(self, values: ValuesLike) -> Dict[str, Any]:
        """Valeurs fournies par l'appelant -> dict des seuls champs présents, validés."""
        if values is None:
            return {}
        if isinstance(values, NoteValues):
            data = values.model_dump(exclude_unset=True)
        elif isinstance(values, Mapping):
            for key in values:
                if key == "id":
                    raise InvalidArgumentError("id is assigned by the store and cannot be written")
                if key not in WRITABLE_COLUMNS:
                    raise UnknownColumnError(f"Invalid column {key!r}")
            try:
                data = NoteValues.model_validate(dict(values)).model_dump(exclude_unset=True)
            except ValidationError as e:
                raise InvalidArgumentError(str(e)) from e
        else:
            raise InvalidArgumentError(f"Unsupported values {values!r}")

        if "category" in data:
            if self.settings.STRICT_CATEGORIES:
                data["category"] = check_category(data["category"])
            elif data["category"] is not None:
                data["category"] = int(data["category"])
        return data

    @staticmethod
    def _filter_clauses(selection: Optional[str], selection_args: Optional[Sequence]) -> List[ColumnElement]:
        if selection:
            return [bind_selection(selection, selection_args)]
        if selection_args:
            raise InvalidFilterError("Filter arguments given without a filter expression")
        return []

    def _scope(self, address: NoteAddress) -> List[ColumnElement]:
        if address.is_item:
            return [NoteRepository.id_clause(address.note_id)]
        return []

    def _fetch(self, columns, where, order_by, *, has_filter: bool):
        try:
            with get_session(self.engine) as session:
                return NoteRepository(session).select_rows(columns, where=where, order_by=order_by)
        except (OperationalError, ProgrammingError) as e:
            if has_filter and is_filter_error(e):
                raise InvalidFilterError(f"Invalid filter: {e.orig}") from e
            raise

    def _open_cursor(self, address, columns, where, order_by, *, has_filter: bool) -> NoteCursor:
        def fetch():
            return self._fetch(columns, where, order_by, has_filter=has_filter)

        keys, rows = fetch()
        return NoteCursor(address, keys, rows, notifier=self.notifier, fetch=fetch)

    # --------------- Queries ---------------

    def query(
        self,
        address: AddressLike,
        projection: Optional[Sequence[str]] = None,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence] = None,
        sort_order: Optional[str] = None,
    ) -> NoteCursor:
        """
        Lecture projetée.

        Surcharge historique : si `selection` est fourni SANS `selection_args` (None),
        il est traité comme un mot-clé (title/body LIKE %mot%) et remplace le filtre.
        Pour un vrai prédicat, toujours passer selection_args (éventuellement []).
        """
        address = self.address(address)
        columns = resolve_projection(projection)
        order_by = resolve_sort_order(sort_order or self.settings.DEFAULT_SORT_ORDER)

        where = self._scope(address)
        if selection is not None and selection_args is None:
            where.append(NoteRepository.keyword_clause(selection))
        else:
            where.extend(self._filter_clauses(selection, selection_args))

        return self._open_cursor(address, columns, where, order_by, has_filter=bool(selection))

    def search(
        self,
        keyword: str,
        projection: Optional[Sequence[str]] = None,
        sort_order: Optional[str] = None,
        address: Optional[AddressLike] = None,
    ) -> NoteCursor:
        """Recherche par mot-clé dans title et body."""
        if keyword is None:
            raise InvalidArgumentError("keyword is required")
        address = self.address(address) if address is not None else self.collection_address
        columns = resolve_projection(projection)
        order_by = resolve_sort_order(sort_order or self.settings.DEFAULT_SORT_ORDER)
        where = self._scope(address) + [NoteRepository.keyword_clause(keyword)]
        return self._open_cursor(address, columns, where, order_by, has_filter=False)

    def get_note(self, address: AddressLike) -> Optional[NoteOut]:
        address = self.address(address)
        if not address.is_item:
            raise InvalidAddressError(f"Not a note address: {address}")
        with get_session(self.engine) as session:
            fields = NoteRepository(session).get_fields(address.note_id)
        return NoteOut(**fields) if fields else None

    def get_type(self, address: AddressLike) -> str:
        return self.address(address).mime_type

    def get_stream_types(self, address: AddressLike, mime_filter: str = "*/*") -> List[str]:
        """Une note peut être exportée en text/plain ; une collection, non."""
        if self.address(address).is_item and fnmatchcase(TEXT_PLAIN, mime_filter):
            return [TEXT_PLAIN]
        return []

    def export_text(self, address: AddressLike) -> str:
        """Titre, ligne vide, corps."""
        note = self.get_note(address)
        if note is None:
            raise LookupError(f"Unable to query {address}")
        return f"{note.title or ''}\n\n{note.body or ''}"

    def category_name(self, value) -> str:
        return category_display_name(
            value, self.settings.CATEGORY_NAMES, self.settings.UNKNOWN_CATEGORY_NAME
        )

    # --------------- Commands ---------------

    def insert(self, values: ValuesLike = None, address: Optional[AddressLike] = None) -> int:
        address = self.address(address) if address is not None else self.collection_address
        if address.kind is not AddressKind.COLLECTION:
            raise InvalidAddressError(f"Cannot insert at {address}")

        fields = self._clean_values(values)
        now = self.clock()
        fields.setdefault("created_at", now)
        fields.setdefault("modified_at", now)
        fields.setdefault("title", self.settings.TITLE_DEFAULT)
        fields.setdefault("body", self.settings.NOTE_DEFAULT)
        fields.setdefault("category", int(Category.NONE))

        if fields["modified_at"] < fields["created_at"]:
            raise InvalidArgumentError("modified_at cannot be earlier than created_at")

        try:
            with get_session(self.engine) as session:
                note = NoteRepository(session).create(**fields)
                note_id = note.id
        except SQLAlchemyError as e:
            LOGGER.error("Failed to insert row into %s: %s", address, e)
            raise WriteFailureError(f"Failed to insert row into {address}") from e
        if not note_id:
            raise WriteFailureError(f"Failed to insert row into {address}")

        LOGGER.debug("Inserted note %s", note_id)
        self.notifier.notify_change(address)
        return note_id

    def update(
        self,
        address: AddressLike,
        values: ValuesLike,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence] = None,
    ) -> int:
        address = self._mutation_address(address)
        fields = self._clean_values(values)
        if "created_at" in fields:
            raise InvalidArgumentError("created_at cannot be changed")

        modified = fields["modified_at"] if "modified_at" in fields else self.clock()
        # modified_at ne passe jamais sous created_at
        fields["modified_at"] = func.max(modified, func.coalesce(Note.created_at, modified))

        where = self._scope(address) + self._filter_clauses(selection, selection_args)
        count = self._write(
            lambda repo: repo.update_where(where, fields), address, has_filter=bool(selection)
        )
        self.notifier.notify_change(address)
        return count

    def delete(
        self,
        address: AddressLike,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence] = None,
    ) -> int:
        address = self._mutation_address(address)
        where = self._scope(address) + self._filter_clauses(selection, selection_args)
        count = self._write(lambda repo: repo.delete_where(where), address, has_filter=bool(selection))
        LOGGER.debug("Deleted %s note(s) at %s", count, address)
        self.notifier.notify_change(address)
        return count

    def _mutation_address(self, value: AddressLike) -> NoteAddress:
        address = self.address(value)
        if address.kind is AddressKind.LIVE_FOLDER:
            raise InvalidAddressError(f"Unknown address {address}")
        return address

    def _write(self, operation, address: NoteAddress, *, has_filter: bool) -> int:
        try:
            with get_session(self.engine) as session:
                return operation(NoteRepository(session))
        except (OperationalError, ProgrammingError) as e:
            if has_filter and is_filter_error(e):
                raise InvalidFilterError(f"Invalid filter: {e.orig}") from e
            LOGGER.error("Write failed at %s: %s", address, e)
            raise WriteFailureError(f"Write failed at {address}") from e
        except SQLAlchemyError as e:
            LOGGER.error("Write failed at %s: %s", address, e)
            raise WriteFailureError(f"Write failed at {address}") from e

    # --------------- Notifications ---------------

    def register_observer(
        self,
        address: AddressLike,
        observer: Observer,
        notify_for_descendants: bool = True,
    ) -> None:
        self.notifier.register(self.address(address), observer, notify_for_descendants)

    def unregister_observer(self, observer: Observer) -> bool:
        return self.notifier.unregister(observer)

    def notify_change(self, address: AddressLike) -> int:
        return self.notifier.notify_change(self.address(address))
