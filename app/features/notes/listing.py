from datetime import datetime, tzinfo
from typing import Any, Dict, List, Optional

from app.domain.addresses import AddressLike
from app.features.notes.cursors import NoteCursor
from app.features.notes.schemas import NoteListItemOut
from app.features.notes.services import NoteStore

LIST_PROJECTION = ("id", "title", "modified_at", "category")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


class NotesListing:
    """
    Etat d'une liste de notes : le mot-clé de recherche courant et le curseur ouvert.
    refresh() relit la liste ; is_stale passe à True dès qu'une note change.
    """

    def __init__(self, store: NoteStore, address: Optional[AddressLike] = None, tz: Optional[tzinfo] = None):
        self.store = store
        self.address = store.address(address) if address is not None else store.collection_address
        self.tz = tz  # None = heure locale
        self.current_filter: Optional[str] = None
        self.cursor: Optional[NoteCursor] = None

    @property
    def is_stale(self) -> bool:
        return self.cursor is None or self.cursor.is_stale

    def set_filter(self, keyword: Optional[str]) -> List[NoteListItemOut]:
        """Un mot-clé vide ou None revient à la liste complète."""
        self.current_filter = keyword or None
        return self.refresh()

    def refresh(self) -> List[NoteListItemOut]:
        self.close()
        if self.current_filter:
            self.cursor = self.store.search(self.current_filter, LIST_PROJECTION, address=self.address)
        else:
            self.cursor = self.store.query(self.address, LIST_PROJECTION)
        return [self.to_item(row) for row in self.cursor]

    def format_timestamp(self, millis: Optional[int]) -> str:
        if millis is None:
            return ""
        return datetime.fromtimestamp(millis / 1000, tz=self.tz).strftime(TIMESTAMP_FORMAT)

    def to_item(self, row: Dict[str, Any]) -> NoteListItemOut:
        return NoteListItemOut(
            id=row["id"],
            title=row["title"],
            modified=self.format_timestamp(row["modified_at"]),
            category=row["category"],
            category_label=f"[{self.store.category_name(row['category'])}]",
        )

    def close(self) -> None:
        if self.cursor is not None:
            self.cursor.close()
            self.cursor = None
