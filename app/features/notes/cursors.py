from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from app.domain.addresses import NoteAddress
from app.features.notes.notifications import ChangeNotifier, Observer

Rows = Tuple[List[str], List[Dict[str, Any]]]


class NoteCursor:
    """
    Résultat "vivant" d'une requête.

    Le curseur est inscrit auprès du notifier sur l'adresse interrogée :
    à chaque modification il passe à is_stale=True et relaie l'événement à ses propres observers.
    requery() relance la même requête ; close() le désinscrit.
    """

    def __init__(
        self,
        address: NoteAddress,
        columns: List[str],
        rows: List[Dict[str, Any]],
        *,
        notifier: ChangeNotifier,
        fetch: Callable[[], Rows],
    ):
        self.address = address
        self.columns = columns
        self.rows = rows
        self.is_stale = False
        self.closed = False
        self._notifier = notifier
        self._fetch = fetch
        self._observers: List[Observer] = []
        notifier.register(address, self._on_change)

    # ---------- Lecture ----------

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None

    # ---------- Notifications ----------

    def register_observer(self, observer: Observer) -> None:
        self._observers.append(observer)

    def unregister_observer(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _on_change(self, address: NoteAddress) -> None:
        self.is_stale = True
        for observer in list(self._observers):
            observer(address)

    def requery(self) -> "NoteCursor":
        if self.closed:
            raise RuntimeError("Cursor is closed")
        self.columns, self.rows = self._fetch()
        self.is_stale = False
        return self

    def close(self) -> None:
        if not self.closed:
            self._notifier.unregister(self._on_change)
            self._observers.clear()
            self.closed = True

    def __enter__(self) -> "NoteCursor":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<NoteCursor {self.address} rows={len(self.rows)}{' stale' if self.is_stale else ''}>"
