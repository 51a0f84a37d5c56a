"""
➡️ But : Lier une expression de filtre fournie par l'appelant à ses arguments.

L'appelant écrit un prédicat SQL avec des '?' positionnels :

    bind_selection("category = ? AND title LIKE ?", ["1", "%cat%"])

Les '?' hors chaînes littérales deviennent des paramètres nommés (:arg0, :arg1...) d'un text() SQLAlchemy.
Les valeurs ne sont jamais concaténées au SQL.
Les autres formes de paramètres SQLite (?1, :nom, @nom, $nom) sont refusées.
"""

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.sql.elements import TextClause

from app.domain.errors import InvalidFilterError


def _is_identifier_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _rewrite_placeholders(expression: str) -> Tuple[str, int]:
    out: List[str] = []
    quote: Optional[str] = None
    count = 0
    for index, char in enumerate(expression):
        following = expression[index + 1: index + 2]
        if quote:
            if char == quote:
                quote = None
                out.append(char)
            elif char == ":" and _is_identifier_char(following):
                # sinon text() y verrait un paramètre nommé
                out.append("\\:")
            else:
                out.append(char)
        elif char in ("'", '"'):
            quote = char
            out.append(char)
        elif char in ":@$" and _is_identifier_char(following):
            raise InvalidFilterError(
                f"Only positional '?' parameters are supported in filter {expression!r}"
            )
        elif char == "?" and following.isdigit():
            raise InvalidFilterError(
                f"Numbered parameters are not supported in filter {expression!r}"
            )
        elif char == "?":
            out.append(f" :arg{count}")
            count += 1
        else:
            out.append(char)
    if quote:
        raise InvalidFilterError(f"Unterminated string literal in filter {expression!r}")
    return "".join(out), count


def bind_selection(expression: str, args: Optional[Sequence] = None) -> TextClause:
    """Retourne le filtre sous forme de text() parenthésé, paramètres liés."""
    if not expression or not expression.strip():
        raise InvalidFilterError("Empty filter expression")

    rewritten, count = _rewrite_placeholders(expression)
    args = list(args or [])
    if count != len(args):
        raise InvalidFilterError(
            f"Filter has {count} parameters but {len(args)} arguments were given"
        )

    clause = text(f"({rewritten})")
    if count:
        clause = clause.bindparams(**{f"arg{index}": value for index, value in enumerate(args)})
    return clause


# messages SQLite qui désignent le filtre de l'appelant (et non la base elle-même)
_FILTER_ERROR_MARKERS = (
    "syntax error",
    "no such column",
    "no such function",
    "ambiguous column",
    "unrecognized token",
    "incomplete input",
    "wrong number of arguments",
    "misuse of aggregate",
    "incorrect number of bindings",
)


def is_filter_error(error: DBAPIError) -> bool:
    """True si l'erreur vient de l'expression de filtre ; False pour "database is locked", I/O..."""
    message = str(error.orig).lower()
    return any(marker in message for marker in _FILTER_ERROR_MARKERS)
