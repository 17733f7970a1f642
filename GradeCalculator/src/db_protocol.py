"""
Datenbank-Interfaces (Protocols) für Repository- und Service-Schicht.

Zweck:
    Entkoppelt die Anwendung von der konkreten Datenbank-Implementierung (hier: SQLite),
    indem Repositories/Services nur gegen kleine, stabile Interfaces typisieren.

Inhalt:
    - CursorProtocol: minimales Cursor-Verhalten (fetchone/fetchall/Iteration/lastrowid/rowcount)
    - DatabaseProtocol: minimale DB-API (execute/executescript + Transaktionen)

Hinweise:
    Die konkrete Implementierung des Interfaces erfolgt in `db.py` (SQLiteDatabase).
"""

from __future__ import annotations

from typing import Any, Iterator, Protocol, Sequence


class CursorProtocol(Protocol):
    """
    Cursor-Interface, das von Repositories benötigt wird.

    Zweck:
        Beschreibt nur die Cursor-Funktionen, die im Projekt tatsächlich verwendet werden:
        Einzelabfragen (`fetchone`), zeilenweise Iteration für `get_all()` sowie
        `lastrowid`/`rowcount` nach INSERT/UPDATE/DELETE.
    """

    # sqlite3.Cursor stellt `lastrowid` bereit; bei UPDATE/DELETE kann dieser Wert 0/None sein.
    lastrowid: Any
    rowcount: int

    def fetchone(self) -> Any: ...
    def fetchall(self) -> list[Any]: ...
    def __iter__(self) -> Iterator[Any]: ...


class DatabaseProtocol(Protocol):
    """
    Minimales Datenbank-Interface für Repositories/Services.

    Zweck:
        Vereinheitlicht den Zugriff auf die Persistenz (execute/commit/rollback/close),
        ohne die Anwendung an `sqlite3` zu koppeln.
    """

    def execute(self, sql: str, params: Sequence[Any] = ()) -> CursorProtocol: ...
    def executescript(self, sql_script: str) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...
    def close(self) -> None: ...
