from __future__ import annotations

# -----------------------------------------------------------------------------
# Infrastructure: SQLite DB
# -----------------------------------------------------------------------------
# Enthält:
# - SQLiteDatabase: dünner Adapter um sqlite3.Connection (für DatabaseProtocol)
# - connect(): öffnet DB (Default-Pfad aus AppConfig)
# - create_schema(): legt Tabellen/Indizes an (optional reset_db für Demo/Test)
# - open_database(): Kontextmanager für die Lebensdauer der Verbindung
#
# Repositories typisieren gegen `DatabaseProtocol` (typing.Protocol), nicht gegen sqlite3.
# -----------------------------------------------------------------------------


"""SQLite-Infrastruktur des Notenrechners.

Zweck:
    Stellt die konkrete SQLite-Implementierung bereit, die von der Anwendung genutzt wird.
    Repositories und Services typisieren dabei gegen `DatabaseProtocol` (siehe `db_protocol.py`).

Inhalt:
    - SQLiteDatabase: Adapter um `sqlite3.Connection` passend zu `DatabaseProtocol`
    - connect(): Öffnet die Datenbank (Default-Pfad siehe `config.default_db_path`)
    - create_schema(): Legt die Tabellen `courses`, `categories`, `assignments` an
    - open_database(): Öffnet + initialisiert die DB und schließt sie am Ende des Blocks
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence

from GradeCalculator.src.config import default_db_path
from GradeCalculator.src.db_protocol import DatabaseProtocol
from GradeCalculator.src.errors import StorageError

__all__ = [
    "DatabaseProtocol",
    "SQLiteDatabase",
    "connect",
    "create_schema",
    "open_database",
]

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


class SQLiteDatabase:
    """
    SQLite-Adapter passend zu `DatabaseProtocol`.

    Zweck:
        Kapselt eine `sqlite3.Connection` und bietet nur die Methoden an, die in
        Repository-/Service-Schicht benötigt werden.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- DatabaseProtocol ---
    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """
        Führt ein einzelnes SQL-Statement aus.

        Parameter:
            sql (str): SQL-Statement (ggf. mit Platzhaltern `?`).
            params (Sequence[Any]): Parameterwerte für die Platzhalter.

        Rückgabe:
            sqlite3.Cursor: Cursor (iterierbar, `lastrowid`, `rowcount`).

        Ausnahmen:
            StorageError: Wenn SQLite einen Fehler meldet (Ursache über `__cause__`).
        """

        try:
            return self._conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc

    def executescript(self, sql_script: str) -> None:
        try:
            self._conn.executescript(sql_script)
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc

    def commit(self) -> None:
        try:
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        """
        Schließt die Datenbankverbindung.

        Hinweise:
            Im Normalfall übernimmt `GradebookService.close` bzw. `open_database` das Schließen.
        """

        self._conn.close()

    # Komfortzugriff für Debugging (wird von Repositories/Services nicht benötigt).
    @property
    def conn(self) -> sqlite3.Connection:
        return self._conn


def connect(db_path: Optional[str | os.PathLike[str]] = None) -> SQLiteDatabase:
    """
    Öffnet eine SQLite-Verbindung und gibt einen `SQLiteDatabase`-Adapter zurück.

    Zweck:
        Erstellt eine Verbindung zur Datenbankdatei, aktiviert Foreign Keys und setzt
        `row_factory` auf `sqlite3.Row`, damit Repositories spaltenbasiert zugreifen können.

    Parameter:
        db_path (str | PathLike | None): Pfad zur Datenbankdatei oder ":memory:".
            `None` verwendet den Standardpfad.

    Rückgabe:
        SQLiteDatabase: Adapter-Objekt, das `DatabaseProtocol` erfüllt.
    """

    if db_path is None:
        path: str | Path = default_db_path()
    elif str(db_path) == MEMORY:
        path = MEMORY
    else:
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Opening database %s", path)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return SQLiteDatabase(conn)


def create_schema(db: DatabaseProtocol, reset_db: bool = False) -> None:
    """
    Legt das Datenbankschema (Tabellen/Indizes) an.

    Zweck:
        Erstellt die Tabellen `courses`, `categories` und `assignments` inklusive Indizes
        auf den Besitzer-Spalten. Optional kann das Schema vorher zurückgesetzt werden.

    Parameter:
        db (DatabaseProtocol): Datenbank-Adapter.
        reset_db (bool): Wenn True, werden bestehende Tabellen vorher gelöscht.

    Hinweise:
        `grade_type`: 0 = Gesamtpunkte, 1 = kategoriegewichtet.
    """

    if reset_db:
        logger.info("Resetting schema")
        db.executescript(
            """
            DROP TABLE IF EXISTS assignments;
            DROP TABLE IF EXISTS categories;
            DROP TABLE IF EXISTS courses;
            """
        )

    db.executescript(
        """
        CREATE TABLE IF NOT EXISTS courses(
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            grade_type INTEGER NOT NULL DEFAULT 1
        );

        CREATE TABLE IF NOT EXISTS categories(
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            course_id INTEGER NOT NULL,
            name TEXT NOT NULL,
            weight REAL NOT NULL DEFAULT 0,
            FOREIGN KEY(course_id) REFERENCES courses(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS assignments(
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            category_id INTEGER NOT NULL,
            name TEXT NOT NULL,
            score REAL NOT NULL,
            max_score REAL NOT NULL,
            FOREIGN KEY(category_id) REFERENCES categories(id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_categories_course ON categories(course_id);
        CREATE INDEX IF NOT EXISTS idx_assignments_category ON assignments(category_id);
        """
    )
    db.commit()


@contextmanager
def open_database(
    db_path: Optional[str | os.PathLike[str]] = None,
    *,
    reset_db: bool = False,
) -> Iterator[SQLiteDatabase]:
    """
    Öffnet die Datenbank für die Dauer eines `with`-Blocks.

    Zweck:
        Bildet die Lebensdauer „einmal beim Start öffnen, am Ende schließen“ explizit ab.

    Parameter:
        db_path (str | PathLike | None): Pfad zur Datenbankdatei.
        reset_db (bool): Schema vor dem Anlegen zurücksetzen.
    """

    db = connect(db_path)
    try:
        create_schema(db, reset_db=reset_db)
        yield db
    finally:
        logger.info("Closing database")
        db.close()
