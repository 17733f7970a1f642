from __future__ import annotations

# -----------------------------------------------------------------------------
# Repository layer (Persistence)
# -----------------------------------------------------------------------------
# Repositories kapseln *sämtliche* SQL-Zugriffe und stellen CRUD-Operationen bereit.
# Sie enthalten bewusst keine GUI-Logik und keine Notenberechnung.
#
# Aufbau:
# - `TableMapping[T]` beschreibt pro Entity-Typ Tabelle, Spalten und die Umwandlung
#   Entity <-> Zeile.
# - `Repository[T]` implementiert CRUD einmalig und generisch auf Basis des Mappings.
# - Kaskaden (Course → Category → Assignment) werden über `cascade_to()` verdrahtet.
#
# Abhängigkeiten:
# - Repositories kennen nur `DatabaseProtocol` (ein kleines Interface/Protocol).
# -----------------------------------------------------------------------------


import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar, Union

from GradeCalculator.src.db_protocol import DatabaseProtocol
from GradeCalculator.src.errors import InvalidStateError, NotFoundError
from GradeCalculator.src.models import UNSAVED_ID, Assignment, Category, Course, GradeType

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Union[Course, Category, Assignment])


@dataclass(frozen=True)
class TableMapping(Generic[T]):
    """
    Abbildung eines Entity-Typs auf eine Tabelle.

    Attribute:
        entity_name (str): Anzeigename für Logs/Fehler (z. B. "Course").
        table (str): Tabellenname.
        columns (tuple[str, ...]): Spalten ohne `id`, in der Reihenfolge von `to_values`.
        to_values (Callable[[T], tuple]): Entity → Spaltenwerte.
        from_row (Callable[[Any], T]): Zeile (`sqlite3.Row`) → Entity.
        owner_column (str | None): Fremdschlüssel auf das besitzende Entity.
    """

    entity_name: str
    table: str
    columns: tuple[str, ...]
    to_values: Callable[[T], tuple[Any, ...]]
    from_row: Callable[[Any], T]
    owner_column: Optional[str] = None


def _course_from_row(r: Any) -> Course:
    return Course(
        id=int(r["id"]),
        name=r["name"],
        grade_type=GradeType.from_int(r["grade_type"]),
    )


def _category_from_row(r: Any) -> Category:
    return Category(
        id=int(r["id"]),
        course_id=int(r["course_id"]),
        name=r["name"],
        weight=float(r["weight"]),
    )


def _assignment_from_row(r: Any) -> Assignment:
    return Assignment(
        id=int(r["id"]),
        category_id=int(r["category_id"]),
        name=r["name"],
        score=float(r["score"]),
        max_score=float(r["max_score"]),
    )


COURSES: TableMapping[Course] = TableMapping(
    entity_name="Course",
    table="courses",
    columns=("name", "grade_type"),
    to_values=lambda c: (c.name, c.grade_type.to_int()),
    from_row=_course_from_row,
)

CATEGORIES: TableMapping[Category] = TableMapping(
    entity_name="Category",
    table="categories",
    columns=("course_id", "name", "weight"),
    to_values=lambda c: (c.course_id, c.name, c.weight),
    from_row=_category_from_row,
    owner_column="course_id",
)

ASSIGNMENTS: TableMapping[Assignment] = TableMapping(
    entity_name="Assignment",
    table="assignments",
    columns=("category_id", "name", "score", "max_score"),
    to_values=lambda a: (a.category_id, a.name, a.score, a.max_score),
    from_row=_assignment_from_row,
    owner_column="category_id",
)


class Repository(Generic[T]):
    """
    Generisches Repository (CRUD) für einen Entity-Typ.

    Zweck:
        Kapselt SQL-Zugriffe auf genau eine Tabelle. Welche Tabelle und welche Spalten,
        legt das übergebene `TableMapping` fest; es gibt keine Unterklassen pro Entity.

    Hinweise:
        - Jede schreibende Operation ist eine Transaktion: bei Erfolg COMMIT, sonst ROLLBACK.
        - Kind-Repositories (siehe `cascade_to`) werden beim Löschen zuerst bereinigt.
    """

    def __init__(self, db: DatabaseProtocol, mapping: TableMapping[T]) -> None:
        """
        Initialisiert das Repository.

        Parameter:
            db (DatabaseProtocol): Datenbank-Adapter, über den alle SQL-Zugriffe laufen.
            mapping (TableMapping[T]): Tabellen-/Spaltenbeschreibung des Entity-Typs.
        """

        self.db = db
        self.mapping = mapping
        self._children: list[Repository[Any]] = []

    def cascade_to(self, child: "Repository[Any]") -> None:
        """
        Registriert ein Kind-Repository für kaskadierendes Löschen.

        Parameter:
            child (Repository): Repository, dessen `owner_column` auf diese Tabelle zeigt.

        Ausnahmen:
            InvalidStateError: Wenn das Kind keine Besitzer-Spalte hat.
        """

        if child.mapping.owner_column is None:
            raise InvalidStateError(f"{child.mapping.entity_name} hat keine Besitzer-Spalte")
        self._children.append(child)

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # -----------------------------
    # Create / Update / Save
    # -----------------------------
    def create(self, entity: T) -> T:
        """
        Legt einen neuen Datensatz an (INSERT) und setzt die erzeugte ID am Entity.

        Parameter:
            entity (T): Noch nicht gespeichertes Entity.

        Rückgabe:
            T: Dasselbe Objekt mit gesetzter `id`.
        """

        entity.validate()
        m = self.mapping
        placeholders = ",".join("?" for _ in m.columns)
        with self._transaction():
            cursor = self.db.execute(
                f"INSERT INTO {m.table}({', '.join(m.columns)}) VALUES({placeholders})",
                m.to_values(entity),
            )
            # Nach INSERT ist `lastrowid` i. d. R. gesetzt. Falls nicht, nutzen wir SQLite-Fallback.
            if getattr(cursor, "lastrowid", None):
                new_id = int(cursor.lastrowid)
            else:
                new_id = int(self.db.execute("SELECT last_insert_rowid() AS id").fetchone()["id"])
        entity.id = new_id
        logger.debug("Created %s id=%d", m.entity_name, new_id)
        return entity

    def update(self, entity: T) -> T:
        """
        Überschreibt den Datensatz mit der ID des Entities (UPDATE).

        Ausnahmen:
            InvalidStateError: Wenn das Entity noch nicht gespeichert ist (id <= 0).
            NotFoundError: Wenn kein Datensatz mit dieser ID existiert.
        """

        if entity.id <= 0:
            raise InvalidStateError(f"{self.mapping.entity_name}: id required for update")
        entity.validate()
        m = self.mapping
        assignments = ", ".join(f"{col}=?" for col in m.columns)
        with self._transaction():
            cursor = self.db.execute(
                f"UPDATE {m.table} SET {assignments} WHERE id=?",
                (*m.to_values(entity), entity.id),
            )
            if cursor.rowcount < 1:
                raise NotFoundError(m.entity_name, entity.id)
        logger.debug("Updated %s id=%d", m.entity_name, entity.id)
        return entity

    def save(self, entity: T) -> T:
        """
        Speichert ein Entity: INSERT für neue (id <= 0), sonst UPDATE.

        Rückgabe:
            T: Das gespeicherte Entity (mit gültiger `id`).
        """

        if entity.id <= 0:
            return self.create(entity)
        return self.update(entity)

    # -----------------------------
    # Read
    # -----------------------------
    def get_all(self, owner_id: Optional[int] = None) -> Iterator[T]:
        """
        Liefert alle Entities, alphabetisch nach Name sortiert.

        Zweck:
            Die Zeilen werden erst beim Iterieren gelesen und einzeln in Entities umgewandelt.
            Der Generator ist endlich und kann nur einmal durchlaufen werden.

        Parameter:
            owner_id (int | None): Optionaler Filter auf die Besitzer-Spalte
                (z. B. alle Kategorien eines Kurses).

        Ausnahmen:
            InvalidStateError: Wenn gefiltert werden soll, der Typ aber keinen Besitzer hat.
        """

        m = self.mapping
        # Prüfung sofort beim Aufruf, nicht erst beim ersten next()
        if owner_id is not None and m.owner_column is None:
            raise InvalidStateError(f"{m.entity_name} hat keine Besitzer-Spalte")
        return self._iter_rows(owner_id)

    def _iter_rows(self, owner_id: Optional[int]) -> Iterator[T]:
        m = self.mapping
        if owner_id is None:
            cursor = self.db.execute(f"SELECT * FROM {m.table} ORDER BY name ASC, id ASC")
        else:
            cursor = self.db.execute(
                f"SELECT * FROM {m.table} WHERE {m.owner_column}=? ORDER BY name ASC, id ASC",
                (owner_id,),
            )
        for row in cursor:
            yield m.from_row(row)

    def get_by_id(self, entity_id: int) -> Optional[T]:
        """
        Lädt ein Entity anhand seiner ID.

        Rückgabe:
            T | None: Entity oder `None`, wenn nicht gefunden.
        """

        cursor = self.db.execute(f"SELECT * FROM {self.mapping.table} WHERE id=?", (entity_id,))
        r = cursor.fetchone()
        if not r:
            return None
        return self.mapping.from_row(r)

    def require_by_id(self, entity_id: int) -> T:
        """Wie `get_by_id`, aber `NotFoundError` statt `None`."""

        entity = self.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.mapping.entity_name, entity_id)
        return entity

    def count(self, owner_id: Optional[int] = None) -> int:
        m = self.mapping
        if owner_id is None:
            cursor = self.db.execute(f"SELECT COUNT(*) AS n FROM {m.table}")
        else:
            if m.owner_column is None:
                raise InvalidStateError(f"{m.entity_name} hat keine Besitzer-Spalte")
            cursor = self.db.execute(
                f"SELECT COUNT(*) AS n FROM {m.table} WHERE {m.owner_column}=?", (owner_id,)
            )
        return int(cursor.fetchone()["n"])

    # -----------------------------
    # Delete (inkl. Kaskade)
    # -----------------------------
    def _delete_where(self, where: Optional[str], params: tuple[Any, ...] = ()) -> int:
        # Kinder zuerst löschen, damit keine verwaisten Zeilen entstehen.
        m = self.mapping
        clause = f" WHERE {where}" if where else ""
        if self._children:
            if where is None:
                for child in self._children:
                    child._delete_where(None)
            else:
                rows = self.db.execute(f"SELECT id FROM {m.table}{clause}", params).fetchall()
                ids = [int(r["id"]) for r in rows]
                for child in self._children:
                    for owner_id in ids:
                        child._delete_where(f"{child.mapping.owner_column}=?", (owner_id,))
        cursor = self.db.execute(f"DELETE FROM {m.table}{clause}", params)
        return max(int(cursor.rowcount), 0)

    def delete_by_id(self, entity_id: int) -> int:
        """
        Löscht den Datensatz mit der gegebenen ID (inkl. Kind-Datensätzen).

        Rückgabe:
            int: Anzahl gelöschter Datensätze dieser Tabelle (0 oder 1).
        """

        with self._transaction():
            deleted = self._delete_where("id=?", (entity_id,))
        logger.debug("Deleted %s id=%d (%d row(s))", self.mapping.entity_name, entity_id, deleted)
        return deleted

    def delete(self, entity: T) -> int:
        """
        Löscht ein Entity und setzt dessen ID bei Erfolg auf 0 zurück.

        Rückgabe:
            int: Anzahl gelöschter Datensätze dieser Tabelle.
        """

        deleted = self.delete_by_id(entity.id)
        if deleted > 0:
            entity.id = UNSAVED_ID
        return deleted

    def delete_all(self) -> int:
        """
        Löscht alle Datensätze dieser Tabelle (und aller Kind-Tabellen).

        Rückgabe:
            int: Anzahl gelöschter Datensätze dieser Tabelle.
        """

        with self._transaction():
            deleted = self._delete_where(None)
        logger.info("Deleted all %s rows (%d)", self.mapping.entity_name, deleted)
        return deleted


@dataclass(slots=True)
class Repositories:
    """Die drei verdrahteten Repositories einer Datenbank."""

    courses: Repository[Course]
    categories: Repository[Category]
    assignments: Repository[Assignment]


def build_repositories(db: DatabaseProtocol) -> Repositories:
    """
    Erzeugt die Repositories und verdrahtet die Lösch-Kaskade.

    Zweck:
        Course → Category → Assignment: Beim Löschen eines Kurses werden dessen Kategorien
        gelöscht, beim Löschen einer Kategorie deren Leistungen.

    Parameter:
        db (DatabaseProtocol): Datenbank-Adapter.

    Rückgabe:
        Repositories: Bündel aus Kurs-, Kategorie- und Leistungs-Repository.
    """

    courses: Repository[Course] = Repository(db, COURSES)
    categories: Repository[Category] = Repository(db, CATEGORIES)
    assignments: Repository[Assignment] = Repository(db, ASSIGNMENTS)
    courses.cascade_to(categories)
    categories.cascade_to(assignments)
    return Repositories(courses=courses, categories=categories, assignments=assignments)
