from __future__ import annotations

# -----------------------------------------------------------------------------
# Service-Schicht (Anwendungsfälle + Notenberechnung)
# -----------------------------------------------------------------------------
# Diese Schicht kapselt die fachliche Logik und stellt eine stabile API für die UI bereit.
#
# Architektur-Regel:
# - UI spricht nur mit Services.
# - Services orchestrieren Use-Cases und nutzen Repositories.
# - Repositories kapseln SQL und nutzen `DatabaseProtocol` für den DB-Zugriff.
# - Die Notenberechnung selbst liegt in `grading.py` (rein, ohne I/O).
#
# `GradebookService.bootstrap()` fungiert als „Composition Root“: dort werden
# DB-Verbindung/Schema initialisiert und Repositories instanziiert.
# -----------------------------------------------------------------------------


"""Service-Schicht des Notenrechners.

Zweck:
    Kapselt die Use-Cases der Anwendung: CRUD für Kurse/Kategorien/Leistungen,
    kaskadierendes Löschen und die Notenberechnung pro Kategorie und Kurs.
    Die UI ruft ausschließlich Methoden dieser Schicht auf.

Architektur:
    - UI → Services → Repositories → Datenbank
    - Services → grading (reine Berechnung auf einem `CourseSnapshot`)
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from GradeCalculator.src.config import AppConfig, configure_logging
from GradeCalculator.src.db import connect, create_schema
from GradeCalculator.src.db_protocol import DatabaseProtocol
from GradeCalculator.src.grading import CategorySnapshot, CourseSnapshot, category_percentage
from GradeCalculator.src.models import Assignment, Category, Course, GradeType
from GradeCalculator.src.repositories import Repositories, build_repositories
from GradeCalculator.src.validation import (
    parse_grade_type,
    parse_max_score,
    parse_name,
    parse_score,
    parse_weight,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CategoryReport:
    """
    Eine Zeile im Notenbericht eines Kurses.

    Attribute:
        category_id (int): Primärschlüssel der Kategorie.
        name (str): Kategoriename.
        weight (float): Gewicht (0..100).
        assignment_count (int): Anzahl Leistungen.
        percentage (float | None): Kategorie-Prozent oder `None` („keine Note“).
    """

    category_id: int
    name: str
    weight: float
    assignment_count: int
    percentage: Optional[float]


@dataclass(slots=True)
class CourseReport:
    """
    Notenbericht eines Kurses (für die Kursansicht).

    Attribute:
        course (Course): Der Kurs.
        percentage (float | None): Kurs-Prozent nach dessen Gewichtungsverfahren.
        categories (list[CategoryReport]): Kategorien, alphabetisch sortiert.
    """

    course: Course
    percentage: Optional[float]
    categories: list[CategoryReport]

    @property
    def total_weight(self) -> float:
        return sum(c.weight for c in self.categories)


class GradebookService:
    """
    Fassade für alle Anwendungsfälle der Anwendung.

    Zweck:
        Stellt eine stabile API für die UI bereit. Die UI kennt nur diese Klasse und
        greift weder direkt auf Repositories noch auf SQL zu.

    Hinweise:
        - `bootstrap()` erzeugt DB + Repositories (Composition Root).
        - Der Service ist ein Kontextmanager; beim Verlassen wird eine eigene DB geschlossen.
        - `is_licensed()` ist die einzige Schnittstelle zur (externen) Lizenzprüfung.
    """

    def __init__(
        self,
        db: DatabaseProtocol,
        repos: Repositories,
        *,
        owns_db: bool = False,
        license_check: Optional[Callable[[], bool]] = None,
    ) -> None:
        """
        Initialisiert den Service.

        Parameter:
            db (DatabaseProtocol): Datenbank-Adapter.
            repos (Repositories): Verdrahtete Repositories (inkl. Kaskade).
            owns_db (bool): Wenn True, wird die DB bei `close()` geschlossen.
            license_check (Callable[[], bool] | None): Externe Lizenzprüfung (Billing).
        """

        self._db = db
        self._owns_db = owns_db
        self._license_check = license_check

        self.course_repo = repos.courses
        self.category_repo = repos.categories
        self.assignment_repo = repos.assignments

    # -----------------------------
    # Factory helpers
    # -----------------------------
    @classmethod
    def from_db(
        cls,
        db: DatabaseProtocol,
        *,
        owns_db: bool = False,
        license_check: Optional[Callable[[], bool]] = None,
    ) -> "GradebookService":
        """
        Erzeugt einen Service für ein bereits existierendes DB-Objekt.

        Parameter:
            db (DatabaseProtocol): Geöffnete Datenbank (Schema muss existieren).
            owns_db (bool): Ob der Service die DB später selbst schließen soll.
            license_check (Callable[[], bool] | None): Optionale Lizenzprüfung.

        Rückgabe:
            GradebookService: Fertig konfigurierter Service.
        """

        return cls(db, build_repositories(db), owns_db=owns_db, license_check=license_check)

    @classmethod
    def bootstrap(
        cls,
        config: Optional[AppConfig] = None,
        *,
        reset_db: bool = False,
    ) -> "GradebookService":
        """
        Bootstrapt die Anwendung (DB öffnen + Schema anlegen).

        Parameter:
            config (AppConfig | None): Einstellungen; `None` liest die Umgebungsvariablen.
            reset_db (bool): Wenn True, werden Tabellen vor dem Anlegen gelöscht (Demo/Test).

        Rückgabe:
            GradebookService: Service, der die DB besitzt und bei `close()` schließt.
        """

        cfg = config if config is not None else AppConfig.from_env()
        configure_logging(cfg.log_level)
        db = connect(cfg.db_path)
        try:
            create_schema(db, reset_db=reset_db)
        except Exception:
            db.close()
            raise
        licensed = cfg.licensed
        logger.info("Gradebook bootstrapped (licensed=%s)", licensed)
        return cls.from_db(db, owns_db=True, license_check=lambda: licensed)

    def close(self) -> None:
        """Schließt die DB-Verbindung (nur wenn der Service sie besitzt)."""

        if self._owns_db:
            logger.info("Closing gradebook")
            self._db.close()

    def __enter__(self) -> "GradebookService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def is_licensed(self) -> bool:
        if self._license_check is None:
            return False
        return bool(self._license_check())

    # -----------------------------
    # Courses
    # -----------------------------
    def create_course(self, name: str, grade_type: GradeType = GradeType.CATEGORY_WEIGHTED) -> Course:
        """
        Legt einen neuen Kurs an.

        Rückgabe:
            Course: Gespeicherter Kurs mit gesetzter `id`.
        """

        return self.course_repo.create(Course(name=name, grade_type=grade_type))

    def add_course_from_form(self, name: str, grade_type: str) -> Course:
        """Legt einen Kurs aus Dialog-Eingaben (Strings) an."""

        return self.create_course(parse_name(name, field="Kursname"), parse_grade_type(grade_type))

    def list_courses(self) -> list[Course]:
        """
        Liefert alle Kurse für die Kursliste (nach Name sortiert).

        Rückgabe:
            list[Course]: Kurse.
        """

        logger.debug("Refreshing course list")
        return list(self.course_repo.get_all())

    def get_course(self, course_id: int) -> Course:
        """
        Lädt einen Kurs.

        Ausnahmen:
            NotFoundError: Wenn es den Kurs nicht gibt.
        """

        return self.course_repo.require_by_id(course_id)

    def save_course(self, course: Course) -> Course:
        return self.course_repo.save(course)

    def delete_course(self, course: Course) -> int:
        """
        Löscht einen Kurs inklusive aller Kategorien und Leistungen.

        Rückgabe:
            int: Anzahl gelöschter Kurse (0 oder 1). Bei Erfolg ist `course.id` danach 0.
        """

        course_id = course.id
        deleted = self.course_repo.delete(course)
        if deleted:
            logger.info("Deleted course id=%d with categories and assignments", course_id)
        return deleted

    # -----------------------------
    # Categories
    # -----------------------------
    def create_category(self, course_id: int, name: str, weight: float) -> Category:
        """
        Legt eine Kategorie in einem Kurs an.

        Ausnahmen:
            NotFoundError: Wenn der Kurs nicht existiert.
        """

        self.course_repo.require_by_id(course_id)
        return self.category_repo.create(Category(course_id=course_id, name=name, weight=weight))

    def add_category_from_form(self, course_id: int, name: str, weight: str) -> Category:
        return self.create_category(course_id, parse_name(name, field="Kategoriename"), parse_weight(weight))

    def list_categories(self, course_id: int) -> list[Category]:
        return list(self.category_repo.get_all(course_id))

    def get_category(self, category_id: int) -> Category:
        return self.category_repo.require_by_id(category_id)

    def save_category(self, category: Category) -> Category:
        return self.category_repo.save(category)

    def delete_category(self, category: Category) -> int:
        """Löscht eine Kategorie inklusive ihrer Leistungen."""

        return self.category_repo.delete(category)

    # -----------------------------
    # Assignments
    # -----------------------------
    def create_assignment(self, category_id: int, name: str, score: float, max_score: float) -> Assignment:
        """
        Legt eine Leistung in einer Kategorie an.

        Ausnahmen:
            NotFoundError: Wenn die Kategorie nicht existiert.
            ConstraintViolationError: Bei ungültigen Punktzahlen.
        """

        self.category_repo.require_by_id(category_id)
        return self.assignment_repo.create(
            Assignment(category_id=category_id, name=name, score=score, max_score=max_score)
        )

    def add_assignment_from_form(self, category_id: int, name: str, score: str, max_score: str) -> Assignment:
        return self.create_assignment(
            category_id,
            parse_name(name, field="Name"),
            parse_score(score),
            parse_max_score(max_score),
        )

    def list_assignments(self, category_id: int) -> list[Assignment]:
        return list(self.assignment_repo.get_all(category_id))

    def get_assignment(self, assignment_id: int) -> Assignment:
        return self.assignment_repo.require_by_id(assignment_id)

    def save_assignment(self, assignment: Assignment) -> Assignment:
        return self.assignment_repo.save(assignment)

    def delete_assignment(self, assignment: Assignment) -> int:
        return self.assignment_repo.delete(assignment)

    # -----------------------------
    # Grades
    # -----------------------------
    def load_snapshot(self, course_id: int) -> CourseSnapshot:
        """
        Lädt einen Kurs vollständig in den Speicher.

        Zweck:
            Liefert die Eingabe für die reine Notenberechnung (`grading.py`).

        Ausnahmen:
            NotFoundError: Wenn es den Kurs nicht gibt.
        """

        course = self.course_repo.require_by_id(course_id)
        categories = [
            CategorySnapshot(category=c, assignments=list(self.assignment_repo.get_all(c.id)))
            for c in self.list_categories(course_id)
        ]
        return CourseSnapshot(course=course, categories=categories)

    def course_grade(self, course_id: int) -> Optional[float]:
        """
        Kurs-Prozent nach dessen Gewichtungsverfahren.

        Rückgabe:
            float | None: Prozentwert oder `None` („keine Note“).
        """

        return self.load_snapshot(course_id).percentage()

    def category_grade(self, category_id: int) -> Optional[float]:
        """
        Kategorie-Prozent (Summe Punkte / Summe Maximalpunkte).

        Ausnahmen:
            NotFoundError: Wenn es die Kategorie nicht gibt.
        """

        self.category_repo.require_by_id(category_id)
        return category_percentage(list(self.assignment_repo.get_all(category_id)))

    def grade_report(self, course_id: int) -> CourseReport:
        """
        Erstellt den Notenbericht eines Kurses.

        Rückgabe:
            CourseReport: Kurs-Prozent plus eine Zeile je Kategorie.
        """

        snap = self.load_snapshot(course_id)
        rows = [
            CategoryReport(
                category_id=c.category.id,
                name=c.category.name,
                weight=c.category.weight,
                assignment_count=len(c.assignments),
                percentage=c.percentage(),
            )
            for c in snap.categories
        ]
        return CourseReport(course=snap.course, percentage=snap.percentage(), categories=rows)

    # -----------------------------
    # Plot data (charts.py zeichnet)
    # -----------------------------
    def get_series_category_percentages(self, course_id: int) -> list[tuple[str, Optional[float]]]:
        """
        Datenserie „Prozent je Kategorie“ für das Kursdiagramm.

        Rückgabe:
            list[tuple[str, float | None]]: Paare aus (Kategoriename, Prozent oder `None`).
        """

        return [(c.name, c.percentage) for c in self.grade_report(course_id).categories]
