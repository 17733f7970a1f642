from __future__ import annotations

# -----------------------------------------------------------------------------
# Grade Engine (reine Berechnung)
# -----------------------------------------------------------------------------
# Faltet Leistungen → Kategorie-Prozent → Kurs-Prozent.
#
# - Keine Seiteneffekte, kein I/O: alle Funktionen arbeiten auf In-Memory-Daten.
# - „Keine Note“ wird als `None` gemeldet (kein Fehler).
# - Ergebnisse sind >= 0 und nach oben offen (Zusatzpunkte).
# -----------------------------------------------------------------------------


"""Notenberechnung für Kategorien und Kurse.

Zweck:
    Berechnet Prozentwerte aus Punktzahlen. Die Services laden dafür einen
    `CourseSnapshot` aus der Datenbank und übergeben ihn an diese Funktionen.

Verfahren:
    - Kategorie: 100 * Summe(score) / Summe(max_score)
    - Kurs (TOTAL_POINTS): dieselbe Faltung über alle Leistungen aller Kategorien
    - Kurs (CATEGORY_WEIGHTED): Summe(w_i * p_i) / Summe(w_i) über Kategorien mit
      mindestens einer Leistung; leere Kategorien zählen weder im Zähler noch im Nenner.

Hinweise:
    Eine Kategorie mit Gewicht 0 und vorhandenen Leistungen bleibt im Nenner (trägt also 0 bei).
    Haben alle berücksichtigten Kategorien Gewicht 0, gibt es keine Note.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from GradeCalculator.src.errors import InvalidStateError
from GradeCalculator.src.models import Assignment, Category, Course, GradeType

NO_GRADE_TEXT = "--"


def points_percentage(assignments: Iterable[Assignment]) -> Optional[float]:
    """
    Berechnet den Punkte-Prozentwert einer beliebigen Menge von Leistungen.

    Parameter:
        assignments (Iterable[Assignment]): Leistungen (Reihenfolge egal).

    Rückgabe:
        float | None: 100 * Summe(score) / Summe(max_score) oder `None`, wenn keine
        Leistungen vorhanden sind bzw. die Maximalpunkte 0 ergeben.
    """

    total_score = 0.0
    total_max = 0.0
    for a in assignments:
        total_score += float(a.score)
        total_max += float(a.max_score)
    if total_max <= 0.0:
        return None
    return 100.0 * total_score / total_max


def category_percentage(assignments: Sequence[Assignment]) -> Optional[float]:
    """Prozentwert einer Kategorie (siehe `points_percentage`)."""

    return points_percentage(assignments)


def weighted_percentage(categories: Sequence[tuple[Category, Sequence[Assignment]]]) -> Optional[float]:
    """
    Gewichteter Mittelwert der Kategorie-Prozente.

    Parameter:
        categories: Paare aus (Kategorie, Leistungen der Kategorie).

    Rückgabe:
        float | None: Summe(w_i * p_i) / Summe(w_i) über Kategorien mit Leistungen,
        oder `None`, wenn keine Kategorie Leistungen hat bzw. der Nenner 0 ist.
    """

    weighted_sum = 0.0
    weight_sum = 0.0
    for category, assignments in categories:
        pct = category_percentage(assignments)
        if pct is None:
            continue
        weighted_sum += category.weight * pct
        weight_sum += category.weight
    if weight_sum <= 0.0:
        return None
    return weighted_sum / weight_sum


def course_percentage(
    grade_type: GradeType,
    categories: Sequence[tuple[Category, Sequence[Assignment]]],
) -> Optional[float]:
    """
    Prozentwert eines Kurses nach dessen Gewichtungsverfahren.

    Parameter:
        grade_type (GradeType): Gewichtungsverfahren des Kurses.
        categories: Paare aus (Kategorie, Leistungen der Kategorie).

    Rückgabe:
        float | None: Kursprozent oder `None` („keine Note“).
    """

    if grade_type is GradeType.TOTAL_POINTS:
        return points_percentage(a for _, assignments in categories for a in assignments)
    return weighted_percentage(categories)


def require_percentage(value: Optional[float], what: str = "Note") -> float:
    """
    Erzwingt einen definierten Prozentwert.

    Ausnahmen:
        InvalidStateError: Wenn `value` None ist (kein berechenbarer Nenner).
    """

    if value is None:
        raise InvalidStateError(f"{what} nicht berechenbar: keine bewerteten Leistungen")
    return value


def format_percentage(value: Optional[float], digits: int = 2) -> str:
    # Anzeige in der UI, z. B. "86.67%" bzw. "--"
    if value is None:
        return NO_GRADE_TEXT
    return f"{value:.{digits}f}%"


@dataclass(slots=True)
class CategorySnapshot:
    """Kategorie samt ihrer Leistungen (In-Memory)."""

    category: Category
    assignments: list[Assignment] = field(default_factory=list)

    def percentage(self) -> Optional[float]:
        return category_percentage(self.assignments)


@dataclass(slots=True)
class CourseSnapshot:
    """
    Vollständiger In-Memory-Stand eines Kurses.

    Zweck:
        Wird vom Service aus den Repositories geladen und dann ohne weitere DB-Zugriffe
        ausgewertet.

    Attribute:
        course (Course): Der Kurs.
        categories (list[CategorySnapshot]): Kategorien inkl. Leistungen.
    """

    course: Course
    categories: list[CategorySnapshot] = field(default_factory=list)

    def pairs(self) -> list[tuple[Category, list[Assignment]]]:
        return [(c.category, c.assignments) for c in self.categories]

    def percentage(self) -> Optional[float]:
        return course_percentage(self.course.grade_type, self.pairs())

    def assignment_count(self) -> int:
        return sum(len(c.assignments) for c in self.categories)
