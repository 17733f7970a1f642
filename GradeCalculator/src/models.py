from __future__ import annotations

# -----------------------------------------------------------------------------
# Domain model (Entities)
# -----------------------------------------------------------------------------
# Diese Datei enthält die fachlichen Kernobjekte (Entities) des Notenrechners.
#
# Ziel: schlanke, gut testbare Datenklassen (dataclasses).
# - Invarianten / Wertebereiche werden über __post_init__ als Basisschutz geprüft.
# - UI-spezifisches Parsing (String → float/int) passiert in `validation.py`.
# - Persistenzdetails (SQL/Row-Objekte) bleiben in den Repositories.
#
# Besitzverhältnisse:
# Course 1 ── * Category 1 ── * Assignment
# Eine ID <= 0 bedeutet „noch nicht gespeichert“. Das Repository setzt die ID nach
# dem INSERT und setzt sie nach dem DELETE wieder auf 0 zurück.
# -----------------------------------------------------------------------------


import math
from dataclasses import dataclass
from enum import Enum

from GradeCalculator.src.errors import ConstraintViolationError

UNSAVED_ID = 0


def _require_non_empty(val: str, field: str) -> None:
    """
    Prüft, ob ein Pflicht-String nicht leer ist.

    Zweck:
        Zentrale Hilfsfunktion für `__post_init__`, um wiederkehrende „nicht leer“-Checks
        konsistent umzusetzen.

    Parameter:
        val (str): Zu prüfender Wert.
        field (str): Feldname für die Fehlermeldung.

    Ausnahmen:
        ConstraintViolationError: Wenn `val` leer/whitespace ist.
    """

    if not isinstance(val, str) or not val.strip():
        raise ConstraintViolationError(f"{field} darf nicht leer sein")


def _require_number(val: object, field: str) -> float:
    """
    Wandelt einen Zahlenwert in `float` um und prüft, ob er endlich ist.

    Ausnahmen:
        ConstraintViolationError: Wenn `val` keine Zahl bzw. NaN/inf ist.
    """

    try:
        v = float(val)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConstraintViolationError(f"{field} muss eine Zahl sein") from exc
    if not math.isfinite(v):
        raise ConstraintViolationError(f"{field} muss eine endliche Zahl sein")
    return v


class GradeType(Enum):
    """
    Gewichtungsverfahren eines Kurses.

    Werte:
        TOTAL_POINTS (0): Summe aller Punkte / Summe aller Maximalpunkte, ohne Kategorien.
        CATEGORY_WEIGHTED (1): Gewichteter Mittelwert der Kategorie-Prozente.

    Hinweise:
        Die Integer-Werte entsprechen der Spalte `courses.grade_type`.
    """

    TOTAL_POINTS = 0
    CATEGORY_WEIGHTED = 1

    def to_int(self) -> int:
        return int(self.value)

    @classmethod
    def from_int(cls, value: int) -> "GradeType":
        """
        Wandelt den gespeicherten Integer in ein `GradeType` um.

        Ausnahmen:
            ConstraintViolationError: Bei unbekanntem Wert.
        """

        try:
            return cls(int(value))
        except (TypeError, ValueError) as exc:
            raise ConstraintViolationError(f"unbekannter grade_type: {value!r}") from exc


@dataclass(slots=True)
class Course:
    """
    Ein Kurs (oberstes Entity).

    Zweck:
        Hält den Namen und das Gewichtungsverfahren. Kategorien referenzieren den Kurs
        über `course_id` und werden beim Löschen des Kurses mitgelöscht.

    Attribute:
        name (str): Kursname (Pflicht).
        grade_type (GradeType): Gewichtungsverfahren.
        id (int): Primärschlüssel; 0 vor dem INSERT.
    """

    name: str
    grade_type: GradeType = GradeType.CATEGORY_WEIGHTED
    id: int = UNSAVED_ID

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _require_non_empty(self.name, "name")
        if not isinstance(self.grade_type, GradeType):
            self.grade_type = GradeType.from_int(self.grade_type)

    @property
    def is_saved(self) -> bool:
        return self.id > 0


@dataclass(slots=True)
class Category:
    """
    Eine Bewertungskategorie innerhalb eines Kurses (z. B. „Hausaufgaben“).

    Attribute:
        course_id (int): Referenz auf den besitzenden Kurs.
        name (str): Kategoriename (Pflicht).
        weight (float): Gewicht 0..100. Die Summe der Gewichte eines Kurses muss nicht
            100 ergeben, die Notenberechnung normalisiert.
        id (int): Primärschlüssel; 0 vor dem INSERT.
    """

    course_id: int
    name: str
    weight: float = 0.0
    id: int = UNSAVED_ID

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _require_non_empty(self.name, "name")
        # Gewicht 0 ist erlaubt (zählt dann nicht in den gewichteten Schnitt)
        weight = _require_number(self.weight, "weight")
        if not (0.0 <= weight <= 100.0):
            raise ConstraintViolationError("weight muss zwischen 0 und 100 liegen")
        self.weight = weight

    @property
    def is_saved(self) -> bool:
        return self.id > 0


@dataclass(slots=True)
class Assignment:
    """
    Eine einzelne Leistung (Aufgabe/Test) innerhalb einer Kategorie.

    Attribute:
        category_id (int): Referenz auf die besitzende Kategorie.
        name (str): Bezeichnung (Pflicht).
        score (float): Erreichte Punkte (>= 0). Darf `max_score` übersteigen (Zusatzpunkte).
        max_score (float): Maximal erreichbare Punkte (> 0).
        id (int): Primärschlüssel; 0 vor dem INSERT.
    """

    category_id: int
    name: str
    score: float
    max_score: float
    id: int = UNSAVED_ID

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _require_non_empty(self.name, "name")
        max_score = _require_number(self.max_score, "max_score")
        score = _require_number(self.score, "score")
        if not (max_score > 0.0):
            raise ConstraintViolationError("max_score muss > 0 sein")
        if not (score >= 0.0):
            raise ConstraintViolationError("score muss >= 0 sein")
        self.score = score
        self.max_score = max_score

    @property
    def is_saved(self) -> bool:
        return self.id > 0
