"""
Validierung und Parsing von Benutzereingaben.

Zweck:
    Die UI nimmt Eingaben als Strings entgegen (Dialoge „Kurs/Kategorie/Leistung anlegen“).
    Dieses Modul wandelt diese Strings in passende Python-Typen (float/GradeType) um und
    prüft einfache Wertebereiche, damit keine ungültigen Daten in Service/Repository-Schicht
    gelangen.

Hinweise:
    Die Validierung ist bewusst „leichtgewichtig“ gehalten. Fachliche Invarianten der
    Entities werden zusätzlich in den Dataclasses (`models.py`) über `__post_init__`
    abgesichert.
"""

from __future__ import annotations

import math
from typing import Optional

from GradeCalculator.src.errors import ConstraintViolationError
from GradeCalculator.src.models import GradeType


class ValidationError(ConstraintViolationError):
    """
    Fehlerklasse für ungültige Benutzereingaben.

    Zweck:
        Wird in der UI abgefangen, um eine verständliche Fehlermeldung anzuzeigen,
        ohne einen technischen Traceback zu präsentieren.
    """


# Eingaben aus dem Kurs-Dialog (Radiobuttons bzw. freie Texteingabe)
_GRADE_TYPE_ALIASES = {
    "0": GradeType.TOTAL_POINTS,
    "points": GradeType.TOTAL_POINTS,
    "total": GradeType.TOTAL_POINTS,
    "total_points": GradeType.TOTAL_POINTS,
    "1": GradeType.CATEGORY_WEIGHTED,
    "weighted": GradeType.CATEGORY_WEIGHTED,
    "category": GradeType.CATEGORY_WEIGHTED,
    "category_weighted": GradeType.CATEGORY_WEIGHTED,
}


def parse_name(text: str, *, field: str) -> str:
    """
    Prüft einen Pflicht-Namen und entfernt Leerraum am Rand.

    Ausnahmen:
        ValidationError: Bei leerer Eingabe.
    """

    t = (text or "").strip()
    if not t:
        raise ValidationError(f"{field} darf nicht leer sein")
    return t


def parse_float(text: str, *, field: str, min_value: Optional[float] = None, max_value: Optional[float] = None) -> float:
    """
    Parst eine Fließkommazahl (Komma oder Punkt).

    Zweck:
        Wandelt den Text in `float` um (`,` wird als Dezimaltrennzeichen akzeptiert) und
        prüft optional einen Wertebereich.

    Parameter:
        text (str): Eingabetext.
        field (str): Feldname für Fehlermeldungen.
        min_value (float | None): Untere Schranke (optional).
        max_value (float | None): Obere Schranke (optional).

    Rückgabe:
        float: Geparste Zahl.

    Ausnahmen:
        ValidationError: Bei ungültiger Eingabe oder Verletzung des Wertebereichs.
    """

    try:
        v = float(str(text).strip().replace(",", "."))
    except ValueError as exc:
        raise ValidationError(f"{field} muss eine Zahl sein") from exc
    if not math.isfinite(v):
        raise ValidationError(f"{field} muss eine endliche Zahl sein")
    if min_value is not None and v < min_value:
        raise ValidationError(f"{field} muss >= {min_value} sein")
    if max_value is not None and v > max_value:
        raise ValidationError(f"{field} muss <= {max_value} sein")
    return v


def parse_weight(text: str) -> float:
    """Gewicht einer Kategorie (0..100)."""

    return parse_float(text, field="Gewicht", min_value=0.0, max_value=100.0)


def parse_score(text: str) -> float:
    """Erreichte Punkte (>= 0, nach oben offen wegen Zusatzpunkten)."""

    return parse_float(text, field="Punkte", min_value=0.0)


def parse_max_score(text: str) -> float:
    """
    Maximalpunktzahl einer Leistung.

    Ausnahmen:
        ValidationError: Wenn die Zahl nicht > 0 ist.
    """

    v = parse_float(text, field="Maximalpunkte")
    if v <= 0.0:
        raise ValidationError("Maximalpunkte muss > 0 sein")
    return v


def parse_grade_type(text: str) -> GradeType:
    """
    Parst das Gewichtungsverfahren eines Kurses.

    Parameter:
        text (str): "0"/"1" oder ein Alias wie "points"/"weighted".

    Rückgabe:
        GradeType: Gewichtungsverfahren.

    Ausnahmen:
        ValidationError: Bei unbekannter Eingabe.
    """

    key = (text or "").strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return _GRADE_TYPE_ALIASES[key]
    except KeyError as exc:
        raise ValidationError("Gewichtung muss 'points' oder 'weighted' sein") from exc
