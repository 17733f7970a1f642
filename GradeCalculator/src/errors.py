"""
Fehlerklassen des Notenrechners.

Zweck:
    Bündelt die Fehler-Taxonomie der Anwendung, damit die UI gezielt reagieren kann
    (z. B. Meldung „nicht gefunden“ vs. „ungültige Eingabe“), ohne `sqlite3` zu kennen.

Inhalt:
    - GradesError: Basisklasse
    - NotFoundError: Lookup über ID ohne Treffer
    - InvalidStateError: Operation im falschen Zustand (z. B. Update ohne ID, Note ohne Nenner)
    - ConstraintViolationError: Verletzte Invariante (z. B. negative Maximalpunktzahl)
    - StorageError: Fehler der Datenbank (I/O, gesperrte/volle Datei)

Hinweise:
    Fehler werden synchron an den Aufrufer durchgereicht. Es gibt keine automatischen
    Wiederholungen; die UI bricht die laufende Aktion ab und zeigt die Meldung an.
"""

from __future__ import annotations


class GradesError(Exception):
    """Basisklasse aller fachlichen Fehler des Notenrechners."""


class NotFoundError(GradesError, LookupError):
    """
    Ein Datensatz mit der angefragten ID existiert nicht.

    Attribute:
        entity (str): Name des Entity-Typs (z. B. "Course").
        entity_id (int): Angefragte ID.
    """

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity} mit id={entity_id} nicht gefunden")
        self.entity = entity
        self.entity_id = entity_id


class InvalidStateError(GradesError):
    """Die Operation ist im aktuellen Zustand nicht möglich."""


class ConstraintViolationError(GradesError, ValueError):
    """
    Eine Invariante eines Entities wurde verletzt.

    Hinweise:
        Erbt von `ValueError`, damit bestehender Code, der Wertefehler abfängt,
        weiterhin funktioniert.
    """


class StorageError(GradesError):
    """Die Datenbank hat einen Fehler gemeldet (Ursache über `__cause__`)."""
