"""
GradeCalculator – Kurs- und Notenverwaltung.

Zweck:
    Dieses Paket bündelt den Kern des Notenrechners und dokumentiert die
    Schichtenarchitektur (UI → Service → Repository → Model).

Inhalt:
    - Service-Schicht: Use-Cases (CRUD, Kaskade) und Notenberichte (`services.py`)
    - Grade Engine: reine Prozentberechnung (`grading.py`)
    - Repository-Schicht: generisches CRUD auf SQLite (`repositories.py`, `db.py`)
    - Model-Schicht: Datenklassen (`models.py`)

Hinweise:
    Die UI ist nicht Teil dieses Pakets; sie spricht ausschließlich mit `GradebookService`.
    Diese Datei enthält keine Laufzeitlogik.
"""

__all__ = []
