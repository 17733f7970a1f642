"""
Konfiguration und Logging-Setup.

Zweck:
    Liefert die Einstellungen, die beim Start (Composition Root, siehe
    `GradebookService.bootstrap`) benötigt werden: DB-Pfad, Log-Level, Lizenzstatus.

Umgebungsvariablen:
    GRADES_DB_PATH: Pfad zur SQLite-Datei (Default: `GradeCalculator/docs/database/grades.db`)
    GRADES_LOG_LEVEL: z. B. DEBUG, INFO, WARNING (Default: WARNING)
    GRADES_LICENSED: "1"/"true"/"yes" schaltet Premium-Funktionen frei (Default: aus)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_DB_PATH = "GRADES_DB_PATH"
ENV_LOG_LEVEL = "GRADES_LOG_LEVEL"
ENV_LICENSED = "GRADES_LICENSED"

_TRUE_VALUES = {"1", "true", "yes", "on"}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def default_db_path() -> Path:
    """
    Ermittelt den Standardpfad der SQLite-Datenbank.

    Zweck:
        Legt die Datenbank standardmäßig unterhalb des Projektordners an:
        `GradeCalculator/docs/database/grades.db`.

    Rückgabe:
        Path: Vollständiger Pfad zur Datenbankdatei.

    Hinweise:
        Das Zielverzeichnis wird bei Bedarf automatisch erstellt.
    """

    here = Path(__file__).resolve()
    project_root = here.parents[1]
    db_dir = project_root / "docs" / "database"
    db_dir.mkdir(parents=True, exist_ok=True)
    return db_dir / "grades.db"


@dataclass(slots=True, frozen=True)
class AppConfig:
    """
    Laufzeit-Einstellungen der Anwendung.

    Attribute:
        db_path (str | None): Pfad zur DB; `None` = Standardpfad, ":memory:" für Tests.
        log_level (str): Name des Log-Levels.
        licensed (bool): Ergebnis der (externen) Lizenzprüfung.
    """

    db_path: Optional[str] = None
    log_level: str = "WARNING"
    licensed: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        return cls(
            db_path=env.get(ENV_DB_PATH) or None,
            log_level=(env.get(ENV_LOG_LEVEL) or "WARNING").upper(),
            licensed=(env.get(ENV_LICENSED, "").strip().lower() in _TRUE_VALUES),
        )


def configure_logging(level: str | int = "WARNING") -> None:
    """
    Richtet ein einfaches Logging für die Anwendung ein.

    Hinweise:
        Wird nur vom Startcode aufgerufen; Module selbst konfigurieren beim Import nichts.
    """

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unbekanntes Log-Level: {level!r}")
        level = resolved
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("GradeCalculator").setLevel(level)
