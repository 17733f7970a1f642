from __future__ import annotations

# -----------------------------------------------------------------------------
# Diagramme (Matplotlib)
# -----------------------------------------------------------------------------
# Erzeugt das Kursdiagramm „Prozent je Kategorie“ als Matplotlib-Figure.
#
# Die Daten kommen ausschließlich aus dem Service
# (`GradebookService.get_series_category_percentages` / `grade_report`).
# Es wird kein pyplot verwendet; die Figure kann in eine UI eingebettet
# oder als Bild gespeichert werden.
# -----------------------------------------------------------------------------


import logging
import os
from typing import Optional, Sequence

from matplotlib.figure import Figure

from GradeCalculator.src.grading import format_percentage
from GradeCalculator.src.services import GradebookService

logger = logging.getLogger(__name__)

NO_DATA_TEXT = "Keine Kategorien vorhanden"


def _clear_ax_with_message(ax, msg: str) -> None:
    """
    Leert eine Matplotlib-Achse und zeigt eine Statusmeldung.

    Zweck:
        Wird genutzt, um „keine Daten“ lesbar im Plotbereich darzustellen.
    """

    ax.clear()
    ax.text(0.5, 0.5, msg, ha="center", va="center", transform=ax.transAxes)
    ax.set_xticks([])
    ax.set_yticks([])


def build_category_chart(
    series: Sequence[tuple[str, Optional[float]]],
    *,
    title: str = "Prozent je Kategorie",
    course_percentage: Optional[float] = None,
) -> Figure:
    """
    Zeichnet ein Balkendiagramm der Kategorie-Prozente.

    Parameter:
        series: Paare aus (Kategoriename, Prozent oder `None`). Kategorien ohne Note
            werden als Balken der Höhe 0 gezeichnet und mit "--" beschriftet.
        title (str): Diagrammtitel.
        course_percentage (float | None): Optional als gestrichelte Linie eingezeichnet.

    Rückgabe:
        Figure: Fertige Matplotlib-Figure.
    """

    fig = Figure(figsize=(6.0, 4.0))
    ax = fig.add_subplot(111)
    if not series:
        _clear_ax_with_message(ax, NO_DATA_TEXT)
        return fig

    labels = [name for name, _ in series]
    short = [lbl[:22] + "…" if len(lbl) > 23 else lbl for lbl in labels]
    values = [pct if pct is not None else 0.0 for _, pct in series]
    xs = list(range(len(values)))
    bars = ax.bar(xs, values)
    ax.bar_label(bars, labels=[format_percentage(pct, digits=1) for _, pct in series])
    if course_percentage is not None:
        ax.axhline(course_percentage, linestyle="--", linewidth=1, label="Kurs")
        ax.legend(loc="best")
    ax.set_title(title)
    ax.set_ylabel("Prozent")
    ax.set_xticks(xs)
    ax.set_xticklabels(short, rotation=45, ha="right")
    # Zusatzpunkte: Achse nicht bei 100 abschneiden
    ax.set_ylim(0.0, max(100.0, max(values) * 1.1))
    fig.tight_layout()
    return fig


def course_chart(svc: GradebookService, course_id: int) -> Figure:
    """Diagramm für einen gespeicherten Kurs (Daten über den Service)."""

    report = svc.grade_report(course_id)
    series = [(c.name, c.percentage) for c in report.categories]
    return build_category_chart(
        series,
        title=f"{report.course.name}: {format_percentage(report.percentage)}",
        course_percentage=report.percentage,
    )


def save_category_chart(svc: GradebookService, course_id: int, path: str | os.PathLike[str]) -> None:
    """
    Speichert das Kursdiagramm als Bilddatei (Format aus der Dateiendung).

    Parameter:
        svc (GradebookService): Service.
        course_id (int): Kurs.
        path (str | PathLike): Zieldatei, z. B. "kurs.png".
    """

    fig = course_chart(svc, course_id)
    fig.savefig(path)
    logger.info("Saved chart for course id=%d to %s", course_id, path)
