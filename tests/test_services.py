"""Tests for the gradebook service facade."""

from __future__ import annotations

import logging

import pytest

from GradeCalculator.src.config import AppConfig
from GradeCalculator.src.errors import NotFoundError
from GradeCalculator.src.models import Course, GradeType
from GradeCalculator.src.services import GradebookService
from GradeCalculator.src.validation import ValidationError


def _weighted_course(svc: GradebookService):
    course = svc.create_course("Statistics", GradeType.CATEGORY_WEIGHTED)
    exams = svc.create_category(course.id, "Exams", 30)
    svc.create_category(course.id, "Projects", 70)
    svc.create_assignment(exams.id, "Midterm", 80, 100)
    return course


def test_weighted_course_grade_skips_empty_category(svc) -> None:
    course = _weighted_course(svc)
    assert svc.course_grade(course.id) == pytest.approx(80.0)


def test_category_grade(svc) -> None:
    course = svc.create_course("History")
    cat = svc.create_category(course.id, "Essays", 50)
    svc.create_assignment(cat.id, "Essay 1", 8, 10)
    svc.create_assignment(cat.id, "Essay 2", 18, 20)
    assert svc.category_grade(cat.id) == pytest.approx(26 / 30 * 100)


def test_total_points_course_grade(svc) -> None:
    course = svc.create_course("Economics", GradeType.TOTAL_POINTS)
    a = svc.create_category(course.id, "A", 90)
    b = svc.create_category(course.id, "B", 10)
    svc.create_assignment(a.id, "a1", 50, 100)
    svc.create_assignment(b.id, "b1", 20, 20)
    assert svc.course_grade(course.id) == pytest.approx(70 / 120 * 100)


def test_course_without_assignments_has_no_grade(svc) -> None:
    course = svc.create_course("Empty")
    svc.create_category(course.id, "Nothing", 100)
    assert svc.course_grade(course.id) is None


def test_grade_report(svc) -> None:
    course = _weighted_course(svc)
    report = svc.grade_report(course.id)

    assert report.course.name == "Statistics"
    assert report.percentage == pytest.approx(80.0)
    assert [c.name for c in report.categories] == ["Exams", "Projects"]
    assert report.categories[0].assignment_count == 1
    assert report.categories[1].percentage is None
    assert report.total_weight == pytest.approx(100.0)
    assert svc.get_series_category_percentages(course.id) == [
        ("Exams", pytest.approx(80.0)),
        ("Projects", None),
    ]


def test_delete_course_removes_everything(svc) -> None:
    course = _weighted_course(svc)
    course_id = course.id
    assert svc.delete_course(course) == 1
    assert course.id == 0
    assert svc.list_courses() == []
    assert svc.list_categories(course_id) == []
    with pytest.raises(NotFoundError):
        svc.get_course(course_id)


def test_children_require_existing_owner(svc) -> None:
    with pytest.raises(NotFoundError):
        svc.create_category(99, "Nope", 10)
    with pytest.raises(NotFoundError):
        svc.create_assignment(99, "Nope", 1, 1)
    with pytest.raises(NotFoundError):
        svc.course_grade(99)


def test_edit_assignment_changes_grade(svc) -> None:
    course = svc.create_course("Music", GradeType.TOTAL_POINTS)
    cat = svc.create_category(course.id, "Recitals", 100)
    assignment = svc.create_assignment(cat.id, "Recital", 5, 10)
    assignment.score = 10
    svc.save_assignment(assignment)
    assert svc.get_assignment(assignment.id).score == 10.0
    assert svc.course_grade(course.id) == pytest.approx(100.0)

    svc.delete_assignment(assignment)
    assert svc.list_assignments(cat.id) == []
    assert svc.course_grade(course.id) is None


def test_form_input_use_cases(svc) -> None:
    course = svc.add_course_from_form("  Literature ", "points")
    assert course.name == "Literature"
    assert course.grade_type is GradeType.TOTAL_POINTS

    cat = svc.add_category_from_form(course.id, "Reading", "12,5")
    assert cat.weight == pytest.approx(12.5)

    a = svc.add_assignment_from_form(cat.id, "Quiz", "9", "10")
    assert svc.get_assignment(a.id).max_score == 10.0

    with pytest.raises(ValidationError):
        svc.add_assignment_from_form(cat.id, "Quiz", "9", "0")
    with pytest.raises(ValidationError):
        svc.add_course_from_form("", "weighted")


def test_license_check(db) -> None:
    assert GradebookService.from_db(db).is_licensed() is False
    assert GradebookService.from_db(db, license_check=lambda: True).is_licensed() is True


def test_bootstrap_owns_and_closes_db(tmp_path) -> None:
    path = tmp_path / "grades.db"
    with GradebookService.bootstrap(AppConfig(db_path=str(path), licensed=True)) as svc:
        svc.create_course("Persisted")
        assert svc.is_licensed()

    with GradebookService.bootstrap(AppConfig(db_path=str(path))) as svc:
        assert [c.name for c in svc.list_courses()] == ["Persisted"]
        assert not svc.is_licensed()


def test_bootstrap_applies_log_level(tmp_path) -> None:
    cfg = AppConfig(db_path=str(tmp_path / "g.db"), log_level="DEBUG")
    with GradebookService.bootstrap(cfg):
        assert logging.getLogger("GradeCalculator").level == logging.DEBUG


def test_delete_missing_course_is_not_logged(svc, caplog) -> None:
    caplog.set_level(logging.INFO, logger="GradeCalculator")
    ghost = Course(name="Ghost", id=999)
    assert svc.delete_course(ghost) == 0
    assert "Deleted course" not in caplog.text

    course = svc.create_course("Real")
    assert svc.delete_course(course) == 1
    assert "Deleted course" in caplog.text
