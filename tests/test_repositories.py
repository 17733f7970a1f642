"""Tests for the generic SQLite repositories and the delete cascade."""

from __future__ import annotations

import pytest

from GradeCalculator.src.db import SQLiteDatabase, connect, create_schema
from GradeCalculator.src.errors import InvalidStateError, NotFoundError, StorageError
from GradeCalculator.src.models import Assignment, Category, Course, GradeType
from GradeCalculator.src.repositories import build_repositories


def _course(repos, name: str = "Biology", grade_type: GradeType = GradeType.CATEGORY_WEIGHTED) -> Course:
    return repos.courses.save(Course(name=name, grade_type=grade_type))


def test_create_assigns_id(repos) -> None:
    course = Course(name="Chemistry")
    repos.courses.create(course)
    assert course.id > 0
    assert course.is_saved


def test_save_then_get_round_trip(repos) -> None:
    course = _course(repos, grade_type=GradeType.TOTAL_POINTS)
    category = repos.categories.save(Category(course_id=course.id, name="Labs", weight=25.5))
    assignment = repos.assignments.save(
        Assignment(category_id=category.id, name="Lab 1", score=9.5, max_score=10)
    )

    assert repos.courses.get_by_id(course.id) == course
    assert repos.categories.get_by_id(category.id) == category
    assert repos.assignments.get_by_id(assignment.id) == assignment


def test_save_updates_existing_row(repos) -> None:
    course = _course(repos)
    original_id = course.id
    course.name = "Advanced Biology"
    course.grade_type = GradeType.TOTAL_POINTS
    repos.courses.save(course)

    assert course.id == original_id
    loaded = repos.courses.get_by_id(original_id)
    assert loaded.name == "Advanced Biology"
    assert loaded.grade_type is GradeType.TOTAL_POINTS
    assert repos.courses.count() == 1


def test_update_requires_saved_entity(repos) -> None:
    with pytest.raises(InvalidStateError):
        repos.courses.update(Course(name="Unsaved"))


def test_update_missing_row_raises_not_found(repos) -> None:
    with pytest.raises(NotFoundError):
        repos.courses.update(Course(name="Ghost", id=999))


def test_update_revalidates_mutated_entity(repos) -> None:
    course = _course(repos)
    category = repos.categories.save(Category(course_id=course.id, name="Exams", weight=50))
    category.weight = 150
    with pytest.raises(ValueError):
        repos.categories.save(category)
    assert repos.categories.get_by_id(category.id).weight == 50.0


def test_get_by_id_missing(repos) -> None:
    assert repos.courses.get_by_id(12345) is None
    with pytest.raises(NotFoundError) as info:
        repos.courses.require_by_id(12345)
    assert info.value.entity_id == 12345


def test_get_all_sorted_by_name(repos) -> None:
    for name in ["Zoology", "Art", "Math"]:
        _course(repos, name=name)
    assert [c.name for c in repos.courses.get_all()] == ["Art", "Math", "Zoology"]


def test_get_all_filters_by_owner(repos) -> None:
    a = _course(repos, name="A")
    b = _course(repos, name="B")
    repos.categories.save(Category(course_id=a.id, name="Quizzes", weight=10))
    repos.categories.save(Category(course_id=a.id, name="Exams", weight=90))
    repos.categories.save(Category(course_id=b.id, name="Projects", weight=100))

    assert [c.name for c in repos.categories.get_all(a.id)] == ["Exams", "Quizzes"]
    assert [c.name for c in repos.categories.get_all(b.id)] == ["Projects"]
    assert repos.categories.count(a.id) == 2


def test_get_all_is_forward_only(repos) -> None:
    _course(repos, name="One")
    _course(repos, name="Two")
    it = repos.courses.get_all()
    assert next(it).name == "One"
    assert [c.name for c in it] == ["Two"]
    assert list(it) == []


def test_get_all_owner_filter_on_top_level_type(repos) -> None:
    """Der Fehler kommt beim Aufruf, nicht erst beim Iterieren."""
    with pytest.raises(InvalidStateError):
        repos.courses.get_all(1)


def test_delete_resets_id(repos) -> None:
    course = _course(repos)
    assert repos.courses.delete(course) == 1
    assert course.id == 0
    assert repos.courses.count() == 0


def test_delete_missing_keeps_id(repos) -> None:
    course = Course(name="Ghost", id=77)
    assert repos.courses.delete(course) == 0
    assert course.id == 77


def test_delete_course_cascades(repos, db) -> None:
    keep = _course(repos, name="Keep")
    keep_cat = repos.categories.save(Category(course_id=keep.id, name="K", weight=100))
    repos.assignments.save(Assignment(category_id=keep_cat.id, name="k", score=1, max_score=1))

    course = _course(repos, name="Drop")
    for i in range(3):
        cat = repos.categories.save(Category(course_id=course.id, name=f"Cat {i}", weight=10))
        for j in range(2):
            repos.assignments.save(Assignment(category_id=cat.id, name=f"A{j}", score=j, max_score=5))
    course_id = course.id

    repos.courses.delete(course)

    assert db.execute("SELECT COUNT(*) FROM categories WHERE course_id=?", (course_id,)).fetchone()[0] == 0
    orphaned = db.execute(
        "SELECT COUNT(*) FROM assignments WHERE category_id NOT IN (SELECT id FROM categories)"
    ).fetchone()[0]
    assert orphaned == 0
    assert repos.categories.count() == 1
    assert repos.assignments.count() == 1


def test_delete_category_cascades_to_assignments(repos) -> None:
    course = _course(repos)
    cat = repos.categories.save(Category(course_id=course.id, name="HW", weight=10))
    repos.assignments.save(Assignment(category_id=cat.id, name="HW1", score=1, max_score=2))
    repos.categories.delete_by_id(cat.id)
    assert repos.assignments.count() == 0
    assert repos.courses.count() == 1


def test_delete_all_cascades(repos) -> None:
    for name in ["A", "B"]:
        course = _course(repos, name=name)
        cat = repos.categories.save(Category(course_id=course.id, name="C", weight=10))
        repos.assignments.save(Assignment(category_id=cat.id, name="x", score=1, max_score=2))

    assert repos.courses.delete_all() == 2
    assert repos.categories.count() == 0
    assert repos.assignments.count() == 0


def test_foreign_key_violation_surfaces_as_storage_error(repos) -> None:
    with pytest.raises(StorageError):
        repos.categories.create(Category(course_id=4242, name="Orphan", weight=10))
    assert repos.categories.count() == 0


class FlakyCommitDatabase(SQLiteDatabase):
    """Lässt den nächsten `commit()` einmalig mit `StorageError` scheitern."""

    fail_next_commit = False

    def commit(self) -> None:
        if self.fail_next_commit:
            self.fail_next_commit = False
            raise StorageError("disk I/O error")
        super().commit()


def test_failed_commit_rolls_back_pending_write() -> None:
    db = FlakyCommitDatabase(connect(":memory:").conn)
    create_schema(db)
    repos = build_repositories(db)
    try:
        db.fail_next_commit = True
        ghost = Course(name="Ghost")
        with pytest.raises(StorageError):
            repos.courses.create(ghost)
        assert ghost.id == 0

        repos.courses.create(Course(name="Real"))
        assert [c.name for c in repos.courses.get_all()] == ["Real"]
    finally:
        db.close()
