"""Tests for form input parsing."""

from __future__ import annotations

import pytest

from GradeCalculator.src.errors import ConstraintViolationError
from GradeCalculator.src.models import GradeType
from GradeCalculator.src.validation import (
    ValidationError,
    parse_grade_type,
    parse_max_score,
    parse_name,
    parse_score,
    parse_weight,
)


def test_decimal_comma_accepted() -> None:
    assert parse_score("7,5") == 7.5
    assert parse_weight(" 40 ") == 40.0


@pytest.mark.parametrize("text", ["", "abc", "nan", "inf", "-inf", "1e999"])
def test_non_numbers_rejected(text: str) -> None:
    with pytest.raises(ValidationError):
        parse_score(text)


def test_ranges() -> None:
    with pytest.raises(ValidationError):
        parse_weight("101")
    with pytest.raises(ValidationError):
        parse_score("-1")
    with pytest.raises(ValidationError):
        parse_max_score("0")
    assert parse_score("150") == 150.0


@pytest.mark.parametrize(
    "text,expected",
    [
        ("0", GradeType.TOTAL_POINTS),
        ("Total Points", GradeType.TOTAL_POINTS),
        ("1", GradeType.CATEGORY_WEIGHTED),
        ("weighted", GradeType.CATEGORY_WEIGHTED),
        ("category-weighted", GradeType.CATEGORY_WEIGHTED),
    ],
)
def test_parse_grade_type(text: str, expected: GradeType) -> None:
    assert parse_grade_type(text) is expected


def test_unknown_grade_type() -> None:
    with pytest.raises(ValidationError):
        parse_grade_type("median")


def test_validation_error_is_constraint_violation() -> None:
    with pytest.raises(ConstraintViolationError):
        parse_name("   ", field="Name")
    assert parse_name(" Quiz ", field="Name") == "Quiz"


@pytest.mark.parametrize("text", ["inf", "nan"])
def test_max_score_must_be_finite(text: str) -> None:
    with pytest.raises(ValidationError):
        parse_max_score(text)
