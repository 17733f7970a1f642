"""Gemeinsame Fixtures: In-Memory-Datenbank und Service."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pytest

from GradeCalculator.src.db import connect, create_schema
from GradeCalculator.src.repositories import build_repositories
from GradeCalculator.src.services import GradebookService


@pytest.fixture
def db():
    database = connect(":memory:")
    create_schema(database)
    yield database
    database.close()


@pytest.fixture
def repos(db):
    return build_repositories(db)


@pytest.fixture
def svc(db):
    return GradebookService.from_db(db)
