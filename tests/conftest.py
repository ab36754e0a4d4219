"""Shared pytest fixtures."""

from datetime import datetime, timezone

import pytest

from dossier_import.domain.models import ImportDocument
from dossier_import.logging.context import clear_log_context
from dossier_import.persistence.database import close_database, init_database

from tests.helpers.dossiers import build_payload, load_raw_dossiers


@pytest.fixture
def fixed_now():
    """Reference time used for generated dates."""
    return datetime(2026, 10, 18, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def raw_dossiers():
    """Named raw dossier texts from tests/fixtures/raw_dossiers.yaml."""
    return load_raw_dossiers()


@pytest.fixture
def complete_document():
    """All canonical domains with five data keys, four sources, two fables."""
    return ImportDocument.model_validate(build_payload())


@pytest.fixture
def temp_database():
    """Create a temporary in-memory database for testing."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()
