"""Pytest configuration and shared fixtures.

This module provides fixtures for testing brickvault, including
temporary databases and sample set collections.
"""

import itertools
import os
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from brickvault.config import reset_config
from brickvault.db.schemas import SetCreate, SetResponse, SetStatus
from brickvault.db.sqlite import Database, reset_db


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture(scope="function")
def db(temp_db_path: Path) -> Generator[Database, None, None]:
    """Create a test database instance."""
    reset_db()
    reset_config()

    os.environ["BRICKVAULT_DB_PATH"] = str(temp_db_path)

    database = Database(str(temp_db_path))
    database.create_tables()
    yield database

    # Cleanup
    database.engine.dispose()
    reset_db()
    if "BRICKVAULT_DB_PATH" in os.environ:
        del os.environ["BRICKVAULT_DB_PATH"]


@pytest.fixture
def memory_db() -> Database:
    """Create an in-memory database."""
    database = Database(":memory:")
    database.create_tables()
    return database


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def make_set() -> Callable[..., SetResponse]:
    """Factory for in-memory set records with sequential IDs."""
    counter = itertools.count(1)

    def _make(**overrides) -> SetResponse:
        n = next(counter)
        data = {
            "id": f"set-{n}",
            "set_number": f"{10000 + n}-1",
            "name": f"Set {n}",
            "status": SetStatus.UNOPENED,
        }
        data.update(overrides)
        return SetResponse(**data)

    return _make


@pytest.fixture
def sample_sets(make_set) -> list[SetResponse]:
    """A small, varied collection."""
    return [
        make_set(
            name="Millennium Falcon",
            theme="Star Wars",
            piece_count=7541,
            year=2017,
            status=SetStatus.ASSEMBLED,
            date_received="2023-12-25",
        ),
        make_set(
            name="Galaxy Explorer",
            theme="Icons",
            piece_count=1254,
            year=2022,
            status=SetStatus.UNOPENED,
            date_received="2024-03-10",
        ),
        make_set(
            name="Razor Crest",
            theme="star wars",
            piece_count=6187,
            year=2022,
            status=SetStatus.IN_PROGRESS,
            date_received="2024-01-05",
        ),
        make_set(
            name="Lamborghini Sian",
            theme="Technic",
            piece_count=3696,
            year=2020,
            status=SetStatus.DISASSEMBLED,
        ),
        make_set(
            name="Town Square",
            theme="City",
            piece_count=None,
            year=None,
            status=SetStatus.REBUILD_IN_PROGRESS,
            date_received="2022-06-01",
        ),
        make_set(
            name="Bonsai Tree",
            theme="Icons",
            piece_count=878,
            year=2021,
            status=SetStatus.ASSEMBLED,
        ),
    ]


@pytest.fixture
def sample_set_data() -> SetCreate:
    """Create sample set data for database tests."""
    return SetCreate(
        set_number="75192-1",
        name="Millennium Falcon",
        theme="Star Wars",
        piece_count=7541,
        year=2017,
        status=SetStatus.ASSEMBLED,
        owners=["Ryan", "Alyssa"],
    )
