"""SQLite database operations.

Handles database connection, session management, and CRUD operations
for set records.
"""

import logging
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, literal_column, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import DEFAULT_DB_PATH
from .models import Base, LegoSet
from .schemas import SetCreate, SetUpdate

logger = logging.getLogger(__name__)


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     BRICKVAULT_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get("BRICKVAULT_DB_PATH", str(DEFAULT_DB_PATH))

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # In-memory databases need a single shared connection
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        # Register preference models with Base
        from ..preferences.models import UserPreference  # noqa: F401

        Base.metadata.create_all(self.engine)
        logger.debug("Tables ready at %s", self.db_path)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Set Operations
    # ========================================================================

    def create_set(self, data: SetCreate, session: Optional[Session] = None) -> LegoSet:
        """Create a new set record."""

        def _create(s: Session) -> LegoSet:
            lego_set = LegoSet(
                collection_id=data.collection_id,
                set_number=data.set_number,
                name=data.name,
                theme=data.theme,
                subtheme=data.subtheme,
                piece_count=data.piece_count,
                year=data.year,
                image_url=data.image_url,
                status=data.status.value,
                has_been_assembled=data.has_been_assembled,
                occasion=data.occasion,
                date_received=data.date_received.isoformat() if data.date_received else None,
                notes=data.notes,
                data_source=data.data_source.value,
            )
            lego_set.set_owners(data.owners)
            s.add(lego_set)
            s.flush()
            return lego_set

        if session:
            return _create(session)
        else:
            with self.get_session() as s:
                lego_set = _create(s)
                s.expunge(lego_set)
                return lego_set

    def get_set(self, set_id: str, session: Optional[Session] = None) -> Optional[LegoSet]:
        """Get a set by ID."""

        def _get(s: Session) -> Optional[LegoSet]:
            return s.get(LegoSet, set_id)

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                lego_set = _get(s)
                if lego_set:
                    s.expunge(lego_set)
                return lego_set

    def get_set_by_number(
        self, set_number: str, session: Optional[Session] = None
    ) -> Optional[LegoSet]:
        """Get the first set with a given catalog number."""

        def _get(s: Session) -> Optional[LegoSet]:
            stmt = select(LegoSet).where(LegoSet.set_number == set_number)
            return s.execute(stmt).scalars().first()

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                lego_set = _get(s)
                if lego_set:
                    s.expunge(lego_set)
                return lego_set

    def get_all_sets(
        self, collection_id: Optional[str] = None, session: Optional[Session] = None
    ) -> list[LegoSet]:
        """Get all sets, in insertion order.

        The home sections rely on this order for their unsorted views.
        """

        def _get(s: Session) -> list[LegoSet]:
            stmt = select(LegoSet)
            if collection_id:
                stmt = stmt.where(LegoSet.collection_id == collection_id)
            # rowid follows insert order even when created_at values collide
            stmt = stmt.order_by(literal_column("sets.rowid"))
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                sets = _get(s)
                for lego_set in sets:
                    s.expunge(lego_set)
                return sets

    def update_set(
        self, set_id: str, update: SetUpdate, session: Optional[Session] = None
    ) -> Optional[LegoSet]:
        """Update a set record."""

        def _update(s: Session) -> Optional[LegoSet]:
            lego_set = s.get(LegoSet, set_id)
            if not lego_set:
                return None

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if field == "owners":
                    lego_set.set_owners(value or [])
                elif field == "date_received":
                    lego_set.date_received = value.isoformat() if value else None
                elif field == "status" and value:
                    lego_set.status = value.value
                    if value.value == "assembled":
                        lego_set.has_been_assembled = True
                else:
                    setattr(lego_set, field, value)

            lego_set.updated_at = datetime.now(timezone.utc).isoformat()
            s.flush()
            return lego_set

        if session:
            return _update(session)
        else:
            with self.get_session() as s:
                lego_set = _update(s)
                if lego_set:
                    s.expunge(lego_set)
                return lego_set

    def delete_set(self, set_id: str, session: Optional[Session] = None) -> bool:
        """Delete a set record."""

        def _delete(s: Session) -> bool:
            lego_set = s.get(LegoSet, set_id)
            if not lego_set:
                return False
            s.delete(lego_set)
            return True

        if session:
            return _delete(session)
        else:
            with self.get_session() as s:
                return _delete(s)


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
