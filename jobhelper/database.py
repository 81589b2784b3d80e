"""
SQLite-backed key-value store.

Uses SQLAlchemy with one row per slot; values are stored as JSON text.
"""

import json
import threading
from datetime import datetime
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class Slot(Base):
    """One named slot of the key-value store."""

    __tablename__ = "slots"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)  # JSON document
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()


class SqliteStore:
    """Key-value store over the `slots` table; creates the database on first use."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        init_database(self.db_path)
        engine = create_engine(f"sqlite:///{self.db_path}")
        self._Session = sessionmaker(bind=engine)
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            session = self._Session()
            try:
                slot = session.get(Slot, key)
                return json.loads(slot.value) if slot is not None else None
            finally:
                session.close()

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        with self._lock:
            session = self._Session()
            try:
                slot = session.get(Slot, key)
                if slot is None:
                    session.add(Slot(key=key, value=payload))
                else:
                    slot.value = payload
                session.commit()
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()

    def keys(self):
        with self._lock:
            session = self._Session()
            try:
                return [row.key for row in session.query(Slot).order_by(Slot.key).all()]
            finally:
                session.close()
