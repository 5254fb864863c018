"""
Aurora Requirement Store
SQLite-backed requirement set, keyed by requirement ID

The store is loaded from its file when it exists and created otherwise.
Changes are made to the in-memory records and written back in a single
transaction by save(). Only new or modified records are written, so
updated_at moves only for requirements that actually changed. Records are
never deleted.

Usage:
    from aurora_tools.requirements.persistence import RequirementStore

    store = RequirementStore.open("ModelData/Aurora_Requirements.db")
    req = store.find("R-100") or store.add("R-100", "Title")
    req.description = "The vehicle shall..."
    store.save()
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class RequirementRecord:
    """Requirement record from the store"""
    id: str
    summary: str = ""
    description: str = ""
    rationale: str = ""
    keywords: List[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    def content(self) -> tuple:
        """Fields that count as a change to the requirement"""
        return (self.summary, self.description, self.rationale, tuple(self.keywords))


class RequirementStore:
    """
    File-backed requirement set.

    Lookups and edits work on the loaded records; nothing reaches the
    file until save() is called.
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Initialize the store, creating the file if it does not exist.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)
        self.is_new = not self.db_path.exists()
        self._records: Dict[str, RequirementRecord] = {}
        # Content of each record as last read from or written to the file
        self._saved: Dict[str, tuple] = {}

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()
        if not self.is_new:
            self._load()

    @classmethod
    def open(cls, db_path: Union[str, Path]) -> "RequirementStore":
        """Load an existing requirement set or create a new one"""
        path = Path(db_path)
        if path.exists():
            logger.info(f"Loading existing requirement set: {path}")
        else:
            logger.info(f"Creating new requirement set: {path}")
        return cls(path)

    @contextmanager
    def _get_connection(self):
        """Get a database connection with automatic cleanup"""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self):
        """Initialize database schema"""
        with self._get_connection() as conn:
            conn.executescript('''
                CREATE TABLE IF NOT EXISTS requirements (
                    id TEXT PRIMARY KEY,
                    summary TEXT NOT NULL DEFAULT '',
                    description TEXT DEFAULT '',
                    rationale TEXT DEFAULT '',
                    keywords TEXT DEFAULT '[]',
                    position INTEGER NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            ''')

    def _load(self):
        with self._get_connection() as conn:
            rows = conn.execute(
                'SELECT * FROM requirements ORDER BY position, id'
            ).fetchall()

        for row in rows:
            self._records[row['id']] = RequirementRecord(
                id=row['id'],
                summary=row['summary'],
                description=row['description'] or "",
                rationale=row['rationale'] or "",
                keywords=json.loads(row['keywords'] or '[]'),
                created_at=row['created_at'],
                updated_at=row['updated_at']
            )
            self._saved[row['id']] = self._records[row['id']].content()

    # ============== Requirement Operations ==============

    def find(self, req_id: str) -> Optional[RequirementRecord]:
        """Get a requirement by ID"""
        return self._records.get(req_id)

    def add(self, req_id: str, summary: str = "") -> RequirementRecord:
        """
        Add a new requirement.

        Raises:
            ValueError: If the ID is empty or already present
        """
        if not req_id:
            raise ValueError("Requirement ID must not be empty")
        if req_id in self._records:
            raise ValueError(f"Requirement already exists: {req_id}")

        now = datetime.now().isoformat()
        record = RequirementRecord(id=req_id, summary=summary, created_at=now, updated_at=now)
        self._records[req_id] = record
        return record

    def list_requirements(self) -> List[RequirementRecord]:
        """All requirements in insertion order"""
        return list(self._records.values())

    def changed(self) -> List[str]:
        """IDs of records that are new or modified since the last load or save"""
        return [
            req_id for req_id, record in self._records.items()
            if self._saved.get(req_id) != record.content()
        ]

    def save(self) -> int:
        """
        Write new and modified records to the file in one transaction.

        Returns:
            Number of records written
        """
        now = datetime.now().isoformat()
        changed = set(self.changed())

        with self._get_connection() as conn:
            for position, record in enumerate(self._records.values()):
                if record.id not in changed:
                    continue
                record.updated_at = now
                conn.execute('''
                    INSERT OR REPLACE INTO requirements (
                        id, summary, description, rationale, keywords,
                        position, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ''', (
                    record.id,
                    record.summary,
                    record.description,
                    record.rationale,
                    json.dumps(record.keywords),
                    position,
                    record.created_at or now,
                    now
                ))

        for req_id in changed:
            self._saved[req_id] = self._records[req_id].content()

        self.is_new = False
        return len(changed)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RequirementRecord]:
        return iter(list(self._records.values()))

    def __contains__(self, req_id: object) -> bool:
        return req_id in self._records
