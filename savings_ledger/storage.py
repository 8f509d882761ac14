"""
Storage Backend Module

Provides abstract storage interface and implementations for in-memory (testing)
and SQLite (persistence). Records are plain JSON-compatible dictionaries;
amounts and timestamps are stored as JSON integers.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any, Set, Union
from datetime import datetime, timezone
from pathlib import Path
import sqlite3
import json
import threading


class StorageInterface(ABC):
    """Abstract interface for storage backends"""

    @abstractmethod
    def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Save a record to storage"""
        pass

    @abstractmethod
    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Load a record from storage"""
        pass

    @abstractmethod
    def load_all(self, table: str) -> List[Dict[str, Any]]:
        """Load all records from a table"""
        pass

    @abstractmethod
    def exists(self, table: str, record_id: str) -> bool:
        """Check if a record exists"""
        pass

    @abstractmethod
    def count(self, table: str) -> int:
        """Count records in table"""
        pass

    @abstractmethod
    def clear_table(self, table: str) -> None:
        """Clear all records from a table"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close storage connection"""
        pass


class InMemoryStorage(StorageInterface):
    """In-memory storage implementation for testing"""

    def __init__(self):
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.RLock()

    def _ensure_table(self, table: str) -> None:
        """Ensure table exists"""
        if table not in self._data:
            self._data[table] = {}

    def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Save a record to memory"""
        with self._lock:
            self._ensure_table(table)
            # Deep copy to prevent external mutation
            self._data[table][record_id] = json.loads(json.dumps(data, default=str))

    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Load a record from memory"""
        with self._lock:
            self._ensure_table(table)
            record = self._data[table].get(record_id)
            if record:
                return json.loads(json.dumps(record))
            return None

    def load_all(self, table: str) -> List[Dict[str, Any]]:
        """Load all records from a table"""
        with self._lock:
            self._ensure_table(table)
            return [json.loads(json.dumps(record)) for record in self._data[table].values()]

    def exists(self, table: str, record_id: str) -> bool:
        """Check if a record exists"""
        with self._lock:
            self._ensure_table(table)
            return record_id in self._data[table]

    def count(self, table: str) -> int:
        """Count records in table"""
        with self._lock:
            self._ensure_table(table)
            return len(self._data[table])

    def clear_table(self, table: str) -> None:
        """Clear all records from a table"""
        with self._lock:
            self._data[table] = {}

    def close(self) -> None:
        """Close storage (no-op for in-memory)"""
        pass


class SQLiteStorage(StorageInterface):
    """SQLite storage implementation for persistence"""

    def __init__(self, db_path: Union[str, Path] = ":memory:"):
        self.db_path = str(db_path)
        self._connection = sqlite3.connect(self.db_path, check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        self._tables: Set[str] = set()

        # Enable WAL mode for better concurrent access
        if self.db_path != ":memory:":
            with self._lock:
                self._connection.execute("PRAGMA journal_mode = WAL")
                self._connection.execute("PRAGMA synchronous = NORMAL")
                self._connection.commit()

    def _ensure_table(self, table: str) -> None:
        """Ensure table exists with proper schema"""
        if table in self._tables:
            return
        self._connection.execute(f"""
            CREATE TABLE IF NOT EXISTS {table} (
                id TEXT PRIMARY KEY,
                data TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        self._connection.commit()
        self._tables.add(table)

    def save(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Save a record to SQLite"""
        with self._lock:
            self._ensure_table(table)

            now = datetime.now(timezone.utc).isoformat()
            data_json = json.dumps(data, default=str)

            # Use INSERT OR REPLACE to handle updates
            self._connection.execute(f"""
                INSERT OR REPLACE INTO {table} (id, data, created_at, updated_at)
                VALUES (?, ?,
                    COALESCE((SELECT created_at FROM {table} WHERE id = ?), ?),
                    ?)
            """, (record_id, data_json, record_id, now, now))
            self._connection.commit()

    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Load a record from SQLite"""
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(f"""
                SELECT data FROM {table} WHERE id = ?
            """, (record_id,))
            row = cursor.fetchone()
            if row:
                return json.loads(row['data'])
            return None

    def load_all(self, table: str) -> List[Dict[str, Any]]:
        """Load all records from a table"""
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(f"""
                SELECT data FROM {table} ORDER BY created_at
            """)
            return [json.loads(row['data']) for row in cursor.fetchall()]

    def exists(self, table: str, record_id: str) -> bool:
        """Check if a record exists"""
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(f"""
                SELECT 1 FROM {table} WHERE id = ? LIMIT 1
            """, (record_id,))
            return cursor.fetchone() is not None

    def count(self, table: str) -> int:
        """Count records in table"""
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(f"""
                SELECT COUNT(*) as count FROM {table}
            """)
            return cursor.fetchone()['count']

    def clear_table(self, table: str) -> None:
        """Clear all records from a table"""
        with self._lock:
            self._ensure_table(table)
            self._connection.execute(f"DELETE FROM {table}")
            self._connection.commit()

    def close(self) -> None:
        """Close SQLite connection"""
        with self._lock:
            if self._connection:
                self._connection.close()
                self._connection = None


def create_storage(backend: str = "memory", database_path: str = ":memory:") -> StorageInterface:
    """Build a storage backend by name"""
    if backend == "memory":
        return InMemoryStorage()
    if backend == "sqlite":
        return SQLiteStorage(database_path)
    raise ValueError(f"Unknown storage backend '{backend}'")
