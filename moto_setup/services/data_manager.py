"""
Data Manager - Handles JSON file storage and indexed record lookups
"""

import copy
import json
import logging
import threading
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from moto_setup.config import get_data_dir

logger = logging.getLogger(__name__)


class NotFoundError(KeyError):
    """A referenced record does not exist"""

    def __init__(self, table: str, record_id: str):
        super().__init__(record_id)
        self.table = table
        self.record_id = record_id

    def __str__(self) -> str:
        return f"{self.table} record not found: {self.record_id}"


class MotorcycleNotFoundError(NotFoundError):
    def __init__(self, record_id: str):
        super().__init__("motos", record_id)


class KitNotFoundError(NotFoundError):
    def __init__(self, record_id: str):
        super().__init__("kits", record_id)


class ConfigNotFoundError(NotFoundError):
    def __init__(self, record_id: str):
        super().__init__("configs", record_id)


class DataManager:
    """Manages local JSON record storage"""

    # table name -> primary key field
    TABLES = {
        "motos": "moto_id",
        "kits": "kit_id",
        "configs": "config_id",
    }

    NOT_FOUND_ERRORS = {
        "motos": MotorcycleNotFoundError,
        "kits": KitNotFoundError,
        "configs": ConfigNotFoundError,
    }

    def __init__(self, data_dir: str = None):
        """
        Initialize DataManager

        Args:
            data_dir: Directory to store JSON files (defaults to MOTO_SETUP_DATA_DIR)
        """
        self.data_dir = Path(data_dir) if data_dir else get_data_dir()
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.motos_file = self.data_dir / "motos.json"
        self.kits_file = self.data_dir / "kits.json"
        self.configs_file = self.data_dir / "configs.json"

        self._lock = threading.RLock()
        self._depth = 0
        self._dirty = set()
        self._snapshot = None

        self._tables: Dict[str, Dict[str, Dict]] = {}
        self._last_timestamp = 0
        self._reload()

    # -------------------------------------------------------------------------
    # File I/O
    # -------------------------------------------------------------------------

    def _table_file(self, table: str) -> Path:
        return {
            "motos": self.motos_file,
            "kits": self.kits_file,
            "configs": self.configs_file,
        }[table]

    def _reload(self) -> None:
        """Re-read every table so writes start from the current file contents"""
        self._tables = {table: self._load_table(table) for table in self.TABLES}
        self._last_timestamp = max(
            [self._last_timestamp] +
            [r.get("created_at", 0) for rows in self._tables.values() for r in rows.values()]
        )

    def _sync(self) -> None:
        # Inside a transaction the in-memory tables are authoritative
        if self._depth == 0:
            self._reload()

    def _load_table(self, table: str) -> Dict[str, Dict]:
        """Load one table, keyed by primary key, in file order"""
        path = self._table_file(table)
        if not path.exists():
            return {}

        key = self.TABLES[table]
        try:
            with open(path, 'r') as f:
                rows = json.load(f)
            return {row[key]: row for row in rows}
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Error loading %s, starting empty: %s", path.name, e)
            return {}

    def _save_table(self, table: str) -> None:
        with open(self._table_file(table), 'w') as f:
            json.dump(list(self._tables[table].values()), f, indent=2)

    def _mark_dirty(self, table: str) -> None:
        self._dirty.add(table)
        if self._depth == 0:
            self._flush()

    def _flush(self) -> None:
        for table in sorted(self._dirty):
            self._save_table(table)
        self._dirty.clear()

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator['DataManager']:
        """
        Run a sequence of reads and writes as one unit.

        Re-entrant. The outermost block re-reads the files on entry, so
        changes made by other DataManager instances are picked up. Writes
        are flushed when the outermost block exits.

        Rollback happens only at the outermost block: if it raises, every
        table is restored to its state at entry. An exception raised in a
        nested block and caught by an enclosing one rolls nothing back; the
        nested writes are flushed with the rest.
        """
        with self._lock:
            if self._depth == 0:
                self._reload()
                self._snapshot = copy.deepcopy(self._tables)
            self._depth += 1
            try:
                yield self
            except Exception:
                self._depth -= 1
                if self._depth == 0:
                    self._tables = self._snapshot
                    self._snapshot = None
                    self._dirty.clear()
                raise
            else:
                self._depth -= 1
                if self._depth == 0:
                    self._snapshot = None
                    self._flush()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, table: str, record_id: str) -> Optional[Dict]:
        """Equality lookup by primary key, None when missing"""
        with self._lock:
            self._sync()
            record = self._tables[table].get(record_id)
            return dict(record) if record is not None else None

    def require(self, table: str, record_id: str) -> Dict:
        """Like get(), but raises the table's NotFoundError when missing"""
        record = self.get(table, record_id)
        if record is None:
            raise self.NOT_FOUND_ERRORS[table](record_id)
        return record

    def find(self, table: str, **equals) -> List[Dict]:
        """
        Equality lookup on any combination of fields.

        Results are ordered by creation time (oldest first), so callers never
        depend on file or dictionary order.
        """
        with self._lock:
            self._sync()
            rows = [
                dict(r) for r in self._tables[table].values()
                if all(r.get(k) == v for k, v in equals.items())
            ]
        rows.sort(key=lambda r: r.get("created_at", 0))
        return rows

    def find_first(self, table: str, **equals) -> Optional[Dict]:
        rows = self.find(table, **equals)
        return rows[0] if rows else None

    def all(self, table: str) -> List[Dict]:
        return self.find(table)

    def count(self, table: str) -> int:
        with self._lock:
            self._sync()
            return len(self._tables[table])

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _next_timestamp(self) -> int:
        """Strictly increasing epoch milliseconds"""
        now = int(time.time() * 1000)
        self._last_timestamp = max(now, self._last_timestamp + 1)
        return self._last_timestamp

    def insert(self, table: str, record: Dict) -> str:
        """
        Insert a record and return its id.

        The primary key is generated when absent. ``created_at`` is assigned
        when absent; imported records keep theirs.
        """
        key = self.TABLES[table]
        with self._lock:
            self._sync()
            row = dict(record)
            if not row.get(key):
                row[key] = uuid.uuid4().hex
            if row[key] in self._tables[table]:
                raise ValueError(f"Duplicate {key}: {row[key]}")
            if row.get("created_at"):
                self._last_timestamp = max(self._last_timestamp, row["created_at"])
            else:
                row["created_at"] = self._next_timestamp()
            self._tables[table][row[key]] = row
            self._mark_dirty(table)
            return row[key]

    def patch(self, table: str, record_id: str, fields: Dict) -> Dict:
        """Partial update; only the given keys change. Returns the new record."""
        key = self.TABLES[table]
        with self._lock:
            self._sync()
            record = self._tables[table].get(record_id)
            if record is None:
                raise self.NOT_FOUND_ERRORS[table](record_id)
            if key in fields and fields[key] != record_id:
                raise ValueError(f"Cannot change {key}")
            record.update(fields)
            self._mark_dirty(table)
            return dict(record)

    def delete(self, table: str, record_id: str) -> bool:
        """Delete a record, returning False if it did not exist"""
        with self._lock:
            self._sync()
            if self._tables[table].pop(record_id, None) is None:
                return False
            self._mark_dirty(table)
            return True

    def clear_all_data(self) -> None:
        """Clear all stored data"""
        with self._lock:
            for table in self.TABLES:
                self._tables[table] = {}
                path = self._table_file(table)
                if path.exists():
                    path.unlink()
            self._dirty.clear()

    def has_data(self) -> bool:
        """Check if any data exists"""
        with self._lock:
            self._sync()
            return any(self._tables[t] for t in self.TABLES)
