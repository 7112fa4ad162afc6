# catalog/database.py
"""
File-backed table store using CSV (preferred) or Excel (xlsx) files.
Every write goes through a FileLock on "<file>.lock"; read-modify-write
sequences (upsert, insert with id assignment, delete) hold the lock for
the whole sequence.

Usage:
    from catalog.database import db
    db.list_records("products")
    db.get_record("products", "id", 3)
    db.upsert_record("products", {"id": 3, "title": "Lamp"})
    db.insert_record("products", {"id": None, "title": "Desk"})
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

import pandas as pd
from filelock import FileLock

from catalog.config import settings

logger = logging.getLogger(__name__)


class FileBackedDB:
    """
    Manages CSV / Excel tables inside data_dir. A table name maps to a file
    name through settings (or you may pass the file name directly).
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir if data_dir is not None else settings.DATA_DIR)

    def file_path(self, table: str) -> Path:
        if table.endswith(".csv") or table.endswith(".xlsx"):
            return self.data_dir / table
        mapping = {
            "products": settings.PRODUCTS_FILE,
        }
        return self.data_dir / mapping.get(table, f"{table}.csv")

    def _lock_for(self, path: Path) -> FileLock:
        path.parent.mkdir(parents=True, exist_ok=True)
        return FileLock(str(path) + ".lock")

    def _read_df(self, path: Path) -> pd.DataFrame:
        if not path.exists():
            return pd.DataFrame()
        if path.suffix.lower() in (".xls", ".xlsx"):
            df = pd.read_excel(path, dtype=str)
        else:
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        return df.fillna("")

    def _write_df(self, path: Path, df: pd.DataFrame) -> None:
        # caller holds the lock
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix.lower() in (".xls", ".xlsx"):
            df.to_excel(path, index=False)
        else:
            df.to_csv(path, index=False)

    @staticmethod
    def _row(series: pd.Series) -> Dict[str, Any]:
        return {k: (None if v == "" else v) for k, v in series.to_dict().items()}

    @staticmethod
    def _mask(df: pd.DataFrame, key: str, value: Any) -> pd.Series:
        if key not in df.columns:
            return pd.Series(False, index=df.index)
        return df[key].astype(str) == str(value)

    # --- high-level primitives ---

    def list_records(self, table: str) -> List[Dict[str, Any]]:
        df = self._read_df(self.file_path(table))
        return [self._row(row) for _, row in df.iterrows()]

    def get_record(self, table: str, key: str, value: Any) -> Optional[Dict[str, Any]]:
        df = self._read_df(self.file_path(table))
        if df.empty:
            return None
        mask = self._mask(df, key, value)
        if not mask.any():
            return None
        return self._row(df[mask].iloc[0])

    @staticmethod
    def _max_id_plus_one(df: pd.DataFrame, key: str) -> int:
        if df.empty or key not in df.columns:
            return 1
        ids = pd.to_numeric(df[key], errors="coerce").dropna()
        return int(ids.max()) + 1 if not ids.empty else 1

    def next_id(self, table: str, key: str = "id") -> int:
        """Return max(existing integer ids) + 1, or 1 for an empty table."""
        return self._max_id_plus_one(self._read_df(self.file_path(table)), key)

    def _put_row(self, table: str, df: pd.DataFrame, data: Dict[str, Any], key: str) -> pd.DataFrame:
        # caller holds the lock
        new_row = {k: ("" if v is None else str(v)) for k, v in data.items()}
        mask = self._mask(df, key, data.get(key)) if not df.empty else None
        if mask is not None and mask.any():
            for col in new_row:
                if col not in df.columns:
                    df[col] = ""
            df.loc[mask, list(new_row)] = list(new_row.values())
            logger.debug("Updated %s row %s=%s", table, key, data.get(key))
        elif df.empty:
            df = pd.DataFrame([new_row])
            logger.debug("Created %s with row %s=%s", table, key, data.get(key))
        else:
            df = pd.concat([df, pd.DataFrame([new_row])], ignore_index=True, sort=False)
            logger.debug("Inserted %s row %s=%s", table, key, data.get(key))
        return df.fillna("")

    def upsert_record(self, table: str, data: Dict[str, Any], key: str = "id") -> Dict[str, Any]:
        """
        Replace the row whose `key` equals data[key], or append a new one.
        None values are stored as empty cells. Returns `data`.
        """
        path = self.file_path(table)
        with self._lock_for(path):
            df = self._put_row(table, self._read_df(path), data, key)
            self._write_df(path, df)
        return data

    def insert_record(self, table: str, data: Dict[str, Any], key: str = "id") -> Dict[str, Any]:
        """
        Append a row, assigning data[key] = max(id) + 1 when it is missing.
        The id is computed and the row written under one lock, so concurrent
        inserts never share an id. Returns a copy of `data` carrying the id.
        """
        path = self.file_path(table)
        with self._lock_for(path):
            df = self._read_df(path)
            row = dict(data)
            if row.get(key) is None:
                row[key] = self._max_id_plus_one(df, key)
            self._write_df(path, self._put_row(table, df, row, key))
        return row

    def delete_record(self, table: str, key: str, value: Any) -> bool:
        """Delete all rows where df[key] == value. Returns True if any were removed."""
        path = self.file_path(table)
        with self._lock_for(path):
            df = self._read_df(path)
            if df.empty:
                return False
            mask = self._mask(df, key, value)
            if not mask.any():
                return False
            self._write_df(path, df[~mask])
            return True


# module-level singleton for convenience
db = FileBackedDB()
