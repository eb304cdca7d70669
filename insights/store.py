from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from insights import config
from insights.table import Table

logger = logging.getLogger(__name__)


@dataclass
class StoredDataset:
    """
    Durable copy of an uploaded table.

    Only the first STORED_ROW_LIMIT rows are kept in `data`; `row_count`
    still reports the full parsed size.
    """

    id: str
    name: str
    file_name: str
    file_type: str
    row_count: int
    column_count: int
    columns: List[str]
    data: List[Dict[str, Any]]
    preview: List[Dict[str, Any]]
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_table(self) -> Table:
        """Rebuild a Table from the stored rows (for re-profiling)."""
        return Table(columns=list(self.columns), rows=[dict(r) for r in self.data])


class DatasetStore:
    """In-memory document store for parsed datasets, safe across request threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._datasets: Dict[str, StoredDataset] = {}

    def save(self, name: str, file_name: str, file_type: str, table: Table) -> StoredDataset:
        dataset = StoredDataset(
            id=uuid.uuid4().hex,
            name=name,
            file_name=file_name,
            file_type=file_type,
            row_count=table.row_count,
            column_count=table.column_count,
            columns=list(table.columns),
            data=table.head(config.STORED_ROW_LIMIT),
            preview=table.head(config.PREVIEW_ROWS),
        )
        with self._lock:
            self._datasets[dataset.id] = dataset
        logger.info("Stored dataset %s (%s, %d rows)", dataset.id, file_name, dataset.row_count)
        return dataset

    def get(self, dataset_id: str) -> StoredDataset | None:
        with self._lock:
            return self._datasets.get(dataset_id)

    def list(self) -> List[StoredDataset]:
        """All datasets, newest first."""
        with self._lock:
            datasets = list(self._datasets.values())
        # dict keeps insertion order, so reversing breaks uploaded_at ties by recency.
        return sorted(reversed(datasets), key=lambda d: d.uploaded_at, reverse=True)

    def delete(self, dataset_id: str) -> bool:
        with self._lock:
            removed = self._datasets.pop(dataset_id, None)
        return removed is not None

    def clear(self) -> None:
        with self._lock:
            self._datasets.clear()


_store_instance: DatasetStore | None = None


def get_store() -> DatasetStore:
    """Singleton-style accessor for the process-wide dataset store."""
    global _store_instance

    if _store_instance is None:
        _store_instance = DatasetStore()
    return _store_instance
