"""
Document store for quotes, users and activities.
In-memory dict store with Firestore-style references; when a data directory
is configured every collection is persisted there as JSON and reloaded on start.
"""

import json
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from quotevault.utils.logger import get_logger
from quotevault.utils.text import new_object_id

logger = get_logger(__name__)

COLLECTIONS = ("quotes", "users", "activities")


def _json_serial(obj):
    """JSON serializer for objects not serializable by default."""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    raise TypeError(f"Type {type(obj)} not serializable")


class LocalStore:
    """Thread-safe document store that mimics Firestore operations."""

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        self.collections: Dict[str, Dict[str, dict]] = {name: {} for name in COLLECTIONS}
        self._lock = threading.RLock()
        self._data_dir = Path(data_dir) if data_dir else None

        if self._data_dir is not None:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self._load_data()

    @property
    def persistent(self) -> bool:
        return self._data_dir is not None

    def _load_data(self):
        """Load every JSON collection file found in the data directory."""
        for path in sorted(self._data_dir.glob("*.json")):
            with open(path) as f:
                items = json.load(f)
            self.collections[path.stem] = {item["id"]: item for item in items}
            logger.info(f"Loaded {len(items)} documents into '{path.stem}'")

    def _persist_collection(self, name: str):
        """Write a collection to disk as JSON."""
        path = self._data_dir / f"{name}.json"
        items = list(self.collections.get(name, {}).values())
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(items, f, indent=2, default=_json_serial)
        tmp_path.replace(path)

    def _persist(self, collection_name: str):
        """Persist after write operations (no-op for in-memory stores)."""
        if self._data_dir is None:
            return
        with self._lock:
            self._persist_collection(collection_name)

    def collection(self, name: str) -> "CollectionRef":
        with self._lock:
            if name not in self.collections:
                self.collections[name] = {}
        return CollectionRef(self, name)

    def clear(self, name: Optional[str] = None):
        """Drop all documents from one collection, or from every collection."""
        names = [name] if name else list(self.collections)
        with self._lock:
            for coll_name in names:
                self.collections.get(coll_name, {}).clear()
                self._persist(coll_name)


class CollectionRef:
    """Mimics Firestore collection reference."""

    def __init__(self, store: LocalStore, name: str):
        self._store = store
        self._data = store.collections[name]
        self._name = name
        self._filters: List[Tuple[str, Any]] = []
        self._limit_val: Optional[int] = None

    def _copy(self) -> "CollectionRef":
        new_ref = CollectionRef(self._store, self._name)
        new_ref._filters = list(self._filters)
        new_ref._limit_val = self._limit_val
        return new_ref

    def document(self, doc_id: Optional[str] = None) -> "DocumentRef":
        return DocumentRef(self._store, self._data, self._name, doc_id or new_object_id())

    def where(self, field: str, op: str, value) -> "CollectionRef":
        """Filter on equality; richer queries go through ``BaseCRUD.find``."""
        if op != "==":
            raise ValueError(f"Unsupported query operator: {op}")
        new_ref = self._copy()
        new_ref._filters.append((field, value))
        return new_ref

    def limit(self, count: int) -> "CollectionRef":
        new_ref = self._copy()
        new_ref._limit_val = count
        return new_ref

    def get(self) -> List["DocumentSnapshot"]:
        with self._store._lock:
            results = [dict(doc) for doc in self._data.values()]

        for field, value in self._filters:
            results = [doc for doc in results if doc.get(field) == value]

        if self._limit_val:
            results = results[: self._limit_val]

        return [DocumentSnapshot(doc.get("id", ""), doc) for doc in results]


class DocumentRef:
    """Mimics Firestore document reference."""

    def __init__(self, store: LocalStore, collection_data: dict, collection_name: str, doc_id: str):
        self._store = store
        self._data = collection_data
        self._name = collection_name
        self._id = doc_id

    def get(self) -> "DocumentSnapshot":
        with self._store._lock:
            doc = self._data.get(self._id)
            return DocumentSnapshot(self._id, dict(doc) if doc is not None else None)

    def set(self, data: dict):
        with self._store._lock:
            self._data[self._id] = {**data, "id": self._id}
            self._store._persist(self._name)

    def delete(self) -> bool:
        with self._store._lock:
            removed = self._data.pop(self._id, None)
            self._store._persist(self._name)
            return removed is not None


class DocumentSnapshot:
    """Mimics Firestore document snapshot."""

    def __init__(self, doc_id: str, data: Optional[dict]):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[dict]:
        return self._data

