"""
Base CRUD Class
Base class for document store CRUD operations.
"""

import operator
from typing import TypeVar, Generic, List, Dict, Any, Optional, Type
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from pydantic import BaseModel

from quotevault.services.local_store import LocalStore
from quotevault.utils.filters import FilterSet
from quotevault.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

RANGE_OPERATORS = {
    "$gte": operator.ge,
    "$lte": operator.le,
    "$gt": operator.gt,
    "$lt": operator.lt,
}


def _matches_value(doc_val: Any, expected: Any) -> bool:
    if isinstance(doc_val, list):
        return expected in doc_val
    return doc_val == expected


def _compare(doc_val: Any, op: str, expected: Any) -> bool:
    compare = RANGE_OPERATORS.get(op)
    if compare is None or doc_val is None:
        return False
    try:
        return compare(doc_val, expected)
    except TypeError:
        # e.g. a date bound against a text field: not a match
        return False


def matches_filters(doc: Dict[str, Any], filters: FilterSet) -> bool:
    """
    Check whether a plain record satisfies a filter set.

    Args:
        doc: Record to test
        filters: Output of ``parse_query_filters``

    Returns:
        True if every filter matches
    """
    for field, expected in filters.items():
        doc_val = doc.get(field)

        if isinstance(expected, dict):
            if not all(_compare(doc_val, op, bound) for op, bound in expected.items()):
                return False
        elif isinstance(expected, list):
            if not any(_matches_value(doc_val, item) for item in expected):
                return False
        elif not _matches_value(doc_val, expected):
            return False

    return True


class BaseCRUD(ABC, Generic[T]):
    """
    Base CRUD class for store operations.

    Generic base class for database operations with filtering; records go in
    and out as model instances.
    """

    def __init__(self, db: LocalStore):
        """
        Initialize CRUD with a store.

        Args:
            db: LocalStore instance
        """
        self.db = db

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Get collection name. Must be implemented by subclass."""

    @property
    @abstractmethod
    def model(self) -> Type[T]:
        """Model class for documents in the collection."""

    def get_collection(self) -> Any:
        """
        Get collection reference.

        Returns:
            Collection reference
        """
        return self.db.collection(self.collection_name)

    def create(self, item: T) -> T:
        """
        Store a new document.

        Args:
            item: Model instance to store

        Returns:
            The stored model
        """
        self.get_collection().document(item.id).set(item.to_dict())
        return item

    def get_by_id(self, doc_id: str) -> Optional[T]:
        """
        Get document by ID.

        Args:
            doc_id: Document ID

        Returns:
            Model or None if not found
        """
        doc = self.get_collection().document(doc_id).get()
        if doc.exists:
            return self.model.from_dict(doc.to_dict())
        return None

    def update(self, doc_id: str, data: Dict[str, Any]) -> Optional[T]:
        """
        Update fields of a document.

        Args:
            doc_id: Document ID
            data: Fields to update

        Returns:
            Updated model, or None if the document does not exist
        """
        current = self.get_by_id(doc_id)
        if current is None:
            return None
        merged = {**current.model_dump(), **data}
        if "updated_at" in self.model.model_fields:
            merged["updated_at"] = datetime.now(timezone.utc)
        updated = self.model.model_validate(merged)
        self.get_collection().document(doc_id).set(updated.to_dict())
        return updated

    def delete(self, doc_id: str) -> bool:
        """
        Delete a document.

        Args:
            doc_id: Document ID

        Returns:
            True if deleted, False if not found
        """
        return self.get_collection().document(doc_id).delete()

    def all(self) -> List[T]:
        """Load every document in the collection."""
        return [self.model.from_dict(doc.to_dict()) for doc in self.get_collection().get()]

    def find(
        self,
        filters: Optional[FilterSet] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[T]:
        """
        List documents matching a filter set.

        Filters on fields the model does not have are ignored.

        Args:
            filters: Output of ``parse_query_filters``
            order_by: Field to order results by
            descending: Sort direction

        Returns:
            Matching models
        """
        known = {
            field: value for field, value in (filters or {}).items()
            if field in self.model.model_fields
        }
        ignored = set(filters or {}) - set(known)
        if ignored:
            logger.debug(f"Ignoring unknown filter fields on {self.collection_name}: {sorted(ignored)}")

        items = [item for item in self.all() if matches_filters(item.model_dump(), known)]

        if order_by:
            items.sort(key=lambda item: getattr(item, order_by), reverse=descending)

        return items

    def count(self, filters: Optional[FilterSet] = None) -> int:
        """
        Count documents matching filters.

        Args:
            filters: Filter set

        Returns:
            Count of matching documents
        """
        return len(self.find(filters))

    def exists(self, doc_id: str) -> bool:
        """
        Check if document exists.

        Args:
            doc_id: Document ID

        Returns:
            True if document exists
        """
        return self.get_collection().document(doc_id).get().exists
