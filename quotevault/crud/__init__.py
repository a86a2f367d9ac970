"""Data-access layer over the document store."""

from quotevault.crud.activity import ActivityCRUD
from quotevault.crud.base import BaseCRUD, matches_filters
from quotevault.crud.quote import QuoteCRUD
from quotevault.crud.user import UserCRUD

__all__ = ["ActivityCRUD", "BaseCRUD", "QuoteCRUD", "UserCRUD", "matches_filters"]
