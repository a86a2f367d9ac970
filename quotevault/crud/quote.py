"""
Quote CRUD Operations
Database operations for quotes.
"""

import random
from typing import List, Optional

from quotevault.crud.base import BaseCRUD
from quotevault.models.quote import QuoteModel
from quotevault.utils.filters import FilterSet


class QuoteCRUD(BaseCRUD[QuoteModel]):
    """CRUD operations for quote documents."""

    collection_name = "quotes"
    model = QuoteModel

    def search(self, filters: Optional[FilterSet] = None, search: Optional[str] = None) -> List[QuoteModel]:
        """
        List quotes matching filters and an optional free-text search, newest first.

        Args:
            filters: Filter set from the query string
            search: Case-insensitive text matched against quote text and author

        Returns:
            Matching quotes
        """
        quotes = self.find(filters, order_by="created_at", descending=True)
        if search:
            needle = search.lower()
            quotes = [
                quote for quote in quotes
                if needle in quote.text.lower() or needle in quote.author.lower()
            ]
        return quotes

    def get_by_tag(self, tag: str) -> List[QuoteModel]:
        """Get quotes carrying a tag, newest first."""
        return self.find({"tags": tag.strip().lower()}, order_by="created_at", descending=True)

    def get_random(self, tag: Optional[str] = None) -> Optional[QuoteModel]:
        """
        Pick a random quote.

        Args:
            tag: Only pick among quotes with this tag

        Returns:
            A quote, or None if nothing matches
        """
        candidates = self.get_by_tag(tag) if tag else self.all()
        if not candidates:
            return None
        return random.choice(candidates)

    def get_many(self, quote_ids: List[str]) -> List[QuoteModel]:
        """Load quotes by ID, in the given order, skipping missing ones."""
        quotes = []
        for quote_id in quote_ids:
            quote = self.get_by_id(quote_id)
            if quote is not None:
                quotes.append(quote)
        return quotes

    def increment_views(self, quote_id: str) -> Optional[QuoteModel]:
        """
        Increment the view count of a quote.

        Args:
            quote_id: Quote ID

        Returns:
            Updated quote, or None if not found
        """
        with self.db._lock:
            quote = self.get_by_id(quote_id)
            if quote is None:
                return None
            quote.views += 1
            self.get_collection().document(quote_id).set(quote.to_dict())
            return quote

    def most_viewed(self, limit: int = 10) -> List[QuoteModel]:
        """Get the most viewed quotes."""
        return self.find(order_by="views", descending=True)[:limit]
