"""Most-viewed quotes, cached for a short time."""

import threading
from typing import Dict, List

import cachetools

from quotevault.crud.quote import QuoteCRUD
from quotevault.models.quote import QuoteModel
from quotevault.utils.logger import get_logger

logger = get_logger(__name__)


class PopularQuotesService:
    """Serves the most viewed quotes from a TTL cache."""

    CACHE_MAX_SIZE = 100

    def __init__(self, quotes: QuoteCRUD, ttl_seconds: int = 300):
        """
        Initialize the service.

        Args:
            quotes: Quote data access
            ttl_seconds: How long a computed ranking is reused
        """
        self._quotes = quotes
        self._cache = cachetools.TTLCache(maxsize=self.CACHE_MAX_SIZE, ttl=ttl_seconds)
        self._cache_lock = threading.Lock()

    def get_popular(self, limit: int = 10) -> List[dict]:
        """
        Get the most viewed quotes as plain records.

        Args:
            limit: Maximum number of quotes

        Returns:
            Quotes ordered by view count, highest first
        """
        cache_key = limit
        with self._cache_lock:
            if cache_key in self._cache:
                logger.debug("Returning cached popular quotes")
                return self._cache[cache_key]

        results = [quote.to_dict() for quote in self._quotes.most_viewed(limit)]

        with self._cache_lock:
            self._cache[cache_key] = results
        logger.info(f"Popular quotes computed: {len(results)} items")
        return results

    def note_view(self, quote: QuoteModel) -> None:
        """
        Drop cached rankings that a new view of ``quote`` could reorder.

        A ranking is affected when it already lists the quote, has room for
        more entries, or the quote now has at least as many views as its last entry.
        """
        with self._cache_lock:
            for limit, ranking in list(self._cache.items()):
                listed = any(item["id"] == quote.id for item in ranking)
                if listed or len(ranking) < limit or quote.views >= ranking[-1]["views"]:
                    self._cache.pop(limit, None)

    def clear_cache(self) -> None:
        """Drop cached rankings, e.g. after a quote is created, edited or deleted."""
        with self._cache_lock:
            self._cache.clear()
        logger.debug("Popular quotes cache cleared")

    def get_cache_stats(self) -> Dict:
        """Get statistics about the cache."""
        with self._cache_lock:
            return {
                "size": len(self._cache),
                "max_size": self._cache.maxsize,
                "ttl_seconds": self._cache.ttl,
            }
