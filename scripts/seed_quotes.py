"""
Seed script to populate the persistent store with sample quotes.
Run: python scripts/seed_quotes.py --data-dir ./data [--keep-existing]
"""

import argparse
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from quotevault.config import get_settings
from quotevault.crud.quote import QuoteCRUD
from quotevault.models.quote import QuoteModel
from quotevault.services.local_store import LocalStore
from quotevault.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


# ── Sample Quotes ───────────────────────────────────────────────────

SAMPLE_QUOTES = [
    {
        "text": "The only way to do great work is to love what you do.",
        "author": "Steve Jobs",
        "tags": ["inspiration", "work", "passion"],
    },
    {
        "text": "Life is what happens when you're busy making other plans.",
        "author": "John Lennon",
        "tags": ["life", "planning"],
    },
    {
        "text": "The future belongs to those who believe in the beauty of their dreams.",
        "author": "Eleanor Roosevelt",
        "tags": ["future", "dreams", "belief"],
    },
    {
        "text": "Success is not final, failure is not fatal: It is the courage to continue that counts.",
        "author": "Winston Churchill",
        "tags": ["success", "failure", "courage"],
    },
    {
        "text": "In the middle of difficulty lies opportunity.",
        "author": "Albert Einstein",
        "tags": ["opportunity", "difficulty", "challenge"],
    },
    {
        "text": "Believe you can and you're halfway there.",
        "author": "Theodore Roosevelt",
        "tags": ["belief", "confidence"],
    },
    {
        "text": "The best way to predict the future is to create it.",
        "author": "Peter Drucker",
        "tags": ["future", "creation"],
    },
    {
        "text": "It does not matter how slowly you go as long as you do not stop.",
        "author": "Confucius",
        "tags": ["perseverance", "progress"],
    },
    {
        "text": "Everything you've ever wanted is on the other side of fear.",
        "author": "George Addair",
        "tags": ["fear", "desire", "courage"],
    },
    {
        "text": "The only limit to our realization of tomorrow will be our doubts of today.",
        "author": "Franklin D. Roosevelt",
        "tags": ["doubt", "limitation", "future"],
    },
]


def seed_quotes(store: LocalStore, keep_existing: bool = False) -> int:
    """Insert the sample quotes, clearing existing ones unless asked not to. Returns the number inserted."""
    if not keep_existing:
        store.clear("quotes")
        logger.info("Cleared existing quotes")

    quotes = QuoteCRUD(store)
    for item in SAMPLE_QUOTES:
        quotes.create(QuoteModel(**item))

    logger.info(f"Inserted {len(SAMPLE_QUOTES)} quotes")
    return len(SAMPLE_QUOTES)


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Seed the QuoteVault store with sample quotes")
    parser.add_argument("--data-dir", default=settings.data_dir or "./data", help="Store directory")
    parser.add_argument("--keep-existing", action="store_true", help="Do not delete existing quotes")
    args = parser.parse_args()

    configure_logging(debug=settings.debug)
    seed_quotes(LocalStore(args.data_dir), keep_existing=args.keep_existing)


if __name__ == "__main__":
    main()
