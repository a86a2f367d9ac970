"""QuoteVault: motivational quotes, favorites and activity streaks API."""

__version__ = "1.0.0"
