"""
QuoteVault Models
Store document representations and data models.
"""

from quotevault.models.quote import QuoteModel
from quotevault.models.user import UserModel
from quotevault.models.activity import ActivityModel, ActivityType

__all__ = [
    "QuoteModel",
    "UserModel",
    "ActivityModel",
    "ActivityType",
]
