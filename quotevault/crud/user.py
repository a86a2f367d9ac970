"""
User CRUD Operations
Database operations for user management.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from quotevault.crud.base import BaseCRUD
from quotevault.models.user import UserModel
from quotevault.utils.exceptions import DuplicateKeyError, NotFoundError
from quotevault.utils.filters import FilterSet

PROFILE_FIELDS = ("display_name", "bio", "location", "favorite_categories")


class UserCRUD(BaseCRUD[UserModel]):
    """CRUD operations for user documents."""

    collection_name = "users"
    model = UserModel

    def get_by_email(self, email: str) -> Optional[UserModel]:
        """
        Get user by email.

        Args:
            email: Email address (case-insensitive)

        Returns:
            User or None if not found
        """
        docs = self.get_collection().where("email", "==", email.strip().lower()).limit(1).get()
        if docs:
            return UserModel.from_dict(docs[0].to_dict())
        return None

    def create_user(self, user: UserModel) -> UserModel:
        """
        Create a new user.

        Args:
            user: UserModel instance

        Returns:
            Stored user

        Raises:
            DuplicateKeyError: If the email is already registered
        """
        with self.db._lock:
            if self.get_by_email(user.email) is not None:
                raise DuplicateKeyError(
                    {"email": user.email},
                    message="A user with this email already exists",
                )
            return self.create(user)

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> UserModel:
        """
        Update editable profile fields. Email, password and role are never touched here.

        Args:
            user_id: User ID
            changes: Candidate field updates

        Returns:
            Updated user

        Raises:
            NotFoundError: If the user does not exist
        """
        data = {key: value for key, value in changes.items() if key in PROFILE_FIELDS and value is not None}
        user = self.update(user_id, data)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def search(self, filters: Optional[FilterSet] = None, search: Optional[str] = None) -> List[UserModel]:
        """
        List users matching filters and an optional search, newest first.

        Args:
            filters: Filter set from the query string
            search: Case-insensitive text matched against email and display name

        Returns:
            Matching users
        """
        users = self.find(filters, order_by="created_at", descending=True)
        if search:
            needle = search.lower()
            users = [
                user for user in users
                if needle in user.email or needle in user.display_name.lower()
            ]
        return users

    def touch_last_login(self, user_id: str) -> Optional[UserModel]:
        """Record a successful login."""
        return self.update(user_id, {"last_login": datetime.now(timezone.utc)})

    def set_role(self, user_id: str, role: str) -> Optional[UserModel]:
        """Change a user's role."""
        return self.update(user_id, {"role": role})

    def add_favorite(self, user_id: str, quote_id: str) -> UserModel:
        """
        Add a quote to the user's favorites.

        Raises:
            NotFoundError: If the user does not exist
            DuplicateKeyError: If the quote is already a favorite
        """
        with self.db._lock:
            user = self.get_by_id(user_id)
            if user is None:
                raise NotFoundError("User not found")
            if quote_id in user.favorites:
                raise DuplicateKeyError(
                    {"favorites": quote_id},
                    message="Quote already in favorites",
                )
            return self.update(user_id, {"favorites": [*user.favorites, quote_id]})

    def remove_favorite(self, user_id: str, quote_id: str) -> UserModel:
        """
        Remove a quote from the user's favorites.

        Raises:
            NotFoundError: If the user does not exist or the quote is not a favorite
        """
        with self.db._lock:
            user = self.get_by_id(user_id)
            if user is None:
                raise NotFoundError("User not found")
            if quote_id not in user.favorites:
                raise NotFoundError("Quote not found in favorites")
            return self.update(user_id, {"favorites": [fid for fid in user.favorites if fid != quote_id]})

    def is_favorite(self, user_id: str, quote_id: str) -> bool:
        """Check whether a quote is among the user's favorites."""
        user = self.get_by_id(user_id)
        return user is not None and quote_id in user.favorites

    def remove_quote_everywhere(self, quote_id: str) -> int:
        """Drop a deleted quote from every user's favorites. Returns the number of users changed."""
        changed = 0
        with self.db._lock:
            for user in self.all():
                if quote_id in user.favorites:
                    self.update(user.id, {"favorites": [fid for fid in user.favorites if fid != quote_id]})
                    changed += 1
        return changed
