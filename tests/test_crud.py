from datetime import datetime, timedelta, timezone

import pytest

from quotevault.crud.base import matches_filters
from quotevault.models.activity import ActivityModel, ActivityType
from quotevault.models.quote import QuoteModel
from quotevault.models.user import UserModel
from quotevault.utils.exceptions import DuplicateKeyError, NotFoundError
from quotevault.utils.filters import parse_query_filters


class TestMatchesFilters:
    doc = {
        "author": "Confucius",
        "tags": ["life", "wisdom"],
        "views": 12,
        "created_at": datetime(2024, 1, 15, tzinfo=timezone.utc),
    }

    def test_equality(self):
        assert matches_filters(self.doc, {"author": "Confucius"})
        assert not matches_filters(self.doc, {"author": "Seneca"})

    def test_scalar_against_list_field(self):
        assert matches_filters(self.doc, {"tags": "life"})
        assert not matches_filters(self.doc, {"tags": "work"})

    def test_list_filter_matches_any(self):
        assert matches_filters(self.doc, {"tags": ["work", "wisdom"]})
        assert matches_filters(self.doc, {"author": ["Seneca", "Confucius"]})
        assert not matches_filters(self.doc, {"tags": ["work", "money"]})

    def test_ranges(self):
        assert matches_filters(self.doc, {"views": {"$gte": 10, "$lte": 12}})
        assert not matches_filters(self.doc, {"views": {"$gt": 12}})

    def test_date_range_from_query(self):
        filters = parse_query_filters({"created_at[gte]": "2024-01-01", "created_at[lt]": "2024-02-01"})

        assert matches_filters(self.doc, filters)

    def test_incomparable_range_is_no_match(self):
        assert not matches_filters(self.doc, {"author": {"$gte": 5}})
        assert not matches_filters(self.doc, {"missing": {"$gte": 5}})

    def test_empty_filters_match(self):
        assert matches_filters(self.doc, {})


class TestQuoteCRUD:
    def test_search_is_newest_first(self, quote_crud, quotes):
        assert [q.id for q in quote_crud.search()] == [q.id for q in reversed(quotes)]

    def test_search_text_and_author(self, quote_crud, quotes):
        assert [q.author for q in quote_crud.search(search="LENNON")] == ["John Lennon"]
        assert [q.author for q in quote_crud.search(search="great work")] == ["Steve Jobs"]

    def test_search_with_filters(self, quote_crud, quotes):
        result = quote_crud.search(parse_query_filters({"views[gte]": "5"}))

        assert {q.author for q in result} == {"Steve Jobs", "John Lennon"}

    def test_unknown_filter_fields_are_ignored(self, quote_crud, quotes):
        assert len(quote_crud.find({"colour": "blue"})) == 3

    def test_get_by_tag(self, quote_crud, quotes):
        assert [q.author for q in quote_crud.get_by_tag(" Dreams ")] == ["Eleanor Roosevelt"]

    def test_get_random(self, quote_crud, quotes):
        assert quote_crud.get_random().id in {q.id for q in quotes}
        assert quote_crud.get_random("work").author == "Steve Jobs"
        assert quote_crud.get_random("nothing") is None

    def test_increment_views(self, quote_crud, quotes):
        quote = quote_crud.increment_views(quotes[0].id)

        assert quote.views == 6
        assert quote_crud.get_by_id(quotes[0].id).views == 6
        assert quote_crud.increment_views("0" * 24) is None

    def test_most_viewed(self, quote_crud, quotes):
        assert [q.views for q in quote_crud.most_viewed(2)] == [12, 5]

    def test_get_many_keeps_order_and_skips_missing(self, quote_crud, quotes):
        ids = [quotes[2].id, "0" * 24, quotes[0].id]

        assert [q.id for q in quote_crud.get_many(ids)] == [quotes[2].id, quotes[0].id]

    def test_update_sets_updated_at(self, quote_crud, quotes):
        updated = quote_crud.update(quotes[0].id, {"author": "S. Jobs"})

        assert updated.author == "S. Jobs"
        assert updated.updated_at is not None
        assert quote_crud.update("0" * 24, {"author": "x"}) is None

    def test_tags_are_normalized(self, quote_crud):
        quote = quote_crud.create(QuoteModel(text="Hi", author="Me", tags=[" Life", "life", "WORK", ""]))

        assert quote.tags == ["life", "work"]


class TestUserCRUD:
    def test_get_by_email_is_case_insensitive(self, user_crud, user):
        assert user_crud.get_by_email("USER@example.com").id == user.id
        assert user_crud.get_by_email("nobody@example.com") is None

    def test_duplicate_email(self, user_crud, user, password_hash):
        with pytest.raises(DuplicateKeyError) as exc_info:
            user_crud.create_user(UserModel(email="User@Example.com", password_hash=password_hash))

        assert exc_info.value.key_value == {"email": "user@example.com"}

    def test_update_profile_only_touches_profile_fields(self, user_crud, user):
        updated = user_crud.update_profile(user.id, {
            "display_name": "Updated Name",
            "email": "new@example.com",
            "role": "admin",
            "bio": None,
        })

        assert updated.display_name == "Updated Name"
        assert updated.email == "user@example.com"
        assert updated.role == "user"
        assert updated.bio == "Test bio"

    def test_update_profile_missing_user(self, user_crud):
        with pytest.raises(NotFoundError):
            user_crud.update_profile("0" * 24, {"bio": "x"})

    def test_favorites(self, user_crud, user, quotes):
        user_crud.add_favorite(user.id, quotes[0].id)
        user_crud.add_favorite(user.id, quotes[1].id)

        assert user_crud.is_favorite(user.id, quotes[0].id)
        with pytest.raises(DuplicateKeyError, match="already in favorites"):
            user_crud.add_favorite(user.id, quotes[0].id)

        updated = user_crud.remove_favorite(user.id, quotes[0].id)
        assert updated.favorites == [quotes[1].id]
        with pytest.raises(NotFoundError, match="not found in favorites"):
            user_crud.remove_favorite(user.id, quotes[0].id)

    def test_remove_quote_everywhere(self, user_crud, make_user, user, quotes):
        other = make_user("other@example.com")
        user_crud.add_favorite(user.id, quotes[0].id)
        user_crud.add_favorite(other.id, quotes[0].id)
        user_crud.add_favorite(other.id, quotes[1].id)

        assert user_crud.remove_quote_everywhere(quotes[0].id) == 2
        assert user_crud.get_by_id(user.id).favorites == []
        assert user_crud.get_by_id(other.id).favorites == [quotes[1].id]

    def test_touch_last_login_and_set_role(self, user_crud, user):
        assert user_crud.touch_last_login(user.id).last_login is not None
        assert user_crud.set_role(user.id, "admin").is_admin

    def test_search_users(self, user_crud, make_user):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        ada = make_user("ada@example.com", display_name="Ada Lovelace", created_at=base)
        grace = make_user("grace@example.com", display_name="Grace Hopper", role="admin", created_at=base + timedelta(days=1))

        assert [u.id for u in user_crud.search()] == [grace.id, ada.id]
        assert [u.id for u in user_crud.search(search="LOVELACE")] == [ada.id]
        assert [u.id for u in user_crud.search(search="grace@")] == [grace.id]
        assert [u.id for u in user_crud.search({"role": "admin"})] == [grace.id]


class TestActivityCRUD:
    def _log(self, activity_crud, user_id, quote_id, type_, when):
        return activity_crud.create(
            ActivityModel(user_id=user_id, quote_id=quote_id, type=type_, timestamp=when)
        )

    def test_list_for_user_newest_first(self, activity_crud, user, quotes):
        base = datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
        for offset in range(3):
            self._log(activity_crud, user.id, quotes[offset].id, ActivityType.VIEW, base + timedelta(days=offset))
        self._log(activity_crud, "someone-else", quotes[0].id, ActivityType.VIEW, base)

        result = activity_crud.list_for_user(user.id)

        assert [a.quote_id for a in result] == [quotes[2].id, quotes[1].id, quotes[0].id]

    def test_list_for_user_with_filters(self, activity_crud, user, quotes):
        base = datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
        self._log(activity_crud, user.id, quotes[0].id, ActivityType.VIEW, base)
        self._log(activity_crud, user.id, quotes[0].id, ActivityType.SHARE, base)
        self._log(activity_crud, user.id, quotes[1].id, ActivityType.VIEW, base + timedelta(days=5))

        shares = activity_crud.list_for_user(user.id, parse_query_filters({"type": "share"}))
        recent = activity_crud.list_for_user(user.id, parse_query_filters({"timestamp[gte]": "2024-03-03"}))
        hijack = activity_crud.list_for_user(user.id, {"user_id": "someone-else"})

        assert [a.type for a in shares] == [ActivityType.SHARE]
        assert [a.quote_id for a in recent] == [quotes[1].id]
        assert len(hijack) == 3

    def test_recent_spans_users(self, activity_crud, user, quotes):
        base = datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
        self._log(activity_crud, user.id, quotes[0].id, ActivityType.VIEW, base)
        self._log(activity_crud, "someone-else", quotes[1].id, ActivityType.SHARE, base + timedelta(days=1))

        assert [a.user_id for a in activity_crud.recent()] == ["someone-else", user.id]
        assert [a.user_id for a in activity_crud.recent({"type": "view"})] == [user.id]

    def test_activity_dates_are_utc(self, activity_crud, user, quotes):
        late = datetime(2024, 3, 2, 1, tzinfo=timezone(timedelta(hours=3)))
        self._log(activity_crud, user.id, quotes[0].id, ActivityType.VIEW, late)

        assert activity_crud.activity_dates(user.id) == ["2024-03-01"]

    def test_log_and_delete_for_user(self, activity_crud, user, quotes):
        activity_crud.log_activity(user.id, ActivityType.FAVORITE, quotes[0].id)
        activity_crud.log_activity(user.id, ActivityType.VIEW, quotes[1].id)

        assert activity_crud.count({"user_id": user.id}) == 2
        assert activity_crud.delete_for_user(user.id) == 2
        assert activity_crud.list_for_user(user.id) == []
