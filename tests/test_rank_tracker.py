"""
Tests for SERP simulation and ranking tracking
"""
import pytest

from rank_tracker import RankTracker, java_string_hash, simulate_serp_check
from models import UserSettings


class TestSerpSimulation:
    """Tests for the deterministic position simulator"""

    @pytest.mark.parametrize("text,expected", [
        ("", 0),
        ("a", 97),
        ("ab", 3105),
        ("hello", 99162322),
        ("polygenelubricants", -2147483648),
        ("🚀", 1773027),
    ])
    def test_java_string_hash(self, text, expected):
        assert java_string_hash(text) == expected

    def test_known_position(self):
        check = simulate_serp_check("hel", "lo")
        assert check.position == 43
        assert check.change == 1

    def test_example_domain_position(self):
        check = simulate_serp_check("example.com", "seo tools")
        assert (check.position, check.change) == (48, 3)

    def test_astral_characters_hash_as_surrogate_pairs(self):
        check = simulate_serp_check("example.com", "seo 🚀 tools")
        assert (check.position, check.change) == (31, 1)

    def test_minimum_hash_value(self):
        """abs() of the most negative 32-bit hash stays positive"""
        check = simulate_serp_check("polygene", "lubricants")
        assert check.position == 45
        assert check.change == -3

    def test_case_insensitive(self):
        lower = simulate_serp_check("hel", "lo")
        upper = simulate_serp_check("HEL", "LO")
        assert (upper.position, upper.change) == (lower.position, lower.change)

    def test_caller_strings_kept(self):
        check = simulate_serp_check("Example.com", "Best SEO")
        assert check.url == "Example.com"
        assert check.keyword == "Best SEO"

    def test_ranges(self):
        for i in range(200):
            check = simulate_serp_check(f"site{i}.com", f"keyword {i}")
            assert 1 <= check.position <= 99
            assert -5 <= check.change <= 5

    def test_stable_across_calls(self):
        assert simulate_serp_check("example.com", "seo") == simulate_serp_check("example.com", "seo")


class TestRankTracker:
    """Tests for RankTracker"""

    def test_track_stores_newest_first(self, db_manager):
        tracker = RankTracker(db_manager)

        first = tracker.track("example.com", "seo tools")
        second = tracker.track("example.com", "rank tracker")

        assert [r.id for r in tracker.list()] == [second.id, first.id]
        assert len(first.id) == 9
        assert first.last_checked

    def test_track_strips_input(self, db_manager):
        record = RankTracker(db_manager).track("  hel ", " lo  ")

        assert record.url == "hel"
        assert record.keyword == "lo"
        assert record.position == 43

    @pytest.mark.parametrize("url,keyword", [("", "seo"), ("example.com", "   "), (None, "seo")])
    def test_track_requires_both_fields(self, db_manager, url, keyword):
        tracker = RankTracker(db_manager)

        with pytest.raises(ValueError):
            tracker.track(url, keyword)
        assert tracker.list() == []

    def test_remove(self, db_manager):
        tracker = RankTracker(db_manager)
        record = tracker.track("example.com", "seo")

        assert tracker.remove(record.id) is True
        assert tracker.list() == []
        assert tracker.remove(record.id) is False

    def test_get(self, db_manager):
        tracker = RankTracker(db_manager)
        record = tracker.track("example.com", "seo")

        assert tracker.get(record.id) == record
        assert tracker.get("missing") is None

    def test_track_sends_volatility_notification(self, db_manager, notification_service, notifier):
        RankTracker(db_manager, notification_service).track("hel", "lo")

        assert len(notifier.outbox) == 1
        sent = notifier.outbox[0]
        assert sent.title == "SERP Position Detected: #43"
        assert sent.body == 'Domain hel is ranking for "lo".'
        assert sent.category == "volatility"

    def test_track_respects_email_alerts_setting(self, db_manager, notification_service, notifier):
        db_manager.save_settings(UserSettings(email_alerts=False))

        record = RankTracker(db_manager, notification_service).track("hel", "lo")

        assert notifier.outbox == []
        # Suppressed notifications never block tracking
        assert RankTracker(db_manager).get(record.id) is not None
