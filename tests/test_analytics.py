"""
Tests for workspace analytics
"""
from analytics import AnalyticsCalculator, estimate_snapshot
from models import AnalyticsSnapshot, KeywordIdea, KeywordIntent, RankingRecord, UserSettings


def test_estimate_snapshot_formula(sample_keywords, sample_rankings):
    snapshot = estimate_snapshot(sample_keywords, sample_rankings)

    # 2 rankings * 250 + (11 - 2) * 120 + 600 for the top-3 entry + (12000 + 3000) / 100
    assert snapshot.organic_traffic == 2330
    assert snapshot.impressions == 2330 * 28
    assert snapshot.ctr == 2.7
    assert snapshot.domain_score == 37
    assert [point.name for point in snapshot.traffic_history] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert snapshot.traffic_history[0].traffic == 1514
    assert snapshot.traffic_history[3].traffic == 2679


def test_estimate_snapshot_keywords_only():
    keywords = [KeywordIdea("seo", 4550, 30, KeywordIntent.INFORMATIONAL, 1.0)]

    snapshot = estimate_snapshot(keywords, [])

    assert snapshot.organic_traffic == 45
    assert snapshot.ctr == 0.0
    # 20 + 2.5 rounds half up
    assert snapshot.domain_score == 23


def test_domain_score_capped(sample_rankings):
    snapshot = estimate_snapshot([], sample_rankings * 20)
    assert snapshot.domain_score == 100


class TestAnalyticsCalculator:
    """Tests for AnalyticsCalculator"""

    def test_empty_workspace_is_zero(self, db_manager):
        snapshot = AnalyticsCalculator(db_manager).calculate(force=True)

        assert snapshot == AnalyticsSnapshot.zero()
        assert db_manager.get_analytics() == AnalyticsSnapshot.zero()

    def test_first_calculation_saves(self, db_manager, sample_keywords, sample_rankings):
        db_manager.save_keywords(sample_keywords)
        db_manager.save_rankings(sample_rankings)

        snapshot = AnalyticsCalculator(db_manager).calculate()

        assert snapshot.organic_traffic == 2330
        assert db_manager.get_analytics() == snapshot

    def test_saved_snapshot_reused_until_forced(self, db_manager, sample_keywords, sample_rankings):
        calculator = AnalyticsCalculator(db_manager)
        db_manager.save_keywords(sample_keywords)
        first = calculator.calculate()

        db_manager.save_rankings(sample_rankings)
        assert calculator.calculate() == first

        refreshed = calculator.calculate(force=True)
        assert refreshed.organic_traffic == 2330

    def test_forced_refresh_notifies(self, db_manager, notification_service, notifier,
                                     sample_keywords, sample_rankings):
        db_manager.save_keywords(sample_keywords)
        db_manager.save_rankings(sample_rankings)

        AnalyticsCalculator(db_manager, notification_service).calculate(force=True)

        assert len(notifier.outbox) == 1
        assert notifier.outbox[0].title == "Intelligence Scan Complete"
        assert notifier.outbox[0].body == "Updated: 2,330 monthly visitors and 37 authority score."

    def test_unforced_calculation_is_silent(self, db_manager, notification_service, notifier, sample_keywords):
        db_manager.save_keywords(sample_keywords)

        AnalyticsCalculator(db_manager, notification_service).calculate()

        assert notifier.outbox == []

    def test_forced_refresh_respects_weekly_report(self, db_manager, notification_service, notifier, sample_keywords):
        db_manager.save_keywords(sample_keywords)
        db_manager.save_settings(UserSettings(weekly_report=False))

        AnalyticsCalculator(db_manager, notification_service).calculate(force=True)

        assert notifier.outbox == []

    def test_clear(self, db_manager, sample_keywords):
        calculator = AnalyticsCalculator(db_manager)
        db_manager.save_keywords(sample_keywords)
        calculator.calculate()

        assert calculator.clear() == AnalyticsSnapshot.zero()


def _rankings(count):
    return [
        RankingRecord(id=f"r{i}", keyword=f"kw {i}", url="example.com",
                      position=50, change=0, last_checked="2026-10-01")
        for i in range(count)
    ]


def test_ctr_ties_round_half_up():
    assert estimate_snapshot([], _rankings(19)).ctr == 5.3
    assert estimate_snapshot([], _rankings(39)).ctr == 8.3
