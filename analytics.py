"""
Aggregate workspace analytics derived from stored keywords and rankings
"""
import math
import logging
from typing import List

from models import AnalyticsSnapshot, TrafficPoint, RankingRecord, KeywordIdea, WEEKDAYS
from database import DatabaseManager
from utils import round_half_up, round_places_half_up

logger = logging.getLogger(__name__)

# Share of the weekly average each weekday receives, Mon..Sun
TRAFFIC_PROFILE = [0.65, 0.82, 0.76, 1.15, 0.94, 0.52, 1.05]


def estimate_snapshot(keywords: List[KeywordIdea], rankings: List[RankingRecord]) -> AnalyticsSnapshot:
    """Deterministic traffic estimate: the same stored data always gives the same numbers"""
    keyword_count = len(keywords)
    ranking_count = len(rankings)

    traffic_base = ranking_count * 250
    for ranking in rankings:
        if ranking.position <= 10:
            traffic_base += (11 - ranking.position) * 120
        if ranking.position <= 3:
            traffic_base += 600

    volume_sum = sum(keyword.volume / 100 for keyword in keywords)
    organic_traffic = math.floor(traffic_base + volume_sum)
    ctr = 2.4 + ranking_count * 0.15 if ranking_count > 0 else 0.0
    domain_score = min(100, 20 + keyword_count * 2.5 + ranking_count * 6)

    return AnalyticsSnapshot(
        organic_traffic=organic_traffic,
        impressions=math.floor(organic_traffic * 28),
        ctr=round_places_half_up(ctr, 1),
        domain_score=round_half_up(domain_score),
        traffic_history=[
            TrafficPoint(name=day, traffic=math.floor(organic_traffic * share))
            for day, share in zip(WEEKDAYS, TRAFFIC_PROFILE)
        ],
    )


class AnalyticsCalculator:
    """Keeps the stored analytics snapshot in step with the workspace data"""

    def __init__(self, db_manager: DatabaseManager, notification_service=None):
        self.db_manager = db_manager
        self.notification_service = notification_service

    def calculate(self, force: bool = False) -> AnalyticsSnapshot:
        """Return the current snapshot, recomputing it when forced or still empty"""
        keywords = self.db_manager.get_keywords()
        rankings = self.db_manager.get_rankings()
        saved = self.db_manager.get_analytics()

        if not keywords and not rankings:
            snapshot = AnalyticsSnapshot.zero()
            self.db_manager.save_analytics(snapshot)
            return snapshot

        if not force and saved.organic_traffic != 0:
            return saved

        snapshot = estimate_snapshot(keywords, rankings)
        self.db_manager.save_analytics(snapshot)
        logger.info(f"Analytics recalculated: {snapshot.organic_traffic} visitors, score {snapshot.domain_score}")

        if force and self.notification_service:
            self.notification_service.send(
                "Intelligence Scan Complete",
                f"Updated: {snapshot.organic_traffic:,} monthly visitors and "
                f"{snapshot.domain_score} authority score.",
                'summary'
            )

        return snapshot

    def clear(self) -> AnalyticsSnapshot:
        self.db_manager.clear_analytics()
        return self.db_manager.get_analytics()
