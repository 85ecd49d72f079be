"""
SERP position simulation and ranking tracking for SEO Workspace
"""
import logging
from datetime import datetime
from typing import List, Optional

from models import RankingCheck, RankingRecord
from database import DatabaseManager
from utils import generate_record_id

logger = logging.getLogger(__name__)

_UINT32 = 1 << 32
_INT32_MAX = (1 << 31) - 1


def java_string_hash(text: str) -> int:
    """Polynomial string hash (multiplier 31) wrapped to a signed 32-bit integer.

    Runs over UTF-16 code units like Java's ``String.hashCode``, so characters
    outside the BMP contribute their surrogate pair.
    """
    data = text.encode('utf-16-le', 'surrogatepass')
    value = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        value = (value * 31 + unit) % _UINT32
    if value > _INT32_MAX:
        value -= _UINT32
    return value


def simulate_serp_check(url: str, keyword: str) -> RankingCheck:
    """Stable synthetic ranking for a (url, keyword) pair, case-insensitive.

    Position falls in 1..99 and the 30-day change in -5..+5.
    """
    seed = abs(java_string_hash(url.lower() + keyword.lower()))
    return RankingCheck(
        keyword=keyword,
        url=url,
        position=(seed % 98) + 1,
        change=(seed % 11) - 5,
    )


class RankTracker:
    """Tracks simulated rankings in the workspace store"""

    def __init__(self, db_manager: DatabaseManager, notification_service=None):
        self.db_manager = db_manager
        self.notification_service = notification_service

    def track(self, url: str, keyword: str) -> RankingRecord:
        """Check a ranking, store it at the top of the list and announce it"""
        url = (url or "").strip()
        keyword = (keyword or "").strip()
        if not url or not keyword:
            raise ValueError("Both a domain/URL and a keyword are required to track a ranking")

        check = simulate_serp_check(url, keyword)
        record = RankingRecord.from_check(
            check,
            record_id=generate_record_id(),
            last_checked=datetime.now().date().isoformat(),
        )

        rankings = [record] + self.db_manager.get_rankings()
        self.db_manager.save_rankings(rankings)
        logger.info(f"Tracked '{keyword}' for {url}: position {record.position} ({record.change:+d})")

        if self.notification_service:
            self.notification_service.send(
                f"SERP Position Detected: #{record.position}",
                f'Domain {record.url} is ranking for "{record.keyword}".',
                'volatility'
            )

        return record

    def remove(self, ranking_id: str) -> bool:
        """Drop a tracked ranking; False when no record has that id"""
        rankings = self.db_manager.get_rankings()
        remaining = [r for r in rankings if r.id != ranking_id]
        if len(remaining) == len(rankings):
            return False
        self.db_manager.save_rankings(remaining)
        logger.info(f"Removed ranking {ranking_id}")
        return True

    def get(self, ranking_id: str) -> Optional[RankingRecord]:
        for record in self.db_manager.get_rankings():
            if record.id == ranking_id:
                return record
        return None

    def list(self) -> List[RankingRecord]:
        return self.db_manager.get_rankings()
