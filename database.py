"""
Database utilities for SEO Workspace
"""
import sqlite3
import json
import logging
from typing import Any, List
from datetime import datetime

from models import KeywordIdea, ContentAudit, RankingRecord, AnalyticsSnapshot, UserSettings

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    'KEYWORDS': 'moiz_seo_keywords',
    'AUDITS': 'moiz_seo_audits',
    'RANKINGS': 'moiz_seo_rankings',
    'SETTINGS': 'moiz_seo_settings',
    'ANALYTICS': 'moiz_seo_analytics',
}


class DatabaseManager:
    """Flat key-value store over SQLite; one JSON document per collection"""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.setup_database()

    def setup_database(self):
        """Initialize SQLite database with the key-value table"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT
            )
        ''')

        conn.commit()
        conn.close()
        logger.info("Database schema initialized successfully")

    def get_item(self, key: str) -> Any:
        """Decoded value stored under key, or None when the key was never written"""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        return json.loads(row[0])

    def set_item(self, key: str, value: Any):
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute('''
                INSERT OR REPLACE INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
            ''', (key, json.dumps(value), datetime.now().isoformat()))
            conn.commit()
            logger.debug(f"Saved {key}")
        finally:
            conn.close()

    def keys(self) -> List[str]:
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT key FROM kv_store ORDER BY key")
            return [row[0] for row in cursor.fetchall()]
        finally:
            conn.close()

    def save_keywords(self, keywords: List[KeywordIdea]):
        self.set_item(STORAGE_KEYS['KEYWORDS'], [k.to_dict() for k in keywords])
        logger.info(f"Saved {len(keywords)} keyword ideas")

    def get_keywords(self) -> List[KeywordIdea]:
        data = self.get_item(STORAGE_KEYS['KEYWORDS']) or []
        return [KeywordIdea.from_dict(item) for item in data]

    def save_audits(self, audits: List[ContentAudit]):
        self.set_item(STORAGE_KEYS['AUDITS'], [a.to_dict() for a in audits])
        logger.info(f"Saved {len(audits)} content audits")

    def get_audits(self) -> List[ContentAudit]:
        data = self.get_item(STORAGE_KEYS['AUDITS']) or []
        return [ContentAudit.from_dict(item) for item in data]

    def save_rankings(self, rankings: List[RankingRecord]):
        self.set_item(STORAGE_KEYS['RANKINGS'], [r.to_dict() for r in rankings])
        logger.info(f"Saved {len(rankings)} rankings")

    def get_rankings(self) -> List[RankingRecord]:
        data = self.get_item(STORAGE_KEYS['RANKINGS']) or []
        return [RankingRecord.from_dict(item) for item in data]

    def save_analytics(self, analytics: AnalyticsSnapshot):
        self.set_item(STORAGE_KEYS['ANALYTICS'], analytics.to_dict())

    def get_analytics(self) -> AnalyticsSnapshot:
        data = self.get_item(STORAGE_KEYS['ANALYTICS'])
        if not data:
            return AnalyticsSnapshot.zero()
        return AnalyticsSnapshot.from_dict(data)

    def clear_analytics(self):
        self.save_analytics(AnalyticsSnapshot.zero())
        logger.info("Analytics reset to defaults")

    def save_settings(self, settings: UserSettings):
        self.set_item(STORAGE_KEYS['SETTINGS'], settings.to_dict())
        logger.info("Saved user settings")

    def get_settings(self) -> UserSettings:
        """Stored settings layered over the defaults"""
        return UserSettings.from_dict(self.get_item(STORAGE_KEYS['SETTINGS']) or {})
