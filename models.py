"""
Data models for SEO Workspace
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any

from utils import clamp, to_int, to_float, to_bool

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class KeywordIntent(str, Enum):
    INFORMATIONAL = "Informational"
    TRANSACTIONAL = "Transactional"
    COMMERCIAL = "Commercial"
    NAVIGATIONAL = "Navigational"

    @classmethod
    def parse(cls, value: Any) -> "KeywordIntent":
        """Map a stored or AI-supplied label onto an intent, defaulting to Informational"""
        for intent in cls:
            if str(value).strip().lower() == intent.value.lower():
                return intent
        return cls.INFORMATIONAL


@dataclass(frozen=True)
class KeywordIdea:
    """Data structure for a keyword idea with simulated market metrics"""
    keyword: str
    volume: int
    difficulty: int
    intent: KeywordIntent
    cpc: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyword": self.keyword,
            "volume": self.volume,
            "difficulty": self.difficulty,
            "intent": self.intent.value,
            "cpc": self.cpc,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeywordIdea":
        return cls(
            keyword=str(data.get("keyword", "")),
            volume=max(0, to_int(data.get("volume"))),
            difficulty=clamp(to_int(data.get("difficulty")), 0, 100),
            intent=KeywordIntent.parse(data.get("intent")),
            cpc=max(0.0, to_float(data.get("cpc"))),
        )


@dataclass(frozen=True)
class KeywordDensity:
    """Share of a text's tokens taken by one keyword, as a percentage"""
    keyword: str
    density: float

    def to_dict(self) -> Dict[str, Any]:
        return {"keyword": self.keyword, "density": self.density}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeywordDensity":
        return cls(
            keyword=str(data.get("keyword", "")),
            density=clamp(to_float(data.get("density")), 0.0, 100.0),
        )


@dataclass(frozen=True)
class ContentAudit:
    """Data structure for content audit results"""
    score: int
    title: str
    description: str
    headings: List[str]
    recommendations: List[str]
    keyword_density: List[KeywordDensity]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "title": self.title,
            "description": self.description,
            "headings": list(self.headings),
            "recommendations": list(self.recommendations),
            "keywordDensity": [entry.to_dict() for entry in self.keyword_density],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentAudit":
        headings = [str(h) for h in data.get("headings") or [] if str(h)]
        return cls(
            score=clamp(to_int(data.get("score")), 0, 100),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            headings=headings or ["No clear headings detected"],
            recommendations=[str(r) for r in data.get("recommendations") or []],
            keyword_density=[
                KeywordDensity.from_dict(entry)
                for entry in data.get("keywordDensity") or []
                if isinstance(entry, dict)
            ],
        )


@dataclass(frozen=True)
class RankingCheck:
    """Simulated SERP position for a (url, keyword) pair"""
    keyword: str
    url: str
    position: int
    change: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyword": self.keyword,
            "url": self.url,
            "position": self.position,
            "change": self.change,
        }


@dataclass(frozen=True)
class RankingRecord:
    """Data structure for a tracked ranking as stored in the workspace"""
    id: str
    keyword: str
    url: str
    position: int
    change: int
    last_checked: str

    @classmethod
    def from_check(cls, check: RankingCheck, record_id: str, last_checked: str) -> "RankingRecord":
        return cls(
            id=record_id,
            keyword=check.keyword,
            url=check.url,
            position=check.position,
            change=check.change,
            last_checked=last_checked,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "keyword": self.keyword,
            "url": self.url,
            "position": self.position,
            "change": self.change,
            "lastChecked": self.last_checked,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RankingRecord":
        return cls(
            id=str(data.get("id", "")),
            keyword=str(data.get("keyword", "")),
            url=str(data.get("url", "")),
            position=clamp(to_int(data.get("position"), 100), 1, 100),
            change=clamp(to_int(data.get("change")), -20, 20),
            last_checked=str(data.get("lastChecked", "")),
        )


@dataclass(frozen=True)
class TrafficPoint:
    name: str
    traffic: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "traffic": self.traffic}


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Aggregate workspace metrics derived from stored keywords and rankings"""
    organic_traffic: int
    impressions: int
    ctr: float
    domain_score: int
    traffic_history: List[TrafficPoint]

    @classmethod
    def zero(cls) -> "AnalyticsSnapshot":
        return cls(
            organic_traffic=0,
            impressions=0,
            ctr=0.0,
            domain_score=0,
            traffic_history=[TrafficPoint(name=day, traffic=0) for day in WEEKDAYS],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "organicTraffic": self.organic_traffic,
            "impressions": self.impressions,
            "ctr": self.ctr,
            "domainScore": self.domain_score,
            "trafficHistory": [point.to_dict() for point in self.traffic_history],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalyticsSnapshot":
        history = [
            TrafficPoint(name=str(point.get("name", "")), traffic=max(0, to_int(point.get("traffic"))))
            for point in data.get("trafficHistory") or []
            if isinstance(point, dict)
        ]
        return cls(
            organic_traffic=max(0, to_int(data.get("organicTraffic"))),
            impressions=max(0, to_int(data.get("impressions"))),
            ctr=max(0.0, to_float(data.get("ctr"))),
            domain_score=clamp(to_int(data.get("domainScore")), 0, 100),
            traffic_history=history or cls.zero().traffic_history,
        )


# Maps notification categories onto the settings flag that gates them
NOTIFICATION_SETTINGS = {
    "volatility": "email_alerts",
    "summary": "weekly_report",
    "feature": "product_updates",
}


@dataclass
class UserSettings:
    """User preferences; unknown keys are carried in extras so nothing stored is lost"""
    user_name: str = "Moiz"
    email_alerts: bool = True
    weekly_report: bool = True
    product_updates: bool = False
    notifications: bool = True
    theme: str = "dark"
    extras: Dict[str, Any] = field(default_factory=dict)

    def is_enabled(self, flag: str) -> bool:
        if hasattr(self, flag) and flag not in ("user_name", "theme", "extras"):
            return bool(getattr(self, flag))
        return to_bool(self.extras.get(flag), False)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        data.update({
            "userName": self.user_name,
            "email_alerts": self.email_alerts,
            "weekly_report": self.weekly_report,
            "product_updates": self.product_updates,
            "notifications": self.notifications,
            "theme": self.theme,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserSettings":
        known = {"userName", "email_alerts", "weekly_report", "product_updates", "notifications", "theme"}
        defaults = cls()
        return cls(
            user_name=str(data.get("userName", defaults.user_name)),
            email_alerts=to_bool(data.get("email_alerts"), defaults.email_alerts),
            weekly_report=to_bool(data.get("weekly_report"), defaults.weekly_report),
            product_updates=to_bool(data.get("product_updates"), defaults.product_updates),
            notifications=to_bool(data.get("notifications"), defaults.notifications),
            theme=str(data.get("theme", defaults.theme)),
            extras={k: v for k, v in data.items() if k not in known},
        )
