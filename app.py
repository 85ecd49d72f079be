"""
Main application for SEO Workspace - Orchestrates all components
"""
import argparse
import asyncio
import json
import logging
import random
import sys
from typing import List, Dict, Any

from config import config, WorkspaceConfig
from database import DatabaseManager
from models import KeywordIdea, ContentAudit, RankingRecord, AnalyticsSnapshot, UserSettings, NOTIFICATION_SETTINGS
from content_analyzer import ContentAnalyzer, ContentFetchError
from keyword_research import KeywordResearcher, export_keywords
from rank_tracker import RankTracker
from analytics import AnalyticsCalculator
from notifications import NotificationService, NotificationCapability, LogNotifier
from ai_client import GeminiClient, AIServiceError
from monitoring import setup_logging, MetricsCollector, HealthChecker
from utils import validate_url, PerformanceMonitor

logger = logging.getLogger(__name__)

# Settings that, when switched on, should trigger a permission request
PERMISSION_FLAGS = set(NOTIFICATION_SETTINGS.values()) | {"notifications"}


class SEOWorkspaceApp:
    """Main SEO Workspace application"""

    def __init__(self, workspace_config: WorkspaceConfig = None,
                 notifier: NotificationCapability = None,
                 rng: random.Random = None,
                 configure_logging: bool = True):
        self.config = workspace_config or config

        if configure_logging:
            setup_logging(self.config.log_level, self.config.log_dir)

        self.db_manager = DatabaseManager(self.config.db_path)
        self.metrics_collector = MetricsCollector()
        self.health_checker = HealthChecker(self.config.db_path, self.metrics_collector)
        self.performance_monitor = PerformanceMonitor()

        self.notification_service = NotificationService(
            self.db_manager, notifier or LogNotifier(), self.config.notification_icon
        )
        self.content_analyzer = ContentAnalyzer(self.config)
        self.keyword_researcher = KeywordResearcher(self.config, rng=rng)
        self.rank_tracker = RankTracker(self.db_manager, self.notification_service)
        self.analytics = AnalyticsCalculator(self.db_manager, self.notification_service)
        self.ai_client = GeminiClient(self.config)

        logger.info("SEO Workspace application initialized")

    # Keyword research

    async def research_keywords(self, seed: str) -> List[KeywordIdea]:
        """Research ideas for a topic and replace the stored keyword list with them"""
        seed = (seed or "").strip()
        if not seed:
            raise ValueError("Enter a topic or seed keyword to research")

        self.performance_monitor.start_timer("keyword_research")
        used_fallback = False
        try:
            if self.config.keyword_source == "ai":
                ideas = await asyncio.to_thread(self.ai_client.get_keyword_ideas, seed)
            else:
                ideas, used_fallback = await self.keyword_researcher.suggest_with_source(seed)
        except AIServiceError:
            self.metrics_collector.record_error()
            raise

        response_time = self.performance_monitor.end_timer("keyword_research")
        self.metrics_collector.record_keyword_search(response_time, used_fallback)

        if ideas:
            self.db_manager.save_keywords(ideas)
        else:
            logger.warning(f"No keyword ideas returned for {seed!r}")
        return ideas

    def get_keywords(self) -> List[KeywordIdea]:
        return self.db_manager.get_keywords()

    def clear_keywords(self):
        self.db_manager.save_keywords([])
        logger.info("Keyword results cleared")

    def export_keywords(self) -> str:
        return export_keywords(self.db_manager.get_keywords())

    # Content audits

    def audit_content(self, text: str) -> ContentAudit:
        """Audit text and store the result at the top of the audit history"""
        text = text or ""
        if len(text.strip()) < self.config.min_audit_length:
            raise ValueError(f"Content must be at least {self.config.min_audit_length} characters to audit")

        self.performance_monitor.start_timer("content_audit")
        audit = self.content_analyzer.audit(text)

        if self.config.audit_engine == "ai":
            try:
                audit = self.ai_client.analyze_content(text, baseline=audit)
            except AIServiceError:
                self.metrics_collector.record_error()
                raise

        self.metrics_collector.record_audit(self.performance_monitor.end_timer("content_audit"))
        self._store_audit(audit)
        return audit

    def audit_url(self, url: str) -> ContentAudit:
        """Fetch a page and audit its visible text"""
        if not validate_url(url):
            raise ValueError(f"Not a valid http(s) URL: {url}")

        self.performance_monitor.start_timer("url_audit")
        try:
            audit = self.content_analyzer.audit_url(url)
        except ContentFetchError:
            self.metrics_collector.record_error()
            raise

        self.metrics_collector.record_audit(self.performance_monitor.end_timer("url_audit"))
        self._store_audit(audit)
        return audit

    def get_audits(self) -> List[ContentAudit]:
        return self.db_manager.get_audits()

    def _store_audit(self, audit: ContentAudit):
        self.db_manager.save_audits([audit] + self.db_manager.get_audits())

    # Rankings

    def track_ranking(self, url: str, keyword: str) -> RankingRecord:
        record = self.rank_tracker.track(url, keyword)
        self.metrics_collector.record_ranking_tracked()
        return record

    def remove_ranking(self, ranking_id: str) -> bool:
        return self.rank_tracker.remove(ranking_id)

    def get_rankings(self) -> List[RankingRecord]:
        return self.rank_tracker.list()

    # Analytics

    def get_analytics(self, refresh: bool = False) -> AnalyticsSnapshot:
        return self.analytics.calculate(force=refresh)

    def clear_analytics(self) -> AnalyticsSnapshot:
        return self.analytics.clear()

    # Settings

    def get_settings(self) -> UserSettings:
        return self.db_manager.get_settings()

    def update_settings(self, changes: Dict[str, Any]) -> UserSettings:
        """Merge changes into the stored settings, asking for notification permission when one is switched on"""
        current = self.db_manager.get_settings()
        merged = current.to_dict()
        merged.update(changes)
        updated = UserSettings.from_dict(merged)

        switched_on = [
            flag for flag in PERMISSION_FLAGS
            if updated.is_enabled(flag) and not current.is_enabled(flag)
        ]
        if switched_on and not self.notification_service.request_permission():
            # The toggle still sticks; delivery just stays off until permission is granted
            logger.warning("Notification permission was not granted")

        self.db_manager.save_settings(updated)
        return updated

    # Status

    def get_system_status(self) -> Dict[str, Any]:
        """Get comprehensive system status"""
        health = self.health_checker.check_health()
        return {
            "timestamp": health["timestamp"],
            "health": health,
            "metrics": self.metrics_collector.get_metrics(),
            "keywords": len(self.db_manager.get_keywords()),
            "audits": len(self.db_manager.get_audits()),
            "rankings": len(self.db_manager.get_rankings()),
        }

    def shutdown(self):
        """Gracefully shutdown the application"""
        logger.info("Shutting down SEO Workspace application")
        self.ai_client.close()
        self.content_analyzer.session.close()


def parse_setting(assignment: str):
    """Parse key=value, reading true/false as booleans"""
    if "=" not in assignment:
        raise argparse.ArgumentTypeError(f"Expected key=value, got {assignment!r}")
    key, value = assignment.split("=", 1)
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "on"):
        return key.strip(), True
    if lowered in ("false", "no", "off"):
        return key.strip(), False
    return key.strip(), value


def create_cli():
    """Create command line interface"""
    parser = argparse.ArgumentParser(description="SEO Workspace - keyword, content and ranking intelligence")
    parser.add_argument("--db", help="Path to the workspace database")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    research_parser = subparsers.add_parser("research", help="Research keyword ideas for a topic")
    research_parser.add_argument("seed", help="Topic or seed keyword")

    audit_parser = subparsers.add_parser("audit", help="Audit content for SEO quality")
    audit_source = audit_parser.add_mutually_exclusive_group(required=True)
    audit_source.add_argument("text", nargs="?", help="Text to audit")
    audit_source.add_argument("--file", help="Read the text to audit from a file")
    audit_source.add_argument("--url", help="Fetch and audit a web page")

    track_parser = subparsers.add_parser("track", help="Track the ranking of a domain for a keyword")
    track_parser.add_argument("url", help="Domain or URL")
    track_parser.add_argument("keyword", help="Keyword to check")

    subparsers.add_parser("rankings", help="List tracked rankings")

    analytics_parser = subparsers.add_parser("analytics", help="Show workspace analytics")
    analytics_parser.add_argument("--refresh", action="store_true", help="Recalculate from stored data")

    settings_parser = subparsers.add_parser("settings", help="Show or change settings")
    settings_parser.add_argument("--set", dest="changes", nargs="*", type=parse_setting, default=[],
                                 metavar="KEY=VALUE", help="Settings to change")

    subparsers.add_parser("export-keywords", help="Print stored keywords, one per line")

    server_parser = subparsers.add_parser("server", help="Run the HTTP API")
    server_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    server_parser.add_argument("--port", type=int, default=8000, help="Server port")

    return parser


def _print_json(data):
    print(json.dumps(data, indent=2, default=str))


async def main(argv: List[str] = None):
    """Main application entry point"""
    parser = create_cli()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "server":
        import uvicorn
        uvicorn.run("api:app", host=args.host, port=args.port, log_level="info")
        return 0

    workspace_config = WorkspaceConfig(db_path=args.db) if args.db else config
    app = SEOWorkspaceApp(workspace_config)

    try:
        if args.command == "research":
            ideas = await app.research_keywords(args.seed)
            _print_json([idea.to_dict() for idea in ideas])

        elif args.command == "audit":
            if args.url:
                audit = app.audit_url(args.url)
            elif args.file:
                with open(args.file, encoding="utf-8") as f:
                    audit = app.audit_content(f.read())
            else:
                audit = app.audit_content(args.text)
            _print_json(audit.to_dict())

        elif args.command == "track":
            _print_json(app.track_ranking(args.url, args.keyword).to_dict())

        elif args.command == "rankings":
            _print_json([r.to_dict() for r in app.get_rankings()])

        elif args.command == "analytics":
            _print_json(app.get_analytics(refresh=args.refresh).to_dict())

        elif args.command == "settings":
            if args.changes:
                settings = app.update_settings(dict(args.changes))
            else:
                settings = app.get_settings()
            _print_json(settings.to_dict())

        elif args.command == "export-keywords":
            print(app.export_keywords())

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130
    except (ValueError, AIServiceError, ContentFetchError) as e:
        logger.error(f"Application error: {e}")
        print(f"Error: {e}")
        return 1
    finally:
        app.shutdown()

    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
