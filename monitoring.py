"""
Logging setup, usage metrics and health checks for SEO Workspace
"""
import logging
import os
import sqlite3
from collections import deque
from datetime import datetime
from threading import Lock
from typing import Deque, Dict, Any

from config import config

# Response times kept for the running average
RESPONSE_WINDOW = 1000


def setup_logging(log_level: str = None, log_dir: str = None):
    """Setup console and file logging"""
    log_level = log_level or config.log_level
    log_dir = log_dir or config.log_dir

    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    simple_formatter = logging.Formatter(config.log_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))

    # Clear existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(
        os.path.join(log_dir, 'workspace.log'),
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(file_handler)

    error_handler = logging.FileHandler(
        os.path.join(log_dir, 'errors.log'),
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(error_handler)

    # Delivered notifications get their own file
    notification_handler = logging.FileHandler(
        os.path.join(log_dir, 'notifications.log'),
        encoding='utf-8'
    )
    notification_handler.setLevel(logging.INFO)
    notification_handler.setFormatter(simple_formatter)

    notification_logger = logging.getLogger('notifications')
    notification_logger.handlers.clear()
    notification_logger.addHandler(notification_handler)
    notification_logger.setLevel(logging.INFO)
    notification_logger.propagate = False

    return root_logger


class MetricsCollector:
    """In-process usage counters for the workspace operations"""

    def __init__(self):
        self.metrics_lock = Lock()
        self.started_at = datetime.now().isoformat()
        self.audits_performed = 0
        self.keyword_searches = 0
        self.fallback_searches = 0
        self.rankings_tracked = 0
        self.errors_count = 0
        self.response_times: Deque[float] = deque(maxlen=RESPONSE_WINDOW)

    def record_audit(self, response_time: float):
        with self.metrics_lock:
            self.audits_performed += 1
            self.response_times.append(response_time)

    def record_keyword_search(self, response_time: float, used_fallback: bool = False):
        with self.metrics_lock:
            self.keyword_searches += 1
            if used_fallback:
                self.fallback_searches += 1
            self.response_times.append(response_time)

    def record_ranking_tracked(self):
        with self.metrics_lock:
            self.rankings_tracked += 1

    def record_error(self):
        with self.metrics_lock:
            self.errors_count += 1

    def get_metrics(self) -> Dict[str, Any]:
        with self.metrics_lock:
            total = self.audits_performed + self.keyword_searches + self.rankings_tracked
            avg_response_time = (
                sum(self.response_times) / len(self.response_times) if self.response_times else 0.0
            )
            return {
                'started_at': self.started_at,
                'audits_performed': self.audits_performed,
                'keyword_searches': self.keyword_searches,
                'fallback_searches': self.fallback_searches,
                'rankings_tracked': self.rankings_tracked,
                'errors_count': self.errors_count,
                'success_rate': ((total / (total + self.errors_count)) * 100) if total + self.errors_count else 100.0,
                'avg_response_time': avg_response_time,
            }


class HealthChecker:
    """Workspace health checker"""

    def __init__(self, db_path: str, metrics_collector: MetricsCollector):
        self.db_path = db_path
        self.metrics_collector = metrics_collector

    def check_health(self) -> Dict[str, Any]:
        health_status = {
            'timestamp': datetime.now().isoformat(),
            'overall_status': 'healthy',
            'components': {
                'database': self._check_database_health(),
                'usage': self._check_usage_health(),
            }
        }

        component_statuses = [comp['status'] for comp in health_status['components'].values()]
        if 'critical' in component_statuses:
            health_status['overall_status'] = 'critical'
        elif 'warning' in component_statuses:
            health_status['overall_status'] = 'warning'

        return health_status

    def _check_database_health(self) -> Dict[str, Any]:
        try:
            conn = sqlite3.connect(self.db_path, timeout=5)
            try:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) FROM kv_store")
                keys = cursor.fetchone()[0]
            finally:
                conn.close()
        except sqlite3.Error as e:
            return {'status': 'critical', 'issues': [f"Database error: {e}"]}

        return {'status': 'healthy', 'stored_keys': keys, 'issues': []}

    def _check_usage_health(self) -> Dict[str, Any]:
        metrics = self.metrics_collector.get_metrics()
        status = 'healthy'
        issues = []

        if metrics['success_rate'] < 90:
            status = 'warning'
            issues.append(f"Success rate low: {metrics['success_rate']:.1f}%")

        return {
            'status': status,
            'success_rate': metrics['success_rate'],
            'avg_response_time': metrics['avg_response_time'],
            'issues': issues
        }
