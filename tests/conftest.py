"""
Pytest configuration and shared fixtures
"""
import pytest
import os
import random
import tempfile
from unittest.mock import Mock

# Add project root to path
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from config import WorkspaceConfig
from database import DatabaseManager
from models import KeywordIdea, KeywordIntent, RankingRecord
from notifications import LogNotifier, NotificationService, GRANTED


@pytest.fixture
def temp_db():
    """Create a temporary database for testing"""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        db_path = f.name

    yield db_path

    # Cleanup
    try:
        os.unlink(db_path)
    except OSError:
        pass


@pytest.fixture
def test_config(temp_db, tmp_path):
    """Test configuration with temporary database and no AI key"""
    config = WorkspaceConfig()
    config.db_path = temp_db
    config.log_dir = str(tmp_path / "logs")
    config.gemini_api_key = None
    config.request_timeout = 5
    return config


@pytest.fixture
def db_manager(temp_db):
    """Database manager with temporary database"""
    return DatabaseManager(temp_db)


@pytest.fixture
def notifier():
    """Notifier that already holds permission"""
    return LogNotifier(permission=GRANTED)


@pytest.fixture
def notification_service(db_manager, notifier):
    return NotificationService(db_manager, notifier, icon="icon.png")


@pytest.fixture
def seeded_rng():
    return random.Random(42)


@pytest.fixture
def sample_keywords():
    """Sample keyword ideas for testing"""
    return [
        KeywordIdea(keyword="seo tools", volume=12000, difficulty=55, intent=KeywordIntent.COMMERCIAL, cpc=2.75),
        KeywordIdea(keyword="seo guide", volume=3000, difficulty=30, intent=KeywordIntent.INFORMATIONAL, cpc=0.9),
    ]


@pytest.fixture
def sample_rankings():
    """Sample tracked rankings for testing"""
    return [
        RankingRecord(id="abc123def", keyword="seo tools", url="example.com",
                      position=2, change=3, last_checked="2026-10-01"),
        RankingRecord(id="fed321cba", keyword="rank tracker", url="example.com",
                      position=45, change=-2, last_checked="2026-10-02"),
    ]


class FakeResponse:
    """Stand-in for an aiohttp response used as an async context manager"""

    def __init__(self, status=200, payload=None, json_error=None):
        self.status = status
        self.payload = payload
        self.json_error = json_error

    async def json(self, content_type='application/json'):
        if self.json_error:
            raise self.json_error
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Stand-in for aiohttp.ClientSession recording every GET"""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, **kwargs):
        self.calls.append((url, params))
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def fake_session_factory():
    """Build fake aiohttp sessions: factory(status=..., payload=..., error=...)"""
    def factory(status=200, payload=None, error=None, json_error=None):
        return FakeSession(FakeResponse(status, payload, json_error), error)
    return factory


@pytest.fixture
def mock_http_response():
    """Mock requests response carrying an HTML page"""
    mock = Mock()
    mock.status_code = 200
    mock.text = """
    <html>
        <head>
            <title>Test Page</title>
            <script>var tracking = true;</script>
        </head>
        <body>
            <h1>Main Heading</h1>
            <p>Test content with some words for analysis.</p>
            <h2>Sub Heading</h2>
            <p>More content<br>on two lines.</p>
        </body>
    </html>
    """
    return mock
