"""
Configuration file for SEO Workspace
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class WorkspaceConfig:
    """Configuration settings for the SEO workspace"""

    # Database settings
    db_path: str = "seo_workspace.db"

    # Autocomplete source
    suggest_url: str = "https://suggestqueries.google.com/complete/search"
    suggest_client: str = "firefox"
    suggest_timeout: Optional[float] = None

    # Page fetching for URL audits
    request_timeout: int = 15
    user_agents: List[str] = None

    # Input gating
    min_audit_length: int = 20

    # Engines: "suggest" or "ai" for keywords, "local" or "ai" for audits
    keyword_source: str = "suggest"
    audit_engine: str = "local"

    # Generative AI service
    gemini_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY")
    )
    gemini_model: str = "gemini-3-flash-preview"

    # Notifications
    notification_icon: str = "https://cdn-icons-png.flaticon.com/512/2991/2991148.png"

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(levelname)s - %(message)s"
    log_dir: str = "logs"

    def __post_init__(self):
        if self.user_agents is None:
            self.user_agents = [
                "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
                "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
                "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
            ]

        if self.keyword_source not in ("suggest", "ai"):
            raise ValueError(f"Unknown keyword source: {self.keyword_source}")
        if self.audit_engine not in ("local", "ai"):
            raise ValueError(f"Unknown audit engine: {self.audit_engine}")

# Default configuration instance
config = WorkspaceConfig()
