"""
Configuration settings for the Brian query orchestrator
Provider endpoints, timeouts and ranking caps read from the environment
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple
import os

DEFAULT_PLAYBOOK_PATH = str(Path(__file__).resolve().parent.parent / "data" / "playbooks.json")

# Tie-break order for sources with equal confidence (first wins)
TOOL_PRIORITY: Tuple[str, ...] = ("knowledge", "search", "community", "system")

# Canonical order used for dispatch and tool traces
TOOL_ORDER: Tuple[str, ...] = ("search", "knowledge", "community", "system")


@dataclass
class Config:
    """
    Central configuration for provider transports and orchestration limits.

    Every field can be overridden through an environment variable of the
    same name; the defaults target public endpoints for development.
    """
    # Web search (Bing-compatible JSON API)
    SEARCH_ENDPOINT: str = os.getenv(
        "SEARCH_ENDPOINT",
        "https://api.bing.microsoft.com/v7.0/search"
    )
    SEARCH_API_KEY: str = os.getenv("SEARCH_API_KEY", "")

    # Structured knowledge (MediaWiki REST page search)
    KNOWLEDGE_ENDPOINT: str = os.getenv(
        "KNOWLEDGE_ENDPOINT",
        "https://en.wikipedia.org/w/rest.php/v1/search/page"
    )

    # Community discussions (Hacker News via Algolia)
    COMMUNITY_ENDPOINT: str = os.getenv(
        "COMMUNITY_ENDPOINT",
        "https://hn.algolia.com/api/v1/search"
    )

    # Local playbook corpus
    PLAYBOOK_PATH: str = os.getenv("PLAYBOOK_PATH", DEFAULT_PLAYBOOK_PATH)

    USER_AGENT: str = os.getenv("USER_AGENT", "hybrid-brian/1.0 (+local orchestrator)")

    # Timeouts (seconds)
    TIMEOUT_SEARCH: float = float(os.getenv("TIMEOUT_SEARCH", "4.0"))
    TIMEOUT_KNOWLEDGE: float = float(os.getenv("TIMEOUT_KNOWLEDGE", "4.0"))
    TIMEOUT_COMMUNITY: float = float(os.getenv("TIMEOUT_COMMUNITY", "4.0"))
    TIMEOUT_SYSTEM: float = float(os.getenv("TIMEOUT_SYSTEM", "1.0"))
    TIMEOUT_TOTAL: float = float(os.getenv("TIMEOUT_TOTAL", "6.0"))

    # Result shaping
    MAX_RESULTS_PER_TOOL: int = int(os.getenv("MAX_RESULTS_PER_TOOL", "5"))
    MAX_VISION_KEYWORDS: int = int(os.getenv("MAX_VISION_KEYWORDS", "6"))
    SNIPPET_LENGTH: int = int(os.getenv("SNIPPET_LENGTH", "280"))

    # Application Insights
    APP_INSIGHTS_CONNECTION_STRING: str = os.getenv(
        "APPLICATIONINSIGHTS_CONNECTION_STRING",
        ""
    )

    def __post_init__(self):
        """Validate configuration values"""
        for name in ("SEARCH_ENDPOINT", "KNOWLEDGE_ENDPOINT", "COMMUNITY_ENDPOINT"):
            value = getattr(self, name)
            if not value.startswith(("https://", "http://")):
                raise ValueError(f"{name} must be an HTTP(S) URL")
        tool_timeouts = (
            self.TIMEOUT_SEARCH,
            self.TIMEOUT_KNOWLEDGE,
            self.TIMEOUT_COMMUNITY,
            self.TIMEOUT_SYSTEM,
        )
        if min(tool_timeouts) <= 0 or self.TIMEOUT_TOTAL <= 0:
            raise ValueError("Timeouts must be positive")
        if self.TIMEOUT_TOTAL < max(tool_timeouts):
            raise ValueError("TIMEOUT_TOTAL must cover every per-tool timeout")
        if self.MAX_RESULTS_PER_TOOL < 1:
            raise ValueError("MAX_RESULTS_PER_TOOL must be at least 1")
        if self.MAX_VISION_KEYWORDS < 1:
            raise ValueError("MAX_VISION_KEYWORDS must be at least 1")
        if self.SNIPPET_LENGTH < 40:
            raise ValueError("SNIPPET_LENGTH must be at least 40")


# Global config instance
config = Config()
