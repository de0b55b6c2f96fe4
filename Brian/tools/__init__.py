"""
Provider adapters for the Brian query orchestrator
"""
from .extended_base_tool import ProviderTool
from .web_search import WebSearchTool
from .knowledge import KnowledgeTool
from .community import CommunityTool
from .playbook import PlaybookTool

__all__ = [
    "ProviderTool",
    "WebSearchTool",
    "KnowledgeTool",
    "CommunityTool",
    "PlaybookTool",
]
