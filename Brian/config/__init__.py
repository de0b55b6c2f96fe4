"""
Configuration module for the Brian query orchestrator
"""
from .settings import Config, TOOL_ORDER, TOOL_PRIORITY, config

__all__ = ["Config", "TOOL_ORDER", "TOOL_PRIORITY", "config"]
