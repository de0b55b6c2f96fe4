"""
FastAPI application module for the Brian query orchestrator
"""
from .app import app
from .models import AgentRequest, AgentResponse

__all__ = ["app", "AgentRequest", "AgentResponse"]
