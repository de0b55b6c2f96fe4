"""
Core infrastructure for the Brian query orchestrator
"""
from .models import (
    AgentResponse,
    Diagnostics,
    Source,
    ToolName,
    ToolResult,
    ToolSettings,
    ToolTrace,
)
from .errors import (
    OrchestrationFailure,
    ProviderError,
    ProviderMalformed,
    ProviderUnavailable,
    ValidationError,
)
from .diagnostics import DiagnosticsRecorder

__all__ = [
    "AgentResponse",
    "Diagnostics",
    "Source",
    "ToolName",
    "ToolResult",
    "ToolSettings",
    "ToolTrace",
    "OrchestrationFailure",
    "ProviderError",
    "ProviderMalformed",
    "ProviderUnavailable",
    "ValidationError",
    "DiagnosticsRecorder",
]
