"""
Per-request diagnostics recorder
Append-only trace of orchestration steps, tool outcomes and non-fatal errors
"""
import logging
from typing import List, Optional

from .models import Diagnostics, ToolResult, ToolTrace

logger = logging.getLogger(__name__)


class DiagnosticsRecorder:
    """
    Accumulates diagnostics for a single request.

    One recorder is created per request and threaded through every stage;
    entries are only ever appended, never reordered or removed.
    """

    def __init__(self):
        self._steps: List[str] = []
        self._trace: List[ToolTrace] = []
        self._errors: List[str] = []
        self._vision_bias: Optional[List[str]] = None

    def step(self, message: str):
        """Record a coarse orchestration milestone"""
        self._steps.append(message)
        logger.info(f"step: {message}")

    def set_vision_bias(self, keywords: List[str]):
        self._vision_bias = list(keywords)

    def trace(self, result: ToolResult):
        """Record the outcome of one tool invocation"""
        self._trace.append(
            ToolTrace(
                tool=result.tool,
                outcome=result.status,
                count=len(result.sources),
                latency_ms=round(result.latency_ms, 1),
                detail=result.error,
            )
        )

    def error(self, message: str):
        """Record a non-fatal error"""
        self._errors.append(message)
        logger.warning(f"non-fatal error: {message}")

    @property
    def steps(self) -> List[str]:
        return list(self._steps)

    def snapshot(self) -> Diagnostics:
        """Freeze the current state into an immutable Diagnostics model"""
        return Diagnostics(
            steps=tuple(self._steps),
            tool_trace=tuple(self._trace),
            vision_bias=tuple(self._vision_bias) if self._vision_bias is not None else None,
            errors=tuple(self._errors) or None,
        )
