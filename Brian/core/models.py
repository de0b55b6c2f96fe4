"""
Domain models shared by the tools, agents and API
Pydantic models serialize with camelCase aliases to match the wire format
"""
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from ..config import TOOL_ORDER

ToolName = Literal["search", "knowledge", "community", "system"]
ToolOutcome = Literal["ok", "empty", "error", "timeout"]


class _WireModel(BaseModel):
    """Immutable model serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ToolSettings(_WireModel):
    """
    Which capabilities are enabled for one request.

    Unknown keys are ignored and missing keys mean disabled. Callers that
    omit the whole map should use ``ToolSettings.all_enabled()``.
    """
    model_config = ConfigDict(extra="ignore")

    search: bool = False
    knowledge: bool = False
    community: bool = False
    system: bool = False

    @classmethod
    def all_enabled(cls) -> "ToolSettings":
        return cls(search=True, knowledge=True, community=True, system=True)

    def enabled(self) -> Tuple[str, ...]:
        """Enabled capability names in canonical dispatch order"""
        return tuple(name for name in TOOL_ORDER if getattr(self, name))

    def disabled(self) -> Tuple[str, ...]:
        return tuple(name for name in TOOL_ORDER if not getattr(self, name))


class Source(_WireModel):
    """One normalized result item surfaced by a provider adapter."""
    id: str
    type: ToolName
    title: str
    url: Optional[str] = None
    snippet: str = ""
    confidence: float = Field(ge=0.0, le=1.0)
    metadata: Optional[Mapping[str, Any]] = None

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
        return MappingProxyType(dict(value)) if value is not None else None

    @field_serializer("metadata")
    def _dump_metadata(self, value: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        return dict(value) if value is not None else None


class ToolTrace(_WireModel):
    """One invocation record per enabled tool."""
    tool: ToolName
    outcome: ToolOutcome
    count: int = 0
    latency_ms: float = 0.0
    detail: Optional[str] = None


class Diagnostics(_WireModel):
    steps: Tuple[str, ...] = ()
    tool_trace: Tuple[ToolTrace, ...] = ()
    vision_bias: Optional[Tuple[str, ...]] = None
    errors: Optional[Tuple[str, ...]] = None


class AgentResponse(_WireModel):
    """The structured answer returned for one request."""
    query: str
    vision: Optional[str] = None
    timestamp: datetime
    summary: str
    plan: Tuple[str, ...]
    sources: Tuple[Source, ...]
    diagnostics: Diagnostics


@dataclass(frozen=True)
class ToolResult:
    """
    Outcome of a single provider adapter invocation.

    Exactly one of ``sources`` (status ok/empty) or ``error``
    (status error/timeout) is meaningful.
    """
    tool: str
    status: str
    sources: Tuple[Source, ...] = field(default_factory=tuple)
    error: Optional[str] = None
    latency_ms: float = 0.0

    @classmethod
    def ok(cls, tool: str, sources: List[Source], latency_ms: float = 0.0) -> "ToolResult":
        status = "ok" if sources else "empty"
        return cls(tool=tool, status=status, sources=tuple(sources), latency_ms=latency_ms)

    @classmethod
    def failure(cls, tool: str, error: str, latency_ms: float = 0.0) -> "ToolResult":
        return cls(tool=tool, status="error", error=error, latency_ms=latency_ms)

    @classmethod
    def timeout(cls, tool: str, seconds: float, latency_ms: float = 0.0) -> "ToolResult":
        return cls(
            tool=tool,
            status="timeout",
            error=f"timed out after {seconds:g}s",
            latency_ms=latency_ms,
        )

    @property
    def succeeded(self) -> bool:
        return self.status in ("ok", "empty")
