"""
Orchestration agents for the Brian query orchestrator
"""
from .vision import extract_vision_bias
from .dispatcher import ToolDispatchAgent
from .planner import build_plan
from .synthesizer import Synthesis, SynthesisAgent, rank_sources, summarize

__all__ = [
    "extract_vision_bias",
    "ToolDispatchAgent",
    "build_plan",
    "Synthesis",
    "SynthesisAgent",
    "rank_sources",
    "summarize",
]
