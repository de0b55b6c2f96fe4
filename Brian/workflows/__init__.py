"""
Request workflows for the Brian query orchestrator
"""
from .assembler import assemble_response
from .pipeline import AgentPipeline, create_agent_pipeline, create_default_tools

__all__ = [
    "assemble_response",
    "AgentPipeline",
    "create_agent_pipeline",
    "create_default_tools",
]
