"""
Response assembly
"""
from datetime import datetime, timezone
from typing import Optional

from ..agents.synthesizer import Synthesis
from ..core.models import AgentResponse, Diagnostics


def assemble_response(
    query: str,
    vision: Optional[str],
    synthesis: Synthesis,
    diagnostics: Diagnostics,
) -> AgentResponse:
    """Freeze the final response, stamped with the current UTC time"""
    return AgentResponse(
        query=query,
        vision=vision,
        timestamp=datetime.now(timezone.utc),
        summary=synthesis.summary,
        plan=tuple(synthesis.plan),
        sources=tuple(synthesis.sources),
        diagnostics=diagnostics,
    )
