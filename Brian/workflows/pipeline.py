"""
Agent pipeline workflow
Vision extraction, parallel tool fan-out/gather, synthesis and response assembly
"""
import logging
from typing import Dict, Optional

from opentelemetry import trace

from .assembler import assemble_response
from ..agents import SynthesisAgent, ToolDispatchAgent, extract_vision_bias
from ..core.diagnostics import DiagnosticsRecorder
from ..core.errors import OrchestrationFailure, ValidationError
from ..core.models import AgentResponse, ToolSettings
from ..tools import CommunityTool, KnowledgeTool, PlaybookTool, ProviderTool, WebSearchTool

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class AgentPipeline:
    """
    Runs one request end to end.

    Pattern:
    1. Extract vision bias keywords
    2. Dispatch enabled tools concurrently (fan-out)
    3. Gather every outcome (fan-in)
    4. Rank sources and synthesize summary and plan
    5. Assemble the immutable response

    Each call builds its own DiagnosticsRecorder, so concurrent requests
    share nothing but the read-only tool instances.
    """

    def __init__(
        self,
        tools: Dict[str, ProviderTool],
        dispatcher: Optional[ToolDispatchAgent] = None,
        synthesizer: Optional[SynthesisAgent] = None,
    ):
        self.tools = tools
        self.dispatcher = dispatcher or ToolDispatchAgent(tools)
        self.synthesizer = synthesizer or SynthesisAgent()

    async def run(
        self,
        query: str,
        vision: Optional[str] = None,
        enabled_tools: Optional[ToolSettings] = None,
    ) -> AgentResponse:
        """
        Answer a query.

        Args:
            query: Non-empty user query, echoed back as given
            vision: Optional vision statement, echoed back as given
            enabled_tools: Capability toggles (default: all enabled)

        Returns:
            The assembled AgentResponse

        Raises:
            ValidationError: If the query is blank
            OrchestrationFailure: On a fault in the orchestration logic itself
        """
        if not query or not query.strip():
            raise ValidationError("query must not be empty")
        cleaned = query.strip()
        settings = enabled_tools if enabled_tools is not None else ToolSettings.all_enabled()

        recorder = DiagnosticsRecorder()
        with tracer.start_as_current_span("agent_pipeline") as span:
            span.set_attribute("tools.enabled", ",".join(settings.enabled()))
            try:
                bias = extract_vision_bias(vision)
                if vision is not None:
                    recorder.set_vision_bias(bias)
                if bias:
                    recorder.step(f"Extracted vision bias: {', '.join(bias)}")
                else:
                    recorder.step("No vision bias extracted")

                results = await self.dispatcher.dispatch(cleaned, bias, settings, recorder)
                sources = [source for result in results if result.succeeded for source in result.sources]

                synthesis = self.synthesizer.synthesize(cleaned, bias, sources, recorder)
                recorder.step("Assembled response")
                return assemble_response(query, vision, synthesis, recorder.snapshot())
            except Exception as e:
                logger.error(f"Orchestration failed for '{cleaned}': {e}", exc_info=True)
                span.record_exception(e)
                raise OrchestrationFailure("orchestration failed") from e


def create_default_tools() -> Dict[str, ProviderTool]:
    """Instantiate the four provider adapters from configuration"""
    return {
        "search": WebSearchTool(),
        "knowledge": KnowledgeTool(),
        "community": CommunityTool(),
        "system": PlaybookTool(),
    }


def create_agent_pipeline(tools: Optional[Dict[str, ProviderTool]] = None) -> AgentPipeline:
    """
    Create the request pipeline.

    Args:
        tools: Provider adapters keyed by capability (default: configured adapters)

    Returns:
        AgentPipeline sharing the given tools across requests
    """
    return AgentPipeline(tools if tools is not None else create_default_tools())
