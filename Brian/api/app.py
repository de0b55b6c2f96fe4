"""
FastAPI application for the Brian query orchestrator
Validates requests at the boundary and serializes the pipeline response
"""
import json
import logging
import time
from pathlib import Path
from typing import Dict

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from azure.monitor.opentelemetry import configure_azure_monitor
from opentelemetry import trace

from .models import AgentRequest, AgentResponse, ErrorResponse
from ..config import config
from ..core.models import ToolSettings
from ..workflows import create_agent_pipeline

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
MISSING_QUERY = "The assistant needs a query to proceed."
AGENT_FAILED = "Agent failed to complete the request."

# Initialize FastAPI app
app = FastAPI(
    title="Hybrid Brian Agent API",
    description="Query orchestrator combining web search, knowledge, community and local playbooks",
    version=VERSION
)

# Configure OpenTelemetry for Azure Monitor
if config.APP_INSIGHTS_CONNECTION_STRING:
    configure_azure_monitor(
        connection_string=config.APP_INSIGHTS_CONNECTION_STRING
    )
    logger.info("Azure Monitor telemetry configured")

tracer = trace.get_tracer(__name__)

# Tools hold read-only configuration and are reused across requests
pipeline = create_agent_pipeline()


@app.post(
    "/api/agent",
    response_model=AgentResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def run_agent(request: AgentRequest):
    """
    Main agent endpoint.

    Pattern:
    1. Reject blank queries before the pipeline runs
    2. Default to all tools when enabledTools is omitted
    3. Run the pipeline and return its response verbatim

    Args:
        request: AgentRequest with query, vision and enabledTools

    Returns:
        AgentResponse, or an error body with status 400/500
    """
    if not request.query or not request.query.strip():
        return JSONResponse(status_code=400, content={"error": MISSING_QUERY})

    enabled_tools = request.enabled_tools or ToolSettings.all_enabled()

    with tracer.start_as_current_span("run_agent") as span:
        span.set_attribute("tools.enabled", ",".join(enabled_tools.enabled()))
        start_time = time.time()
        try:
            response = await pipeline.run(
                query=request.query,
                vision=request.vision,
                enabled_tools=enabled_tools,
            )
        except Exception as e:
            logger.error(f"Agent handler failed: {e}", exc_info=True)
            return JSONResponse(status_code=500, content={"error": AGENT_FAILED})

        logger.info(
            f"Agent answered in {(time.time() - start_time) * 1000:.0f}ms with "
            f"{len(response.sources)} sources"
        )
        return response


@app.get("/health")
async def health_check():
    """
    Health check with provider configuration state.

    No provider is called: remote providers report whether they are
    configured, the playbook corpus reports whether it loads.

    Returns:
        Dict with overall status and provider state
    """
    providers = {
        "search": _is_configured("search"),
        "knowledge": _is_configured("knowledge"),
        "community": _is_configured("community"),
        "system": _is_configured("system") and _check_playbooks(),
    }
    health_status = {
        "status": "healthy" if all(providers.values()) else "degraded",
        "timestamp": time.time(),
        "version": VERSION,
        "providers": providers,
    }
    return health_status


# Helper functions
def _is_configured(name: str) -> bool:
    tool = pipeline.tools.get(name)
    return tool is not None and tool.is_configured()


def _check_playbooks() -> bool:
    """Check that the playbook corpus is readable JSON"""
    tool = pipeline.tools.get("system")
    path: Path = getattr(tool, "path", Path(config.PLAYBOOK_PATH))
    try:
        data: Dict = json.loads(path.read_text(encoding="utf-8"))
        return isinstance(data.get("playbooks"), list)
    except (OSError, ValueError, AttributeError) as e:
        logger.error(f"Playbook health check failed: {e}")
        return False
