"""
Hybrid Brian - Query Orchestrator
=================================

Answers a free-text query by consulting several independent providers at
once, reconciling their results into ranked sources, and deriving a short
action plan, returned with a diagnostic trace of what was tried.

Architecture:
- Boundary: FastAPI endpoint validating the request (api/)
- Vision: deterministic bias keywords from the user's vision statement
- Dispatch: one asyncio task per enabled provider, per-tool timeouts,
  overall deadline, all-settled fan-in
- Providers: web search, structured knowledge, community discussions,
  local playbook corpus (ADK BaseTool adapters)
- Synthesis: deterministic ranking, summary and 3-7 step plan
- Observability: logging, OpenTelemetry spans, optional Azure Monitor export

Project Structure:
- config/: Environment-driven configuration
- core/: Domain models, errors, diagnostics recorder, text helpers
- tools/: Provider adapters
- agents/: Vision extractor, tool dispatcher, synthesizer, planner
- workflows/: Request pipeline and response assembly
- api/: FastAPI application and models
"""
import logging
import os
import uvicorn

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Import FastAPI app from api module
from Brian.api import app


def main():
    logger.info("Starting Hybrid Brian query orchestrator")
    logger.info("Providers: search | knowledge | community | system")
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8080")))


if __name__ == "__main__":
    main()
