"""
Extended base tool for provider adapters
Adds timeouts, query composition and failure isolation on top of ADK BaseTool
"""
import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import httpx
from google.adk.tools import BaseTool

from ..config import config
from ..core.errors import ProviderError, ProviderMalformed, ProviderUnavailable
from ..core.models import Source, ToolResult

logger = logging.getLogger(__name__)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class ProviderTool(BaseTool):
    """
    Base class for the four provider adapters.

    Subclasses set ``source_type`` and implement ``compose_query`` and
    ``fetch``. ``run_async`` never raises for provider faults: it returns a
    ``ToolResult`` describing success, emptiness, failure or timeout.
    """
    source_type: str = ""
    timeout_seconds: float = 20  # Default timeout

    def __init__(
        self,
        *,
        name: str,
        description: str,
        timeout_seconds: Optional[float] = None,
        max_results: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(name=name, description=description)
        if timeout_seconds is not None:
            self.timeout_seconds = timeout_seconds
        self.max_results = max_results or config.MAX_RESULTS_PER_TOOL
        self._transport = transport

    def compose_query(self, query: str, bias: Sequence[str]) -> str:
        """Build the provider query from the user query and vision bias"""
        return query.strip()

    def is_configured(self) -> bool:
        """Whether the adapter has what it needs to reach its provider"""
        endpoint = getattr(self, "endpoint", None)
        if endpoint is None:
            return True
        return str(endpoint).startswith(("http://", "https://"))

    async def fetch(self, query: str) -> List[Source]:
        raise NotImplementedError

    async def run_async(self, *, args: Dict[str, Any], tool_context: Any = None) -> ToolResult:
        """
        Execute the provider call.

        Args:
            args: ``query`` (str) and optional ``bias`` (list of keywords)
            tool_context: ADK tool context, unused

        Returns:
            ToolResult tagged with this tool's name
        """
        start_time = time.time()
        query = self.compose_query(args.get("query", ""), args.get("bias") or [])

        try:
            sources = await self.fetch(query)
        except httpx.TimeoutException:
            logger.warning(f"{self.name} transport timed out after {self.timeout_seconds}s")
            return ToolResult.timeout(self.name, self.timeout_seconds, self._elapsed(start_time))
        except ProviderError as e:
            logger.error(f"{self.name} provider error: {e}")
            return ToolResult.failure(self.name, e.message, self._elapsed(start_time))

        logger.info(f"{self.name} returned {len(sources)} sources for '{query}'")
        return ToolResult.ok(self.name, sources, self._elapsed(start_time))

    async def _get_json(
        self,
        url: str,
        params: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """GET a JSON object, mapping transport problems to provider errors"""
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self.timeout_seconds,
            headers={"User-Agent": config.USER_AGENT},
        ) as client:
            try:
                response = await client.get(url, params=params, headers=headers)
            except httpx.TimeoutException:
                raise
            except httpx.HTTPError as e:
                raise ProviderUnavailable(self.name, f"request failed: {e.__class__.__name__}") from e

        if response.status_code >= 400:
            raise ProviderUnavailable(self.name, f"HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderMalformed(self.name, "response is not valid JSON") from e
        if not isinstance(data, dict):
            raise ProviderMalformed(self.name, f"expected a JSON object, got {type(data).__name__}")
        return data

    def _require_list(self, data: Dict[str, Any], key: str) -> List[Any]:
        value = data.get(key)
        if not isinstance(value, list):
            raise ProviderMalformed(self.name, f"missing '{key}' list")
        return value

    def _source_id(self, rank: int) -> str:
        return f"{self.source_type}-{rank}"

    @staticmethod
    def _elapsed(start_time: float) -> float:
        return (time.time() - start_time) * 1000
