"""
Tool dispatch agent
Fans out to the enabled provider adapters concurrently and collects one result per tool
"""
import logging
import asyncio
import time
from typing import Dict, List, Optional, Sequence

from opentelemetry import trace

from ..config import config
from ..core.diagnostics import DiagnosticsRecorder
from ..core.models import ToolResult, ToolSettings
from ..tools import ProviderTool

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class ToolDispatchAgent:
    """
    Executes the enabled provider adapters with per-tool isolation.

    Features:
    - One asyncio task per enabled tool, all in flight at once
    - Per-tool timeout enforced with asyncio.wait_for
    - Overall deadline after which pending tools are cancelled as timeouts
    - Exactly one trace entry per enabled tool, whatever the outcome
    """

    def __init__(self, tools: Dict[str, ProviderTool], deadline_seconds: Optional[float] = None):
        self.tools = tools
        self.deadline_seconds = deadline_seconds or config.TIMEOUT_TOTAL

    async def dispatch(
        self,
        query: str,
        bias: Sequence[str],
        settings: ToolSettings,
        recorder: DiagnosticsRecorder,
    ) -> List[ToolResult]:
        """
        Run every enabled tool and wait until all of them settle.

        Args:
            query: The user query
            bias: Vision keywords passed to each adapter
            settings: Enabled capabilities
            recorder: Diagnostics for this request

        Returns:
            One ToolResult per enabled tool, in canonical tool order
        """
        enabled = settings.enabled()
        if not enabled:
            recorder.step("No tools selected; skipping external providers")
            return []

        skipped = settings.disabled()
        if skipped:
            logger.info(f"Skipping disabled tools: {', '.join(skipped)}")

        with tracer.start_as_current_span("dispatch_tools") as span:
            span.set_attribute("tools.enabled", ",".join(enabled))
            recorder.step(f"Dispatched {len(enabled)} tools: {', '.join(enabled)}")

            # Fan-out: one task per configured tool
            tasks: Dict[str, asyncio.Task] = {
                name: asyncio.create_task(self._execute_tool(name, query, bias), name=f"tool:{name}")
                for name in enabled
                if name in self.tools
            }

            # Fan-in: all-settled barrier bounded by the overall deadline
            pending = set()
            if tasks:
                _, pending = await asyncio.wait(tasks.values(), timeout=self.deadline_seconds)
                for task in pending:
                    task.cancel()
                # Let cancelled adapters close their clients before returning
                await asyncio.gather(*pending, return_exceptions=True)
                if pending:
                    logger.warning(
                        f"Overall deadline of {self.deadline_seconds}s reached with "
                        f"{len(pending)} tool(s) still running"
                    )

            results: List[ToolResult] = []
            for name in enabled:
                task = tasks.get(name)
                if task is None:
                    result = ToolResult.failure(name, "no adapter configured")
                elif task in pending:
                    result = ToolResult.timeout(
                        name, self.deadline_seconds, latency_ms=self.deadline_seconds * 1000
                    )
                else:
                    result = task.result()
                results.append(result)
                self._record(result, recorder)

            succeeded = [r for r in results if r.succeeded]
            total = sum(len(r.sources) for r in succeeded)
            span.set_attribute("tools.succeeded", len(succeeded))
            recorder.step(
                f"Collected {total} sources from {len(succeeded)} of {len(results)} tools"
            )
            return results

    async def _execute_tool(self, tool_name: str, query: str, bias: Sequence[str]) -> ToolResult:
        """
        Execute a single tool with timeout and error isolation.

        Never raises: every failure mode is folded into the returned result.
        """
        tool = self.tools[tool_name]
        timeout = getattr(tool, "timeout_seconds", 20)  # Default to 20s
        start_time = time.time()

        try:
            result = await asyncio.wait_for(
                tool.run_async(args={"query": query, "bias": list(bias)}, tool_context=None),
                timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Tool {tool_name} timed out after {timeout}s")
            return ToolResult.timeout(tool_name, timeout, self._elapsed(start_time))
        except Exception as e:
            logger.error(f"Tool {tool_name} error: {e}", exc_info=True)
            return ToolResult.failure(
                tool_name, f"unexpected {e.__class__.__name__}", self._elapsed(start_time)
            )

        problem = self._validate(tool_name, result)
        if problem:
            logger.error(f"Tool {tool_name} returned an invalid result: {problem}")
            return ToolResult.failure(tool_name, problem, self._elapsed(start_time))
        return result

    def _validate(self, tool_name: str, result: object) -> Optional[str]:
        """Check the adapter contract: own tag, own source type, unique ids"""
        if not isinstance(result, ToolResult) or result.tool != tool_name:
            return "adapter returned an unexpected result"
        if any(source.type != tool_name for source in result.sources):
            return "adapter emitted sources of another type"
        ids = [source.id for source in result.sources]
        if len(ids) != len(set(ids)):
            return "adapter emitted duplicate source ids"
        return None

    def _record(self, result: ToolResult, recorder: DiagnosticsRecorder):
        recorder.trace(result)
        if not result.succeeded:
            recorder.error(f"{result.tool} {result.status}: {result.error}")

    @staticmethod
    def _elapsed(start_time: float) -> float:
        return (time.time() - start_time) * 1000
