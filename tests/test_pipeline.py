import asyncio
import time
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from Brian.core import OrchestrationFailure, ToolSettings, ValidationError
from Brian.workflows import AgentPipeline, create_agent_pipeline
from Brian.agents import ToolDispatchAgent
from fakes import FakeTool, fake_tools, make_source

ALL_OFF = ToolSettings(search=False, knowledge=False, community=False, system=False)


def run(pipeline, query, vision=None, enabled_tools=None):
    return asyncio.run(pipeline.run(query, vision=vision, enabled_tools=enabled_tools))


def test_scenario_all_tools_succeed(tools):
    response = run(AgentPipeline(tools), "plan a local voice assistant", vision="privacy-first Ubuntu")

    assert {s.type for s in response.sources} == {"search", "knowledge", "community", "system"}
    assert 3 <= len(response.plan) <= 7
    assert not response.diagnostics.errors
    assert response.diagnostics.vision_bias == ("privacy-first", "ubuntu")
    assert response.vision == "privacy-first Ubuntu"
    assert response.query == "plan a local voice assistant"
    assert [t.outcome for t in response.diagnostics.tool_trace] == ["ok"] * 4
    assert response.timestamp.tzinfo is not None


def test_scenario_all_tools_disabled(tools):
    response = run(AgentPipeline(tools), "x", enabled_tools=ALL_OFF)

    assert response.sources == ()
    assert response.summary
    assert response.plan
    assert response.vision is None
    assert response.diagnostics.vision_bias is None
    assert "No tools selected; skipping external providers" in response.diagnostics.steps
    assert response.diagnostics.tool_trace == ()


def test_scenario_knowledge_timeout():
    tools = fake_tools(
        knowledge=FakeTool("knowledge", [make_source("knowledge")], delay=5, timeout_seconds=10),
    )
    pipeline = AgentPipeline(tools, dispatcher=ToolDispatchAgent(tools, deadline_seconds=0.3))

    start = time.monotonic()
    response = run(pipeline, "plan a local voice assistant")

    assert time.monotonic() - start < 2
    assert {s.type for s in response.sources} == {"search", "community", "system"}
    assert any(error.startswith("knowledge timeout") for error in response.diagnostics.errors)
    assert len(response.diagnostics.tool_trace) == 4


def test_all_tools_failing_still_answers():
    tools = {name: FakeTool(name, raises=RuntimeError("down")) for name in ("search", "knowledge")}
    response = run(AgentPipeline(tools), "x", enabled_tools=ToolSettings(search=True, knowledge=True))

    assert response.sources == ()
    assert response.summary.startswith("No external sources were available")
    assert len(response.diagnostics.errors) == 2
    assert any("synthesizing from query and vision only" in step for step in response.diagnostics.steps)


def test_default_settings_enable_every_tool(tools):
    response = run(AgentPipeline(tools), "x")
    assert [t.tool for t in response.diagnostics.tool_trace] == ["search", "knowledge", "community", "system"]


def test_same_inputs_same_source_order(tools):
    pipeline = AgentPipeline(tools)
    first = run(pipeline, "voice", vision="local privacy")
    second = run(pipeline, "voice", vision="local privacy")
    assert [s.id for s in first.sources] == [s.id for s in second.sources]
    assert first.plan == second.plan
    assert first.summary == second.summary


def test_steps_follow_execution_order(tools):
    steps = run(AgentPipeline(tools), "voice", vision="ubuntu").diagnostics.steps
    assert steps[0] == "Extracted vision bias: ubuntu"
    assert steps[1].startswith("Dispatched 4 tools")
    assert steps[-1] == "Assembled response"


def test_query_is_echoed_as_given(tools):
    response = run(AgentPipeline(tools), "  voice  ")

    assert response.query == "  voice  "
    assert tools["search"].queries == ["voice"]


def test_response_cannot_be_mutated():
    tools = fake_tools(search=FakeTool("search", [make_source("search", confidence=0.99, displayUrl="a.example")]))
    response = run(AgentPipeline(tools), "voice", vision="ubuntu")
    source = response.sources[0]
    assert source.metadata == {"displayUrl": "a.example"}

    with pytest.raises(AttributeError):
        response.plan.append("one more step")
    with pytest.raises(AttributeError):
        response.sources.clear()
    with pytest.raises(AttributeError):
        response.diagnostics.steps.append("rewritten")
    with pytest.raises(TypeError):
        source.metadata["injected"] = True
    with pytest.raises(PydanticValidationError):
        source.confidence = 1.0


@pytest.mark.parametrize("query", ["", "   "])
def test_blank_query_is_rejected(tools, query):
    with pytest.raises(ValidationError):
        run(AgentPipeline(tools), query)
    assert all(not tool.queries for tool in tools.values())


def test_orchestration_fault_is_wrapped(tools):
    pipeline = AgentPipeline(tools)
    with patch.object(pipeline.synthesizer, "synthesize", side_effect=KeyError("defect")):
        with pytest.raises(OrchestrationFailure):
            run(pipeline, "voice")


def test_concurrent_requests_do_not_share_diagnostics(tools):
    pipeline = AgentPipeline(tools)

    async def both():
        return await asyncio.gather(
            pipeline.run("voice", enabled_tools=ToolSettings(search=True)),
            pipeline.run("voice", enabled_tools=ToolSettings(system=True)),
        )

    first, second = asyncio.run(both())
    assert [t.tool for t in first.diagnostics.tool_trace] == ["search"]
    assert [t.tool for t in second.diagnostics.tool_trace] == ["system"]


def test_factory_builds_default_adapters():
    pipeline = create_agent_pipeline()
    assert sorted(pipeline.tools) == ["community", "knowledge", "search", "system"]
    assert pipeline.tools["system"].source_type == "system"
