import asyncio
import json

import httpx
import pytest

from Brian.tools import CommunityTool, KnowledgeTool, PlaybookTool, WebSearchTool


def run_tool(tool, query, bias=()):
    return asyncio.run(tool.run_async(args={"query": query, "bias": list(bias)}))


def json_transport(payload, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)
    return httpx.MockTransport(handler)


def raising_transport(exc_type):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)
    return httpx.MockTransport(handler)


def search_tool(transport):
    return WebSearchTool(endpoint="https://search.test/v7.0/search", api_key="secret", transport=transport)


# Web search

def test_search_maps_results_to_ranked_sources():
    seen = []
    payload = {"webPages": {"value": [
        {"name": "Build a local voice assistant", "url": "https://a.example",
         "snippet": "Offline voice assistant on Ubuntu", "displayUrl": "a.example", "deepLinks": []},
        {"name": "Other page", "url": "https://b.example", "snippet": "misc"},
        "garbage",
        {"name": "No url"},
    ]}}
    result = run_tool(search_tool(json_transport(payload, seen=seen)),
                      "local voice assistant", ["privacy-first", "ubuntu"])

    assert result.status == "ok"
    assert [s.id for s in result.sources] == ["search-1", "search-2"]
    assert {s.type for s in result.sources} == {"search"}
    first, second = result.sources
    assert first.confidence > second.confidence
    assert all(0.0 <= s.confidence <= 1.0 for s in result.sources)
    assert first.metadata == {"rank": 1, "displayUrl": "a.example"}

    request = seen[0]
    assert request.headers["Ocp-Apim-Subscription-Key"] == "secret"
    assert request.url.params["q"] == "local voice assistant privacy-first ubuntu"


def test_search_without_web_pages_is_empty_success():
    result = run_tool(search_tool(json_transport({"_type": "SearchResponse"})), "anything")
    assert result.status == "empty"
    assert result.sources == ()
    assert result.succeeded


@pytest.mark.parametrize(
    "transport, message",
    [
        (json_transport({"webPages": {"value": "nope"}}), "missing 'value' list"),
        (json_transport({"webPages": ["x"]}), "'webPages' is not an object"),
        (json_transport({}, status_code=503), "HTTP 503"),
        (json_transport(["not", "an", "object"]), "expected a JSON object, got list"),
        (httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")), "response is not valid JSON"),
        (raising_transport(httpx.ConnectError), "request failed: ConnectError"),
    ],
)
def test_search_failures_become_error_results(transport, message):
    result = run_tool(search_tool(transport), "anything")
    assert result.status == "error"
    assert result.tool == "search"
    assert result.error == message
    assert result.sources == ()


def test_transport_timeout_becomes_timeout_result():
    result = run_tool(search_tool(raising_transport(httpx.ReadTimeout)), "anything")
    assert result.status == "timeout"
    assert "timed out" in result.error


# Knowledge

def test_knowledge_prefers_exact_title_and_strips_markup():
    seen = []
    payload = {"pages": [
        {"id": 2, "key": "Speech_recognition", "title": "Speech recognition",
         "excerpt": "Converting spoken <span class=\"searchmatch\">voice</span> to text", "description": None},
        {"id": 1, "key": "Voice_assistant", "title": "Voice assistant",
         "excerpt": "A <span class=\"searchmatch\">voice</span> assistant &amp; agent",
         "description": "software agent"},
    ]}
    tool = KnowledgeTool(endpoint="https://knowledge.test/w/rest.php/v1/search/page",
                         transport=json_transport(payload, seen=seen))
    result = run_tool(tool, "Voice assistant", ["privacy-first"])

    assert result.status == "ok"
    assert seen[0].url.params["q"] == "Voice assistant"
    by_key = {s.metadata["pageKey"]: s for s in result.sources}
    exact = by_key["Voice_assistant"]
    assert exact.id == "knowledge-2"
    assert exact.confidence > by_key["Speech_recognition"].confidence
    assert exact.snippet == "A voice assistant & agent"
    assert exact.url == "https://knowledge.test/wiki/Voice_assistant"
    assert exact.metadata == {"pageKey": "Voice_assistant", "description": "software agent"}
    assert "description" not in by_key["Speech_recognition"].metadata


def test_knowledge_page_url_keeps_endpoint_port():
    payload = {"pages": [{"id": 1, "key": "Voice_assistant", "title": "Voice assistant", "excerpt": "agent"}]}
    tool = KnowledgeTool(endpoint="http://localhost:8080/w/rest.php/v1/search/page",
                         transport=json_transport(payload))
    result = run_tool(tool, "voice")

    assert result.sources[0].url == "http://localhost:8080/wiki/Voice_assistant"


def test_knowledge_requires_pages_list():
    tool = KnowledgeTool(endpoint="https://knowledge.test/search",
                         transport=json_transport({"results": []}))
    result = run_tool(tool, "voice")
    assert result.status == "error"
    assert result.error == "missing 'pages' list"


# Community

def test_community_blends_overlap_and_engagement():
    seen = []
    payload = {"hits": [
        {"objectID": "1", "title": "Show HN: Offline voice assistant", "url": "https://c.example",
         "points": 250, "num_comments": 120, "author": "alice", "_highlightResult": {}},
        {"objectID": "2", "title": "Unrelated story", "url": None, "points": 1, "num_comments": None},
        {"title": "missing id"},
    ]}
    tool = CommunityTool(endpoint="https://hn.test/api/v1/search", transport=json_transport(payload, seen=seen))
    result = run_tool(tool, "voice assistant", ["privacy-first", "ubuntu"])

    assert seen[0].url.params["query"] == "voice assistant privacy-first"
    assert [s.id for s in result.sources] == ["community-1", "community-2"]
    busy, quiet = result.sources
    assert busy.confidence > quiet.confidence
    assert busy.metadata == {
        "points": 250,
        "comments": 120,
        "discussionUrl": "https://news.ycombinator.com/item?id=1",
        "author": "alice",
    }
    assert quiet.url == "https://news.ycombinator.com/item?id=2"
    assert quiet.snippet == "1 points and 0 comments on Hacker News"


# Playbooks

def test_bundled_playbooks_match_voice_assistant_query():
    result = run_tool(PlaybookTool(), "plan a local voice assistant", ["privacy-first", "ubuntu"])

    assert result.status == "ok"
    top = result.sources[0]
    assert top.id == "system-1"
    assert top.type == "system"
    assert top.metadata["playbookId"] == "local-voice-assistant"
    assert top.metadata["firstStep"].startswith("Install PipeWire")
    confidences = [s.confidence for s in result.sources]
    assert confidences == sorted(confidences, reverse=True)


def test_playbooks_skip_invalid_entries_and_non_matches(tmp_path):
    corpus = tmp_path / "playbooks.json"
    corpus.write_text(json.dumps({"playbooks": [
        {"id": "backup", "title": "Backups", "summary": "restic nightly", "tags": ["backup"], "steps": []},
        {"id": "broken", "title": "Backup broken", "tags": "backup"},
        {"id": "garden", "title": "Gardening", "summary": "tomatoes", "tags": ["plants"]},
    ]}), encoding="utf-8")

    result = run_tool(PlaybookTool(path=str(corpus)), "nightly backup")

    assert [s.metadata["playbookId"] for s in result.sources] == ["backup"]
    assert "firstStep" not in result.sources[0].metadata


def test_playbooks_no_match_is_empty(tmp_path):
    corpus = tmp_path / "playbooks.json"
    corpus.write_text(json.dumps({"playbooks": []}), encoding="utf-8")
    assert run_tool(PlaybookTool(path=str(corpus)), "anything").status == "empty"


def test_playbooks_missing_or_corrupt_corpus(tmp_path):
    missing = run_tool(PlaybookTool(path=str(tmp_path / "absent.json")), "backup")
    assert missing.status == "error"
    assert missing.error.startswith("cannot read playbook corpus")

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    result = run_tool(PlaybookTool(path=str(corrupt)), "backup")
    assert result.status == "error"
    assert result.error == "playbook corpus is not valid JSON"


# Configuration state

@pytest.mark.parametrize("endpoint, api_key, expected", [
    ("https://api.bing.microsoft.com/v7.0/search", "secret", True),
    ("https://api.bing.microsoft.com/v7.0/search", "", False),
    ("http://localhost:8088/search", "", True),
    ("ftp://search.test/search", "secret", False),
])
def test_search_configuration_state(endpoint, api_key, expected):
    assert WebSearchTool(endpoint=endpoint, api_key=api_key).is_configured() is expected


def test_remote_tools_require_http_endpoint():
    assert KnowledgeTool(endpoint="https://knowledge.test/search").is_configured()
    assert not CommunityTool(endpoint="hn.test/api/v1/search").is_configured()
    assert PlaybookTool(path="missing.json").is_configured()
