"""
Web search tool
Bing-compatible web search API mapped into ranked sources
"""
import logging
from typing import List, Optional, Sequence

import httpx

from .extended_base_tool import ProviderTool, clamp
from ..config import config
from ..core.errors import ProviderMalformed
from ..core.models import Source
from ..core.text import clip, content_terms, join_terms, term_overlap

logger = logging.getLogger(__name__)

BING_HOST = "api.bing.microsoft.com"


class WebSearchTool(ProviderTool):
    """
    Web search for current references.

    Sends the query plus the two strongest vision keywords. Confidence
    blends the provider's rank with how many query terms the result covers.
    """
    source_type = "search"

    def __init__(self, endpoint: Optional[str] = None, api_key: Optional[str] = None, **kwargs):
        kwargs.setdefault("timeout_seconds", config.TIMEOUT_SEARCH)
        super().__init__(
            name="search",
            description=(
                "Search the web for current information and references. "
                "Use for recent releases, documentation and how-to guides."
            ),
            **kwargs
        )
        self.endpoint = endpoint or config.SEARCH_ENDPOINT
        self.api_key = config.SEARCH_API_KEY if api_key is None else api_key

    def is_configured(self) -> bool:
        if not super().is_configured():
            return False
        # The hosted Bing API rejects calls without a subscription key
        return bool(self.api_key) or httpx.URL(self.endpoint).host != BING_HOST

    def compose_query(self, query: str, bias: Sequence[str]) -> str:
        return join_terms(query, list(bias)[:2])

    async def fetch(self, query: str) -> List[Source]:
        headers = {"Ocp-Apim-Subscription-Key": self.api_key} if self.api_key else None
        data = await self._get_json(
            self.endpoint,
            params={"q": query, "count": self.max_results},
            headers=headers,
        )

        # No webPages block means no results
        if not data.get("webPages"):
            return []
        web_pages = data["webPages"]
        if not isinstance(web_pages, dict):
            raise ProviderMalformed(self.name, "'webPages' is not an object")
        results = self._require_list(web_pages, "value")

        terms = content_terms(query)
        sources: List[Source] = []
        for item in results:
            if not isinstance(item, dict):
                continue
            title = item.get("name")
            url = item.get("url")
            if not isinstance(title, str) or not isinstance(url, str):
                continue
            snippet = item.get("snippet") if isinstance(item.get("snippet"), str) else ""

            rank = len(sources)
            position = max(0.3, 0.9 - 0.1 * rank)
            overlap = term_overlap(f"{title} {snippet}", terms)
            metadata = {"rank": rank + 1}
            if isinstance(item.get("displayUrl"), str):
                metadata["displayUrl"] = item["displayUrl"]

            sources.append(Source(
                id=self._source_id(rank + 1),
                type="search",
                title=clip(title, 160),
                url=url,
                snippet=clip(snippet, config.SNIPPET_LENGTH),
                confidence=round(clamp(0.6 * position + 0.4 * overlap), 4),
                metadata=metadata,
            ))
            if len(sources) >= self.max_results:
                break
        return sources
