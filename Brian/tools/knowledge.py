"""
Structured knowledge tool
MediaWiki REST page search mapped into ranked sources
"""
import logging
from typing import List, Optional
from urllib.parse import quote

import httpx

from .extended_base_tool import ProviderTool, clamp
from ..config import config
from ..core.models import Source
from ..core.text import clip, content_terms, strip_markup, term_overlap

logger = logging.getLogger(__name__)


class KnowledgeTool(ProviderTool):
    """
    Encyclopedic background from a MediaWiki instance.

    Vision keywords are not sent: reference search degrades when the query
    is padded with intent words. An exact title match scores highest,
    otherwise title coverage outweighs excerpt coverage.
    """
    source_type = "knowledge"

    def __init__(self, endpoint: Optional[str] = None, **kwargs):
        kwargs.setdefault("timeout_seconds", config.TIMEOUT_KNOWLEDGE)
        super().__init__(
            name="knowledge",
            description=(
                "Look up structured background knowledge. "
                "Use for definitions, concepts and established facts."
            ),
            **kwargs
        )
        self.endpoint = endpoint or config.KNOWLEDGE_ENDPOINT
        parsed = httpx.URL(self.endpoint)
        self.page_base = f"{parsed.scheme}://{parsed.netloc.decode('ascii')}/wiki/"

    async def fetch(self, query: str) -> List[Source]:
        data = await self._get_json(self.endpoint, params={"q": query, "limit": self.max_results})
        pages = self._require_list(data, "pages")

        terms = content_terms(query)
        normalized_query = " ".join(query.lower().split())
        sources: List[Source] = []
        for page in pages:
            if not isinstance(page, dict):
                continue
            title = page.get("title")
            key = page.get("key")
            if not isinstance(title, str) or not isinstance(key, str):
                continue
            excerpt = strip_markup(page.get("excerpt") or "") if isinstance(page.get("excerpt"), str) else ""
            description = page.get("description") if isinstance(page.get("description"), str) else None

            rank = len(sources)
            if title.lower() == normalized_query:
                score = 0.95
            else:
                score = (
                    0.35
                    + 0.45 * term_overlap(title, terms)
                    + 0.15 * term_overlap(f"{excerpt} {description or ''}", terms)
                )
            score -= 0.02 * rank

            metadata = {"pageKey": key}
            if description:
                metadata["description"] = description

            sources.append(Source(
                id=self._source_id(rank + 1),
                type="knowledge",
                title=title,
                url=self.page_base + quote(key, safe="/:()_,'"),
                snippet=clip(excerpt or description or title, config.SNIPPET_LENGTH),
                confidence=round(clamp(score), 4),
                metadata=metadata,
            ))
            if len(sources) >= self.max_results:
                break
        return sources
