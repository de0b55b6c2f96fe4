"""
Community discussion tool
Hacker News search (Algolia API) mapped into ranked sources
"""
import logging
import math
from typing import List, Optional, Sequence

from .extended_base_tool import ProviderTool, clamp
from ..config import config
from ..core.models import Source
from ..core.text import clip, content_terms, join_terms, strip_markup, term_overlap

logger = logging.getLogger(__name__)

DISCUSSION_URL = "https://news.ycombinator.com/item?id={}"


def _count(value) -> int:
    return value if isinstance(value, int) and value > 0 else 0


class CommunityTool(ProviderTool):
    """
    Practitioner discussions and war stories.

    Confidence mixes topical overlap with log-scaled engagement so a busy
    thread on the right topic outranks a quiet one.
    """
    source_type = "community"

    def __init__(self, endpoint: Optional[str] = None, **kwargs):
        kwargs.setdefault("timeout_seconds", config.TIMEOUT_COMMUNITY)
        super().__init__(
            name="community",
            description=(
                "Search community discussions for practical experience. "
                "Use for pitfalls, comparisons and real-world reports."
            ),
            **kwargs
        )
        self.endpoint = endpoint or config.COMMUNITY_ENDPOINT

    def compose_query(self, query: str, bias: Sequence[str]) -> str:
        return join_terms(query, list(bias)[:1])

    async def fetch(self, query: str) -> List[Source]:
        data = await self._get_json(
            self.endpoint,
            params={"query": query, "tags": "story", "hitsPerPage": self.max_results},
        )
        hits = self._require_list(data, "hits")

        terms = content_terms(query)
        sources: List[Source] = []
        for hit in hits:
            if not isinstance(hit, dict):
                continue
            title = hit.get("title") or hit.get("story_title")
            object_id = hit.get("objectID")
            if not isinstance(title, str) or object_id is None:
                continue

            points = _count(hit.get("points"))
            comments = _count(hit.get("num_comments"))
            discussion_url = DISCUSSION_URL.format(object_id)
            url = hit.get("url") if isinstance(hit.get("url"), str) and hit.get("url") else discussion_url

            text = strip_markup(hit.get("story_text") or "") if isinstance(hit.get("story_text"), str) else ""
            snippet = text or f"{points} points and {comments} comments on Hacker News"

            engagement = min(1.0, math.log10(1 + points + comments) / 3)
            overlap = term_overlap(f"{title} {text}", terms)

            metadata = {
                "points": points,
                "comments": comments,
                "discussionUrl": discussion_url,
            }
            if isinstance(hit.get("author"), str):
                metadata["author"] = hit["author"]

            sources.append(Source(
                id=self._source_id(len(sources) + 1),
                type="community",
                title=clip(title, 160),
                url=url,
                snippet=clip(snippet, config.SNIPPET_LENGTH),
                confidence=round(clamp(0.1 + 0.5 * overlap + 0.35 * engagement), 4),
                metadata=metadata,
            ))
            if len(sources) >= self.max_results:
                break
        return sources
