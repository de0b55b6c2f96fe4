"""
System playbook tool
Matches the query against a local, offline corpus of operational playbooks
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .extended_base_tool import ProviderTool, clamp
from ..config import config
from ..core.errors import ProviderMalformed, ProviderUnavailable
from ..core.models import Source
from ..core.text import clip, content_terms, join_terms, term_overlap

logger = logging.getLogger(__name__)


class PlaybookTool(ProviderTool):
    """
    Local-first operational playbooks.

    The corpus is a JSON document ``{"playbooks": [...]}`` where each entry
    has ``id``, ``title``, ``summary``, ``tags`` and ``steps``. It is read
    from disk on every call in a worker thread, so edits show up without a
    restart and no state is shared between requests.

    Scoring weights: title 0.45, tags 0.35, summary 0.20. Playbooks with no
    overlap at all are not returned.
    """
    source_type = "system"

    def __init__(self, path: Optional[str] = None, **kwargs):
        kwargs.setdefault("timeout_seconds", config.TIMEOUT_SYSTEM)
        super().__init__(
            name="system",
            description=(
                "Consult local operational playbooks. "
                "Use for setup, hardening and offline-first procedures on this machine."
            ),
            **kwargs
        )
        self.path = Path(path or config.PLAYBOOK_PATH)

    def compose_query(self, query: str, bias: Sequence[str]) -> str:
        return join_terms(query, bias)

    def load_corpus(self) -> List[Dict[str, Any]]:
        """Read and validate the playbook corpus"""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ProviderUnavailable(self.name, f"cannot read playbook corpus: {e.strerror or e}") from e
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ProviderMalformed(self.name, "playbook corpus is not valid JSON") from e
        if not isinstance(data, dict):
            raise ProviderMalformed(self.name, "playbook corpus must be a JSON object")
        playbooks = self._require_list(data, "playbooks")
        return [entry for entry in playbooks if _is_playbook(entry)]

    async def fetch(self, query: str) -> List[Source]:
        corpus = await asyncio.to_thread(self.load_corpus)
        terms = content_terms(query)

        scored: List[Tuple[float, int, Dict[str, Any]]] = []
        for position, entry in enumerate(corpus):
            score = (
                0.45 * term_overlap(entry["title"], terms)
                + 0.35 * term_overlap(" ".join(entry.get("tags", [])), terms)
                + 0.20 * term_overlap(entry.get("summary", ""), terms)
            )
            if score > 0:
                scored.append((score, position, entry))

        scored.sort(key=lambda item: (-item[0], item[1]))

        sources: List[Source] = []
        for rank, (score, _, entry) in enumerate(scored[: self.max_results], 1):
            steps = entry.get("steps", [])
            metadata: Dict[str, Any] = {
                "playbookId": entry["id"],
                "tags": tuple(entry.get("tags", [])),
            }
            if steps:
                metadata["firstStep"] = steps[0]
                metadata["stepCount"] = len(steps)
            sources.append(Source(
                id=self._source_id(rank),
                type="system",
                title=entry["title"],
                url=entry.get("url"),
                snippet=clip(entry.get("summary", ""), config.SNIPPET_LENGTH),
                confidence=round(clamp(0.2 + 0.75 * score), 4),
                metadata=metadata,
            ))
        return sources


def _is_playbook(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    if not isinstance(entry.get("id"), str) or not isinstance(entry.get("title"), str):
        return False
    if not isinstance(entry.get("summary", ""), str):
        return False
    if "url" in entry and not isinstance(entry["url"], str):
        return False
    for key in ("tags", "steps"):
        value = entry.get(key, [])
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            return False
    return True
