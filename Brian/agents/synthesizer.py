"""
Response synthesis agent
Ranks merged sources deterministically and writes the summary and plan
"""
import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .planner import build_plan
from ..config import TOOL_ORDER, TOOL_PRIORITY
from ..core.diagnostics import DiagnosticsRecorder
from ..core.models import Source
from ..core.text import clip, term_overlap

logger = logging.getLogger(__name__)

# Confidence added per vision keyword a source mentions
VISION_BOOST = 0.05

_PRIORITY = {name: index for index, name in enumerate(TOOL_PRIORITY)}


@dataclass(frozen=True)
class Synthesis:
    summary: str
    plan: Tuple[str, ...]
    sources: Tuple[Source, ...] = field(default_factory=tuple)


def apply_vision_bias(source: Source, bias: Sequence[str]) -> Source:
    """Boost a source for each vision keyword found in its title or snippet"""
    text = f"{source.title} {source.snippet}"
    matches = [keyword for keyword in bias if term_overlap(text, [keyword]) == 1.0]
    if not matches:
        return source
    metadata = dict(source.metadata or {})
    metadata["visionMatches"] = tuple(matches)
    confidence = round(min(1.0, source.confidence + VISION_BOOST * len(matches)), 4)
    return Source(**{**source.model_dump(), "confidence": confidence, "metadata": metadata})


def rank_sources(sources: Sequence[Source], bias: Sequence[str] = ()) -> List[Source]:
    """
    Order sources for presentation.

    Sort key: vision-adjusted confidence descending, then capability
    priority (knowledge, search, community, system), then arrival order.
    """
    adjusted = [(apply_vision_bias(source, bias), arrival) for arrival, source in enumerate(sources)]
    adjusted.sort(key=lambda pair: (
        -pair[0].confidence,
        _PRIORITY.get(pair[0].type, len(_PRIORITY)),
        pair[1],
    ))
    return [source for source, _ in adjusted]


def _sentence(text: str) -> str:
    text = text.strip()
    return text if text.endswith((".", "!", "?")) else f"{text}."


def summarize(query: str, bias: Sequence[str], ranked: Sequence[Source]) -> str:
    """One short paragraph built from the query and the top-ranked sources"""
    if not ranked:
        focus = f" and the vision focus on {', '.join(bias[:3])}" if bias else ""
        return (
            f'No external sources were available for "{query}". '
            f"The plan below works from the request{focus} alone, so treat it as a starting outline."
        )

    kinds = [name for name in TOOL_ORDER if any(source.type == name for source in ranked)]
    count = len(ranked)
    parts = [
        f'For "{query}", {count} source{"s" if count != 1 else ""} from '
        f'{len(kinds)} tool{"s" if len(kinds) != 1 else ""} ({", ".join(kinds)}) were ranked.'
    ]

    top = ranked[0]
    lead = f'Top lead: "{top.title}" ({top.type}, confidence {top.confidence:.2f})'
    snippet = clip(top.snippet, 160)
    parts.append(_sentence(f"{lead}: {snippet}") if snippet else _sentence(lead))

    if count > 1:
        parts.append(f'Also worth reading: "{ranked[1].title}" ({ranked[1].type}).')
    if bias:
        parts.append(f"Ranking favored the vision focus on {', '.join(bias[:3])}.")
    return " ".join(parts)


class SynthesisAgent:
    """
    Deterministic synthesis of ranked sources, summary and plan.

    Identical inputs always produce identical output; there is no model
    call and no randomness.
    """

    def synthesize(
        self,
        query: str,
        bias: Sequence[str],
        sources: Sequence[Source],
        recorder: DiagnosticsRecorder,
    ) -> Synthesis:
        ranked = rank_sources(sources, bias)
        if ranked:
            recorder.step(f"Ranked {len(ranked)} sources")
        else:
            recorder.step("No external sources were available; synthesizing from query and vision only")

        summary = summarize(query, bias, ranked)
        plan = build_plan(query, bias, ranked)
        recorder.step(f"Synthesized summary and {len(plan)}-step plan")
        logger.info(f"Synthesis complete: {len(ranked)} sources, {len(plan)} plan steps")
        return Synthesis(summary=summary, plan=tuple(plan), sources=tuple(ranked))
