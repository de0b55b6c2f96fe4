"""
Action plan builder
Turns the ranked sources and vision bias into 3-7 concrete steps
"""
from typing import Dict, List, Sequence

from ..core.models import Source

MIN_STEPS = 3
MAX_STEPS = 7


def _human_join(items: Sequence[str]) -> str:
    items = list(items)
    if len(items) <= 1:
        return "".join(items)
    return f"{', '.join(items[:-1])} and {items[-1]}"


def _lead_by_type(ranked: Sequence[Source]) -> Dict[str, Source]:
    """Highest-ranked source for each capability"""
    leads: Dict[str, Source] = {}
    for source in ranked:
        leads.setdefault(source.type, source)
    return leads


def build_plan(query: str, bias: Sequence[str], ranked: Sequence[Source]) -> List[str]:
    """
    Build an ordered action plan.

    Steps reference the best source each capability contributed; a playbook
    from the system capability always yields a local-first step. Without
    sources the plan is drawn from the query and vision alone.

    Returns:
        Between MIN_STEPS and MAX_STEPS human-readable steps
    """
    focus = f", keeping {_human_join(bias[:2])} front and center" if bias else ""
    steps = [f'Define what "done" looks like for "{query}"{focus}.']

    leads = _lead_by_type(ranked)

    if "knowledge" in leads:
        steps.append(f'Read up on the fundamentals in "{leads["knowledge"].title}" before choosing tools.')

    if "search" in leads:
        lead = leads["search"]
        where = f" ({lead.url})" if lead.url else ""
        steps.append(f'Compare current references, starting with "{lead.title}"{where}.')

    if "community" in leads:
        steps.append(
            f'Scan community experience in "{leads["community"].title}" for pitfalls and alternatives.'
        )

    if "system" in leads:
        lead = leads["system"]
        first_step = (lead.metadata or {}).get("firstStep")
        action = f": {first_step[0].lower()}{first_step[1:]}" if isinstance(first_step, str) and first_step else ""
        steps.append(f'Work local-first with the "{lead.title}" playbook on this machine{action}.')

    if ranked:
        if bias:
            steps.append(f"Prototype the smallest working slice and check it against {_human_join(bias[:3])}.")
        else:
            steps.append("Prototype the smallest working slice and verify it end to end.")
        steps.append("Record what worked and what to revisit, then iterate on the weakest step.")
    else:
        if bias:
            steps.append(f"Sketch an approach that honors {_human_join(bias[:3])} before picking any tools.")
        steps.append("Break the goal into two or three milestones you can test independently.")
        steps.append(
            "Re-run with external tools enabled, or once failing providers recover, "
            "to ground the next iteration in sources."
        )
        steps.append("Record decisions and open questions so the next pass starts from them.")

    return steps[:MAX_STEPS]
