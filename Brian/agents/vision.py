"""
Vision bias extraction
Derives a short, stable keyword list from the free-text vision statement
"""
from collections import Counter
from typing import Dict, List, Optional

from ..config import config
from ..core.text import STOPWORDS, tokenize


def extract_vision_bias(vision: Optional[str], limit: Optional[int] = None) -> List[str]:
    """
    Extract bias keywords from a vision statement.

    Term frequency over the stopword-filtered text: tokens are lowercased,
    hyphenated compounds (``privacy-first``) are kept whole, tokens shorter
    than three characters and pure numbers are dropped. Keywords are ordered
    by frequency, ties broken by first occurrence, and capped at ``limit``.

    Args:
        vision: Free-text vision statement, may be None or blank
        limit: Maximum number of keywords (default: MAX_VISION_KEYWORDS)

    Returns:
        Ordered, de-duplicated keywords; empty for blank input
    """
    if not vision or not vision.strip():
        return []
    limit = limit or config.MAX_VISION_KEYWORDS

    counts: Counter = Counter()
    first_seen: Dict[str, int] = {}
    for position, token in enumerate(tokenize(vision)):
        if token in STOPWORDS or len(token) < 3 or token.replace(".", "").isdigit():
            continue
        counts[token] += 1
        first_seen.setdefault(token, position)

    ranked = sorted(counts, key=lambda token: (-counts[token], first_seen[token]))
    return ranked[:limit]
