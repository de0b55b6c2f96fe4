"""
Text helpers shared by vision extraction, adapter scoring and synthesis
"""
import html
import re
from typing import Iterable, List, Sequence

_TOKEN = re.compile(r"[a-z0-9]+(?:[-+.][a-z0-9]+)*")
_MARKUP = re.compile(r"<[^>]+>")
_SPACE = re.compile(r"\s+")

STOPWORDS = frozenset({
    "a", "about", "above", "after", "all", "also", "am", "an", "and", "any",
    "are", "as", "at", "be", "because", "been", "being", "both", "but", "by",
    "can", "could", "did", "do", "does", "doing", "each", "every", "few",
    "for", "from", "get", "had", "has", "have", "having", "he", "her", "here",
    "his", "how", "i", "if", "in", "into", "is", "it", "its", "just", "let",
    "like", "make", "me", "more", "most", "much", "must", "my", "need", "no",
    "nor", "not", "now", "of", "off", "on", "once", "one", "only", "or",
    "other", "our", "ours", "out", "over", "own", "same", "she", "should",
    "so", "some", "such", "than", "that", "the", "their", "them", "then",
    "there", "these", "they", "this", "those", "through", "to", "too",
    "under", "until", "up", "use", "very", "via", "want", "was", "we",
    "were", "what", "when", "where", "which", "while", "who", "whom", "why",
    "will", "with", "within", "without", "would", "you", "your", "yours",
})


def tokenize(text: str) -> List[str]:
    """Lowercase word tokens; hyphenated compounds stay whole"""
    return _TOKEN.findall((text or "").lower())


def content_terms(text: str, min_length: int = 3) -> List[str]:
    """Distinct non-stopword tokens in first-occurrence order"""
    seen = set()
    terms: List[str] = []
    for token in tokenize(text):
        if token in STOPWORDS or len(token) < min_length or token in seen:
            continue
        seen.add(token)
        terms.append(token)
    return terms


def term_overlap(text: str, terms: Sequence[str]) -> float:
    """
    Fraction of ``terms`` found in ``text``.

    A compound term such as ``privacy-first`` also matches when all of its
    parts appear separately.
    """
    if not terms:
        return 0.0
    tokens = set(tokenize(text))
    parts = set()
    for token in tokens:
        parts.update(re.split(r"[-+.]", token))
    hits = 0
    for term in terms:
        if term in tokens:
            hits += 1
        elif all(part in tokens or part in parts for part in re.split(r"[-+.]", term) if part):
            hits += 1
    return hits / len(terms)


def strip_markup(text: str) -> str:
    """Remove HTML tags and entities and collapse whitespace"""
    return _SPACE.sub(" ", html.unescape(_MARKUP.sub("", text or ""))).strip()


def clip(text: str, limit: int) -> str:
    """Shorten text to ``limit`` characters on a word boundary"""
    text = _SPACE.sub(" ", text or "").strip()
    if len(text) <= limit:
        return text
    cut = text[: limit - 3].rsplit(" ", 1)[0]
    return f"{cut}..."


def join_terms(base: str, extra: Iterable[str]) -> str:
    """Append extra terms to a query, skipping ones it already contains"""
    present = set(tokenize(base))
    additions = [term for term in extra if term not in present]
    return " ".join([base.strip(), *additions]).strip()
