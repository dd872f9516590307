"""Scoring, ranking and match highlighting for model name suggestions."""

from __future__ import annotations

from typing import Iterable, List, NamedTuple, Optional, Tuple

from rich.text import Text

from provider_probe.suggest.collation import Collation, english_collation_key

SCORE_EXACT = 3
SCORE_PREFIX = 2
SCORE_CONTAINS = 1
SCORE_NONE = 0


class ScoredCandidate(NamedTuple):
    value: str
    score: int


def score_suggestion(candidate: str, query: str) -> int:
    """Case-insensitive match quality of *candidate* against *query*.

    3 exact, 2 prefix, 1 substring, 0 otherwise or when *query* is empty.
    """
    if not query:
        return SCORE_NONE
    s = candidate.lower()
    q = query.lower()
    if s == q:
        return SCORE_EXACT
    if s.startswith(q):
        return SCORE_PREFIX
    if q in s:
        return SCORE_CONTAINS
    return SCORE_NONE


def rank_suggestions(
    candidates: Iterable[str],
    query: str,
    collation: Collation = english_collation_key,
) -> List[ScoredCandidate]:
    """All candidates, best score first, equal scores in collation order."""
    scored = [ScoredCandidate(c, score_suggestion(c, query)) for c in candidates]
    return sorted(scored, key=lambda sc: (-sc.score, collation(sc.value)))


def split_match(candidate: str, query: str) -> Optional[Tuple[str, str, str]]:
    """Split *candidate* around the first case-insensitive *query* hit.

    Returns ``(before, match, after)``, or ``None`` when *query* is empty
    or absent. ``"".join(parts) == candidate`` always holds.
    """
    if not query:
        return None
    idx = candidate.lower().find(query.lower())
    if idx == -1:
        return None
    end = idx + len(query)
    return candidate[:idx], candidate[idx:end], candidate[end:]


def highlight(candidate: str, query: str, match_style: str = "bold") -> Text:
    """Rich renderable of *candidate* with the matched part styled."""
    parts = split_match(candidate, query)
    if parts is None:
        return Text(candidate)
    before, match, after = parts
    text = Text(before)
    text.append(match, style=match_style)
    text.append(after)
    return text
