"""Model name suggestions: scoring, ranking and the dropdown state machine."""

from provider_probe.suggest.collation import (
    codepoint_collation_key,
    english_collation_key,
    get_collation,
)
from provider_probe.suggest.dropdown import DropdownEvent, DropdownMachine, DropdownState
from provider_probe.suggest.ranking import (
    ScoredCandidate,
    highlight,
    rank_suggestions,
    score_suggestion,
    split_match,
)

__all__ = [
    "DropdownEvent",
    "DropdownMachine",
    "DropdownState",
    "ScoredCandidate",
    "codepoint_collation_key",
    "english_collation_key",
    "get_collation",
    "highlight",
    "rank_suggestions",
    "score_suggestion",
    "split_match",
]
