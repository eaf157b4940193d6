"""
selection.py — Cardinality rules for multi-select answers
=========================================================
Adding to a full selection is silently ignored; removing is always allowed.
Minimums are never checked here: an empty selection is only flagged by the
step validator when the student tries to leave the step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Optional, Sequence, TypeVar

from interest_assessment.models import (
    CAREER_TYPES,
    CLUSTER_LABELS,
    CORE_VALUES,
    LEARNING_STYLES,
    MAX_CAREER_TYPES,
    MAX_CLUSTERS,
    MAX_CORE_VALUES,
    MAX_LEARNING_STYLES,
)

T = TypeVar("T", bound=Hashable)


def try_toggle(current: Sequence[T], value: T, max_size: int) -> Optional[list[T]]:
    """
    Toggle *value* in the ordered selection *current*.

    Returns the new selection, or None when the value was absent and the
    selection already holds *max_size* items.  *current* is never mutated.
    """
    if value in current:
        return [v for v in current if v != value]
    if len(current) < max_size:
        return [*current, value]
    return None


@dataclass(frozen=True)
class SelectionRule:
    """Bounds and allowed options for one multi-select answer."""
    error_key: str
    max_size:  int
    options:   tuple


# Keyed by wizard field path.
SELECTION_RULES: dict[str, SelectionRule] = {
    "broadInterestClusters": SelectionRule(
        "broadInterestClusters", MAX_CLUSTERS, tuple(CLUSTER_LABELS)),
    "personalityInsights.learningStyle": SelectionRule(
        "learningStyle", MAX_LEARNING_STYLES, LEARNING_STYLES),
    "personalityInsights.coreValues": SelectionRule(
        "coreValues", MAX_CORE_VALUES, CORE_VALUES),
    "careerDirection.excitingCareerTypes": SelectionRule(
        "excitingCareerTypes", MAX_CAREER_TYPES, CAREER_TYPES),
}
