"""
cluster_schemas.py — Deep-dive question registry
================================================
Maps every ClusterId to the free-text questions step 2 asks for it.

Two clusters carry bespoke questions.  Every other cluster deliberately uses
the generic three-question schema (generalInterest / experience / goals)
with the cluster's label substituted into the prompt text.  Adding a bespoke
cluster is a data change: add an entry to _BESPOKE_SCHEMAS.
"""

from __future__ import annotations

from dataclasses import dataclass

from interest_assessment.errors import ConfigurationError
from interest_assessment.models import ClusterId


@dataclass(frozen=True)
class FieldSpec:
    key:         str
    prompt:      str
    placeholder: str = ""


# ─── Bespoke schemas ─────────────────────────────────────────────────────────

_BESPOKE_SCHEMAS: dict[ClusterId, tuple[FieldSpec, ...]] = {
    ClusterId.TECHNOLOGY_COMPUTERS: (
        FieldSpec("techInterests",
                  "What kind of tech excites you the most?",
                  "e.g., apps, robots, games, websites, AI"),
        FieldSpec("codingExperience",
                  "Have you ever tried coding, building something online, or fixing a gadget?",
                  "Tell us about your experience"),
        FieldSpec("buildingGoals",
                  "What would you like to build or invent with technology?",
                  "Share your ideas and dreams"),
    ),
    ClusterId.SCIENCE_EXPERIMENTS: (
        FieldSpec("scienceTopics",
                  "What type of science experiments or topics interest you the most?",
                  "e.g., physics, biology, chemistry"),
        FieldSpec("projectExperience",
                  "Have you ever tried any science project at home or school?",
                  "Tell us about your project"),
        FieldSpec("inventionIdeas",
                  "If you could invent a new scientific tool or machine, what would it do?",
                  "Share your invention idea"),
    ),
}


# ─── Generic fallback ────────────────────────────────────────────────────────

# (key, prompt template, placeholder); {cluster} is the display label.
_GENERIC_TEMPLATE: tuple[tuple[str, str, str], ...] = (
    ("generalInterest", "What interests you most about {cluster}?",          "Tell us what excites you"),
    ("experience",      "Have you had any experience with {cluster}?",       "Share your experience"),
    ("goals",           "What would you like to learn or achieve in {cluster}?", "Share your goals"),
)

GENERIC_FIELD_KEYS: tuple[str, ...] = tuple(k for k, _, _ in _GENERIC_TEMPLATE)

_GENERIC_CLUSTERS: frozenset[ClusterId] = frozenset(
    c for c in ClusterId if c not in _BESPOKE_SCHEMAS
)


def _generic_schema(cluster: ClusterId) -> tuple[FieldSpec, ...]:
    return tuple(
        FieldSpec(key, prompt.format(cluster=cluster.label), placeholder)
        for key, prompt, placeholder in _GENERIC_TEMPLATE
    )


# ─── Public API ──────────────────────────────────────────────────────────────

def schema_for(cluster_id) -> tuple[FieldSpec, ...]:
    """
    Return the ordered deep-dive questions for *cluster_id*.

    Raises ConfigurationError for anything that is not a registered
    ClusterId; cluster ids only ever come from the fixed step 1 list, so
    reaching this is a programming error.
    """
    if isinstance(cluster_id, ClusterId):
        if cluster_id in _BESPOKE_SCHEMAS:
            return _BESPOKE_SCHEMAS[cluster_id]
        if cluster_id in _GENERIC_CLUSTERS:
            return _generic_schema(cluster_id)
    raise ConfigurationError(f"No deep-dive schema registered for cluster {cluster_id!r}")


def field_keys(cluster_id) -> tuple[str, ...]:
    return tuple(spec.key for spec in schema_for(cluster_id))


def uses_generic_schema(cluster_id: ClusterId) -> bool:
    return cluster_id in _GENERIC_CLUSTERS


def empty_response(cluster_id: ClusterId) -> dict[str, str]:
    """A fresh deep-dive entry with every required field present and blank."""
    return {key: "" for key in field_keys(cluster_id)}
