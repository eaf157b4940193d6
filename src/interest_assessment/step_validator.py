"""
step_validator.py – Per-step completion rules
==============================================
Inspects the AssessmentAnswerState for one wizard step and reports what is
missing.  Nothing here raises: every unmet rule becomes a StepViolation and
the wizard copies them into its field error map for display.

Rules implemented
-----------------
Step 1  Cluster selection:
  W-01  At least one interest cluster selected

Step 2  Deep dive:
  W-02  Every selected cluster has a deep-dive entry
        (entry existence is the completion signal; blank answers pass)

Step 3  Personality insights:
  W-03  At least one learning style
  W-04  A challenge approach is chosen
  W-05  At least one core value

Step 4  Career direction (terminal):
  W-06  Dream career text is not blank
  W-07  At least one exciting career type
  W-08  Career attraction text is not blank
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from interest_assessment.models import AssessmentAnswerState


class WizardStep(IntEnum):
    CLUSTER_SELECTION    = 1
    DEEP_DIVE            = 2
    PERSONALITY_INSIGHTS = 3
    CAREER_DIRECTION     = 4

    @property
    def title(self) -> str:
        return _STEP_TITLES[self]


_STEP_TITLES = {
    WizardStep.CLUSTER_SELECTION:    "Choose Your Interests",
    WizardStep.DEEP_DIVE:            "Tell Us More",
    WizardStep.PERSONALITY_INSIGHTS: "How You Learn",
    WizardStep.CAREER_DIRECTION:     "Your Future",
}

FIRST_STEP = WizardStep.CLUSTER_SELECTION
LAST_STEP  = WizardStep.CAREER_DIRECTION


# ─── Result types ────────────────────────────────────────────────────────────

@dataclass
class StepViolation:
    code:    str
    field:   str     # error key shown next to the offending input
    message: str


@dataclass
class StepValidationResult:
    step:       WizardStep
    violations: list[StepViolation] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def field_errors(self) -> dict[str, str]:
        """Field → message; the first violation per field wins."""
        errors: dict[str, str] = {}
        for v in self.violations:
            errors.setdefault(v.field, v.message)
        return errors

    def summary(self) -> str:
        if not self.violations:
            return f"Step {int(self.step)} complete."
        return "\n".join(f"[{v.code}] {v.message}" for v in self.violations)


# ─── Step checks ─────────────────────────────────────────────────────────────

def _check_cluster_selection(state: AssessmentAnswerState) -> list[StepViolation]:
    if not state.selected_clusters:
        return [StepViolation("W-01", "broadInterestClusters",
                              "Please select at least one interest area")]
    return []


def _check_deep_dive(state: AssessmentAnswerState) -> list[StepViolation]:
    missing = [c for c in state.selected_clusters if c not in state.cluster_responses]
    if missing:
        return [StepViolation("W-02", "clusterDeepDive",
                              "Please complete all questions for selected interest areas")]
    return []


def _check_personality(state: AssessmentAnswerState) -> list[StepViolation]:
    violations: list[StepViolation] = []
    if not state.learning_styles:
        violations.append(StepViolation("W-03", "learningStyle",
                                        "Please select at least one learning style"))
    if not state.challenge_approach:
        violations.append(StepViolation("W-04", "challengeApproach",
                                        "Please select how you approach challenges"))
    if not state.core_values:
        violations.append(StepViolation("W-05", "coreValues",
                                        "Please select at least one core value"))
    return violations


def _check_career_direction(state: AssessmentAnswerState) -> list[StepViolation]:
    violations: list[StepViolation] = []
    if not state.dream_career_text.strip():
        violations.append(StepViolation("W-06", "dreamCareer",
                                        "Please tell us about your dream career"))
    if not state.exciting_career_types:
        violations.append(StepViolation("W-07", "excitingCareerTypes",
                                        "Please select at least one exciting career type"))
    if not state.career_attraction_text.strip():
        violations.append(StepViolation("W-08", "careerAttraction",
                                        "Please tell us why this career attracts you"))
    return violations


_CHECKS = {
    WizardStep.CLUSTER_SELECTION:    _check_cluster_selection,
    WizardStep.DEEP_DIVE:            _check_deep_dive,
    WizardStep.PERSONALITY_INSIGHTS: _check_personality,
    WizardStep.CAREER_DIRECTION:     _check_career_direction,
}


def validate_step(step: int, state: AssessmentAnswerState) -> StepValidationResult:
    """Run the rules for *step* (1–4) against *state*."""
    step = WizardStep(step)
    return StepValidationResult(step=step, violations=_CHECKS[step](state))
