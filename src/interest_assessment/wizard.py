"""
wizard.py — Four-step interest assessment session
=================================================
WizardSession owns the answer state, the current step and the field error
map for one student's pass through the interest assessment.  It is built
fresh by the host (see entry.open_wizard) and discarded after a successful
submission; nothing is persisted until the single final write.

Field paths
-----------
  broadInterestClusters                         set   (≤ 3, cascades deep dive)
  clusterDeepDive.<clusterKey>.<fieldKey>       text
  personalityInsights.learningStyle             set   (≤ 2)
  personalityInsights.challengeApproach         single choice
  personalityInsights.coreValues                set   (≤ 3)
  careerDirection.dreamCareer                   text
  careerDirection.excitingCareerTypes           set   (≤ 2)
  careerDirection.careerAttraction              text

Any other path is a programming error (InvalidFieldError).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from interest_assessment import cluster_schemas
from interest_assessment.cluster_schemas import FieldSpec
from interest_assessment.errors import InvalidFieldError, SessionClosedError
from interest_assessment.models import (
    CHALLENGE_APPROACHES,
    AssessmentAnswerState,
    ClusterId,
    Principal,
)
from interest_assessment.selection import SELECTION_RULES, try_toggle
from interest_assessment.session_trace import SessionTrace
from interest_assessment.step_validator import (
    FIRST_STEP,
    LAST_STEP,
    WizardStep,
    validate_step,
)
from interest_assessment.submission import (
    DEFAULT_DEBOUNCE_MS,
    SubmissionGuard,
    SubmissionOutcome,
    SubmissionReport,
    SubmissionState,
)

logger = logging.getLogger(__name__)

NEXT_DESTINATION = "diagnostic-assessment"

_CLUSTERS_PATH   = "broadInterestClusters"
_DEEP_DIVE_ROOT  = "clusterDeepDive"
_DEEP_DIVE_ERROR = "clusterDeepDive"

# text / single-choice path → (AssessmentAnswerState attribute, error key)
_SCALAR_PATHS: dict[str, tuple[str, str]] = {
    "personalityInsights.challengeApproach": ("challenge_approach",     "challengeApproach"),
    "careerDirection.dreamCareer":           ("dream_career_text",      "dreamCareer"),
    "careerDirection.careerAttraction":      ("career_attraction_text", "careerAttraction"),
}

# set path → AssessmentAnswerState attribute
_SET_ATTRS: dict[str, str] = {
    "broadInterestClusters":               "selected_clusters",
    "personalityInsights.learningStyle":   "learning_styles",
    "personalityInsights.coreValues":      "core_values",
    "careerDirection.excitingCareerTypes": "exciting_career_types",
}


class StepOutcome(str, Enum):
    ADVANCED      = "advanced"
    BLOCKED       = "blocked"
    SUBMITTED     = "submitted"
    SUBMIT_FAILED = "submit_failed"
    IGNORED       = "ignored"


_OUTCOME_FOR_SUBMISSION = {
    SubmissionOutcome.IGNORED:   StepOutcome.IGNORED,
    SubmissionOutcome.INVALID:   StepOutcome.BLOCKED,
    SubmissionOutcome.SUCCEEDED: StepOutcome.SUBMITTED,
    SubmissionOutcome.FAILED:    StepOutcome.SUBMIT_FAILED,
}


def _as_cluster(value: Any) -> ClusterId:
    """Accept a ClusterId, its storage key or its display label."""
    if isinstance(value, ClusterId):
        return value
    if isinstance(value, str):
        try:
            return ClusterId(value)
        except ValueError:
            return ClusterId.from_label(value)
    raise InvalidFieldError(f"Not an interest cluster: {value!r}")


class WizardSession:
    """
    One student's interest assessment in progress.

    *writer* performs the single outbound write with the flattened answer
    payload and raises on failure.  *clock* (milliseconds) is only used by
    the submission debounce.
    """

    def __init__(
        self,
        writer: Callable[[dict], Any],
        principal: Optional[Principal] = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.principal = principal
        self.answers = AssessmentAnswerState()
        self.trace = SessionTrace()
        self.result: Any = None
        self._step = FIRST_STEP
        self._errors: dict[str, str] = {}
        self._closed = False
        self._guard = SubmissionGuard(self._write, debounce_ms=debounce_ms, clock=clock)
        self._writer = writer

    # ── Read accessors ───────────────────────────────────────────────────────

    @property
    def current_step(self) -> WizardStep:
        return self._step

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def submission_state(self) -> SubmissionState:
        return self._guard.state

    @property
    def guard(self) -> SubmissionGuard:
        return self._guard

    @property
    def next_destination(self) -> Optional[str]:
        return NEXT_DESTINATION if self._closed else None

    def deep_dive_forms(self) -> list[tuple[ClusterId, tuple[FieldSpec, ...], dict[str, str]]]:
        """(cluster, questions, answers so far) for every selected cluster, in pick order."""
        return [
            (c, cluster_schemas.schema_for(c), dict(self.answers.cluster_responses.get(c, {})))
            for c in self.answers.selected_clusters
        ]

    # ── Mutations ────────────────────────────────────────────────────────────

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Interest assessment already submitted")

    def _clear_error(self, key: str) -> None:
        self._errors.pop(key, None)

    def set_field(self, path: str, value: Any) -> None:
        """Write one answer and clear the error shown for that field."""
        self._ensure_open()

        if path in _SCALAR_PATHS:
            attr, error_key = _SCALAR_PATHS[path]
            self._set_scalar(path, attr, value)
            self._clear_error(error_key)
        elif path in SELECTION_RULES:
            self._replace_selection(path, value)
            self._clear_error(SELECTION_RULES[path].error_key)
        elif path.startswith(_DEEP_DIVE_ROOT + "."):
            self._set_deep_dive(path, value)
            self._clear_error(_DEEP_DIVE_ERROR)
        else:
            raise InvalidFieldError(f"Unknown field path: {path!r}")

    def toggle(self, path: str, value: Any) -> bool:
        """
        Flip one option of a multi-select answer.

        Returns False (and changes nothing) when adding to a full selection.
        """
        self._ensure_open()
        if path not in SELECTION_RULES:
            raise InvalidFieldError(f"Not a multi-select field: {path!r}")
        rule = SELECTION_RULES[path]
        option = self._normalise_option(path, value)

        attr = _SET_ATTRS[path]
        updated = try_toggle(getattr(self.answers, attr), option, rule.max_size)
        if updated is None:
            logger.debug("Selection %s full (%d); ignoring %r", path, rule.max_size, value)
            return False

        self._apply_selection(path, updated)
        self._clear_error(rule.error_key)
        return True

    def touch_cluster(self, cluster: Any) -> dict[str, str]:
        """Open a selected cluster's deep-dive form, creating its blank entry."""
        self._ensure_open()
        cid = _as_cluster(cluster)
        if cid not in self.answers.selected_clusters:
            raise InvalidFieldError(f"Cluster {cid.value!r} is not selected")
        entry = self.answers.cluster_responses.setdefault(
            cid, cluster_schemas.empty_response(cid)
        )
        self._clear_error(_DEEP_DIVE_ERROR)
        return dict(entry)

    def _set_scalar(self, path: str, attr: str, value: Any) -> None:
        if attr == "challenge_approach":
            if value is not None and value not in CHALLENGE_APPROACHES:
                raise InvalidFieldError(f"Unknown challenge approach: {value!r}")
        elif not isinstance(value, str):
            raise InvalidFieldError(f"{path} expects text, got {type(value).__name__}")
        setattr(self.answers, attr, value)

    def _normalise_option(self, path: str, value: Any) -> Any:
        if path == _CLUSTERS_PATH:
            return _as_cluster(value)
        if value not in SELECTION_RULES[path].options:
            raise InvalidFieldError(f"{value!r} is not an option for {path}")
        return value

    def _replace_selection(self, path: str, values: Iterable[Any]) -> None:
        if isinstance(values, str):
            raise InvalidFieldError(f"{path} expects a collection of options")
        options = [self._normalise_option(path, v) for v in values]
        rule = SELECTION_RULES[path]
        if len(set(options)) != len(options):
            raise InvalidFieldError(f"Duplicate options for {path}")
        if len(options) > rule.max_size:
            raise InvalidFieldError(f"{path} allows at most {rule.max_size} choices")
        self._apply_selection(path, options)

    def _apply_selection(self, path: str, values: list) -> None:
        setattr(self.answers, _SET_ATTRS[path], values)
        if path == _CLUSTERS_PATH:
            for cid in list(self.answers.cluster_responses):
                if cid not in values:
                    del self.answers.cluster_responses[cid]

    def _set_deep_dive(self, path: str, value: Any) -> None:
        parts = path.split(".")
        if len(parts) != 3:
            raise InvalidFieldError(f"Deep-dive path must be clusterDeepDive.<cluster>.<field>: {path!r}")
        _, cluster_key, field_key = parts
        try:
            cid = ClusterId(cluster_key)
        except ValueError:
            raise InvalidFieldError(f"Unknown cluster key in {path!r}") from None
        if cid not in self.answers.selected_clusters:
            raise InvalidFieldError(f"Cluster {cluster_key!r} is not selected")
        if field_key not in cluster_schemas.field_keys(cid):
            raise InvalidFieldError(f"{field_key!r} is not a question for {cluster_key!r}")
        if not isinstance(value, str):
            raise InvalidFieldError(f"{path} expects text, got {type(value).__name__}")

        entry = self.answers.cluster_responses.setdefault(
            cid, cluster_schemas.empty_response(cid)
        )
        entry[field_key] = value

    # ── Transitions ──────────────────────────────────────────────────────────

    def advance(self) -> StepOutcome:
        """Validate the current step and move forward; on step 4, submit."""
        if self._step == LAST_STEP:
            return _OUTCOME_FOR_SUBMISSION[self.submit().outcome]

        result = validate_step(self._step, self.answers)
        if not result.passed:
            self._errors = result.field_errors
            self.trace.record("blocked", self._step, fields=sorted(self._errors))
            logger.debug("Step %d blocked: %s", self._step, sorted(self._errors))
            return StepOutcome.BLOCKED

        self._errors = {}
        self.trace.record("advance", self._step)
        self._step = WizardStep(min(self._step + 1, LAST_STEP))
        logger.debug("Advanced to step %d", self._step)
        return StepOutcome.ADVANCED

    def retreat(self) -> WizardStep:
        """
        Go back one step; never validates and never touches answers.
        Errors shown for the step being left are cleared.
        """
        self._ensure_open()
        if self._step > FIRST_STEP:
            self.trace.record("retreat", self._step)
            self._step = WizardStep(self._step - 1)
            self._errors = {}
        return self._step

    def submit(self) -> SubmissionReport:
        """Run the guarded final write for the terminal step."""
        if self._step != LAST_STEP:
            logger.warning("Submit requested on step %d; ignoring", self._step)
            return SubmissionReport(SubmissionOutcome.IGNORED, reason="not on final step")

        report = self._guard.attempt(
            validate=lambda: validate_step(LAST_STEP, self.answers).field_errors,
            build_payload=self.answers.to_payload,
        )

        if report.outcome is SubmissionOutcome.IGNORED:
            self.trace.record("submit_ignored", self._step, reason=report.reason)
        elif report.outcome is SubmissionOutcome.INVALID:
            self._errors = report.field_errors
            self.trace.record("submit_invalid", self._step, fields=sorted(self._errors))
        elif report.outcome is SubmissionOutcome.FAILED:
            self._errors = report.field_errors
            self.trace.record("submit_failed", self._step, reason=report.reason)
        else:
            self._errors = {}
            self.result = report.result
            self._closed = True
            self.trace.record("submit_succeeded", self._step)
        return report

    def _write(self, payload: dict) -> Any:
        return self._writer(payload)
