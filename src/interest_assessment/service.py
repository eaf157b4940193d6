"""
service.py — Interest assessment completion endpoint
====================================================
The collaborator on the other side of the wizard's single write.  It repeats
the checks the wizard already made (the client is never trusted), stores the
answers in one atomic update and then requests diagnostic questions.

Failure mapping (all SubmissionError subclasses)
------------------------------------------------
  PermissionDenied     principal is not a student                 (403)
  StudentNotFound      no stored student for the principal        (404)
  SubmissionRejected   payload fails InterestAssessmentPayload    (400)
  SubmissionError      storage failure                            (500)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from interest_assessment import question_webhook
from interest_assessment.config import WebhookConfig
from interest_assessment.database import StudentStore
from interest_assessment.errors import (
    PermissionDenied,
    StudentNotFound,
    SubmissionRejected,
)
from interest_assessment.models import InterestAssessmentPayload, Principal
from interest_assessment.session_trace import SessionTrace

logger = logging.getLogger(__name__)

# Top-level payload section → message returned when it fails validation.
_SECTION_MESSAGES = {
    "broadInterestClusters": "Broad interest clusters are required",
    "personalityInsights":   "Personality insights are required",
    "careerDirection":       "Career direction information is required",
}


@dataclass
class CompletionResult:
    user_id:        str
    unique_id:      str
    completed:      bool
    webhook_status: str
    message:        str = "Interest assessment completed successfully"


def _rejection_message(exc: ValidationError) -> str:
    for err in exc.errors():
        section = err["loc"][0] if err["loc"] else ""
        if section in _SECTION_MESSAGES:
            return _SECTION_MESSAGES[section]
    return "Invalid interest assessment"


class InterestAssessmentService:
    def __init__(self, store: StudentStore, webhook: WebhookConfig, opener=None) -> None:
        self.store = store
        self.webhook = webhook
        self._opener = opener

    def is_completed(self, principal: Principal) -> bool:
        return self.store.is_interest_assessment_completed(principal.user_id)

    def complete(
        self,
        principal: Principal,
        payload: dict,
        trace: Optional[SessionTrace] = None,
    ) -> CompletionResult:
        """Validate and persist a submitted interest assessment."""
        if not principal.is_student:
            raise PermissionDenied("Only students can complete interest assessments")

        student = self.store.get_student(principal.user_id)
        if student is None:
            raise StudentNotFound("Student not found")

        try:
            document = InterestAssessmentPayload.model_validate(payload)
        except ValidationError as exc:
            logger.info("Rejected interest assessment for %s: %s",
                        principal.user_id, exc.error_count())
            raise SubmissionRejected(_rejection_message(exc)) from exc

        updated = self.store.save_interest_assessment(
            principal.user_id,
            document.model_dump(),
            trace_json=trace.to_json() if trace is not None else None,
        )
        logger.info("Interest assessment stored for %s", updated["unique_id"])

        status = question_webhook.request_diagnostic_questions(
            updated["unique_id"], self.store, self.webhook, opener=self._opener,
        )
        message = CompletionResult.message
        if status == question_webhook.ALREADY_TRIGGERED:
            message = "Interest assessment completed successfully (webhook already triggered)"

        return CompletionResult(
            user_id        = principal.user_id,
            unique_id      = updated["unique_id"],
            completed      = bool(updated["interest_assessment_completed"]),
            webhook_status = status,
            message        = message,
        )
