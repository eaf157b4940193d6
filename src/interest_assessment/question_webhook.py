"""
question_webhook.py — Diagnostic question generation trigger
============================================================
After a student completes the interest assessment, the external workflow
that writes their personalised diagnostic questions is called once.

  GET {QUESTION_WEBHOOK_URL}?UniqueID=<id>&submittedAt=<iso>
  → [{"output": [...questions...]}]

The call happens at most once per student: a stored request with
webhook_triggered = 1 short-circuits it.  With SKIP_QUESTION_WEBHOOK set, a
placeholder request is recorded instead so the diagnostic assessment falls
back to its default questions.  Failures are logged and never raised; the
completed interest assessment must not be undone by this step.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from datetime import datetime, timezone
from typing import Callable, Optional

from interest_assessment.config import WebhookConfig
from interest_assessment.database import StudentStore

logger = logging.getLogger(__name__)

# Statuses returned by request_diagnostic_questions()
ALREADY_TRIGGERED = "already_triggered"
SKIPPED           = "skipped"
NOT_CONFIGURED    = "not_configured"
TRIGGERED         = "triggered"
NO_OUTPUT         = "no_output"
FAILED            = "failed"


def _build_url(base_url: str, unique_id: str) -> str:
    params = urllib.parse.urlencode({
        "UniqueID":    unique_id,
        "submittedAt": datetime.now(timezone.utc).isoformat(),
    })
    sep = "&" if "?" in base_url else "?"
    return f"{base_url}{sep}{params}"


def _extract_questions(data) -> Optional[list]:
    if isinstance(data, list) and data and isinstance(data[0], dict):
        output = data[0].get("output")
        if output:
            return output if isinstance(output, list) else [output]
    return None


def request_diagnostic_questions(
    unique_id: str,
    store: StudentStore,
    config: WebhookConfig,
    opener: Optional[Callable] = None,
) -> str:
    """Trigger question generation for *unique_id* unless already done."""
    if store.webhook_already_triggered(unique_id):
        logger.info("Question webhook already triggered for %s; skipping", unique_id)
        return ALREADY_TRIGGERED

    if config.skip:
        if store.get_diagnostic_request(unique_id) is None:
            store.save_diagnostic_request(unique_id, [], triggered=False)
        logger.info("SKIP_QUESTION_WEBHOOK set; %s will use fallback questions", unique_id)
        return SKIPPED

    if not config.is_configured:
        logger.info("Question webhook not configured; %s will use fallback questions", unique_id)
        return NOT_CONFIGURED

    opener = opener or urllib.request.urlopen
    req = urllib.request.Request(
        _build_url(config.url, unique_id),
        headers={"Content-Type": "application/json"},
        method="GET",
    )
    try:
        with opener(req, timeout=config.timeout_s) as resp:
            data = json.loads(resp.read())
    except (urllib.error.URLError, OSError, ValueError) as exc:
        logger.warning("Question webhook failed for %s: %s", unique_id, exc)
        return FAILED

    questions = _extract_questions(data)
    if questions is None:
        logger.warning("Question webhook returned no output for %s", unique_id)
        return NO_OUTPUT

    store.save_diagnostic_request(unique_id, questions, triggered=True)
    logger.info("Stored %d generated questions for %s", len(questions), unique_id)
    return TRIGGERED
