"""
submission.py — At-most-once guard for the final submit
=======================================================
The "Complete Assessment" action can fire several times in quick succession
(double clicks, re-delivered events, a writer that re-enters the wizard).
SubmissionGuard turns that into at most one outbound write per accepted
attempt, using an explicit state machine plus a debounce window.

States
------
  IDLE        nothing sent yet
  SUBMITTING  a write is in flight; every new attempt is ignored
  SUCCEEDED   terminal; every new attempt is ignored
  FAILED      last write failed; a new attempt is allowed once the
              debounce window has elapsed

Attempt order
-------------
  1. state not in {IDLE, FAILED}          → IGNORED
  2. now - last_attempt < debounce_ms     → IGNORED  (exactly debounce_ms is accepted)
  3. record now, enter SUBMITTING, validate
       invalid                            → INVALID, back to the previous state
  4. one write; SUCCEEDED or FAILED       → SUCCEEDED | FAILED

Anything that escapes the attempt (cancellation, a raising validator or
payload builder) propagates to the caller and leaves the guard FAILED.

Ignored attempts are never reported to the student as errors.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 2000

SUBMIT_ERROR_KEY     = "submit"
SUBMIT_ERROR_MESSAGE = "Failed to save your responses. Please try again."


class SubmissionState(str, Enum):
    IDLE       = "idle"
    SUBMITTING = "submitting"
    SUCCEEDED  = "succeeded"
    FAILED     = "failed"


class SubmissionOutcome(str, Enum):
    IGNORED   = "ignored"     # in flight, debounced or already succeeded
    INVALID   = "invalid"     # terminal step rules unmet; nothing was sent
    SUCCEEDED = "succeeded"
    FAILED    = "failed"


# Which states a SUBMIT may start from.
_SUBMIT_ALLOWED_FROM = frozenset({SubmissionState.IDLE, SubmissionState.FAILED})


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class SubmissionReport:
    """What one call to SubmissionGuard.attempt() did."""
    outcome:      SubmissionOutcome
    field_errors: dict[str, str] = field(default_factory=dict)
    result:       Any = None          # whatever the writer returned on success
    reason:       str = ""            # why an attempt was ignored or failed

    @property
    def wrote(self) -> bool:
        return self.outcome in (SubmissionOutcome.SUCCEEDED, SubmissionOutcome.FAILED)


class SubmissionGuard:
    """
    Serialises the final write.

    *writer* receives the payload and performs the single outbound call;
    any exception it raises marks the attempt FAILED.  *clock* returns
    milliseconds and defaults to time.monotonic().
    """

    def __init__(
        self,
        writer: Callable[[dict], Any],
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if debounce_ms < 0:
            raise ValueError("debounce_ms must be >= 0")
        self._writer = writer
        self._debounce_ms = debounce_ms
        self._clock = clock or _monotonic_ms
        self._state = SubmissionState.IDLE
        self._last_attempt_ms: Optional[float] = None
        self.write_count = 0

    # ── Read accessors ───────────────────────────────────────────────────────

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def in_flight(self) -> bool:
        return self._state is SubmissionState.SUBMITTING

    @property
    def debounce_ms(self) -> int:
        return self._debounce_ms

    @property
    def last_attempt_ms(self) -> Optional[float]:
        return self._last_attempt_ms

    # ── Attempt ──────────────────────────────────────────────────────────────

    def attempt(
        self,
        validate: Callable[[], dict[str, str]],
        build_payload: Callable[[], dict],
    ) -> SubmissionReport:
        """
        Run one submit attempt.  *validate* returns the terminal step's
        field errors (empty when valid); *build_payload* is only called once
        validation has passed.
        """
        if self._state not in _SUBMIT_ALLOWED_FROM:
            logger.warning("Ignoring submit while %s", self._state.value)
            return SubmissionReport(SubmissionOutcome.IGNORED, reason=self._state.value)

        now = self._clock()
        if (
            self._last_attempt_ms is not None
            and now - self._last_attempt_ms < self._debounce_ms
        ):
            logger.warning(
                "Ignoring submit %.0f ms after the previous attempt (window %d ms)",
                now - self._last_attempt_ms, self._debounce_ms,
            )
            return SubmissionReport(SubmissionOutcome.IGNORED, reason="debounced")

        previous = self._state
        self._last_attempt_ms = now
        self._state = SubmissionState.SUBMITTING
        try:
            errors = validate()
            if errors:
                self._state = previous
                logger.debug("Submit blocked by validation: %s", sorted(errors))
                return SubmissionReport(SubmissionOutcome.INVALID, field_errors=dict(errors))

            payload = build_payload()
            self.write_count += 1
            try:
                result = self._writer(payload)
            except Exception as exc:
                self._state = SubmissionState.FAILED
                logger.warning("Interest assessment write failed: %s", exc)
                return SubmissionReport(
                    SubmissionOutcome.FAILED,
                    field_errors={SUBMIT_ERROR_KEY: SUBMIT_ERROR_MESSAGE},
                    reason=str(exc),
                )

            self._state = SubmissionState.SUCCEEDED
            logger.info("Interest assessment submitted")
            return SubmissionReport(SubmissionOutcome.SUCCEEDED, result=result)
        finally:
            # Never leave the guard in flight once control returns to the caller.
            if self._state is SubmissionState.SUBMITTING:
                self._state = SubmissionState.FAILED
                logger.warning("Submit interrupted; guard reset to %s", self._state.value)
