"""
entry.py — Deciding whether to show the interest assessment
===========================================================
Before the wizard is shown, the host resolves the acting principal and asks
whether this student still needs the assessment.  Completed students go
straight on to the diagnostic assessment.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Protocol

from interest_assessment.models import Principal
from interest_assessment.submission import DEFAULT_DEBOUNCE_MS
from interest_assessment.wizard import NEXT_DESTINATION, WizardSession

logger = logging.getLogger(__name__)


class EntryDecision(str, Enum):
    SHOW_WIZARD        = "show_wizard"
    REDIRECT_LOGIN     = "login"
    REDIRECT_DASHBOARD = "dashboard"
    REDIRECT_NEXT      = NEXT_DESTINATION


class CompletionStore(Protocol):
    def is_completed(self, principal: Principal) -> bool: ...
    def complete(self, principal: Principal, payload: dict, trace=None): ...


def resolve_entry(principal: Optional[Principal], store: CompletionStore) -> EntryDecision:
    if principal is None:
        return EntryDecision.REDIRECT_LOGIN
    if not principal.is_student:
        return EntryDecision.REDIRECT_DASHBOARD
    if store.is_completed(principal):
        return EntryDecision.REDIRECT_NEXT
    return EntryDecision.SHOW_WIZARD


def open_wizard(
    principal: Optional[Principal],
    store: CompletionStore,
    debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    clock: Optional[Callable[[], float]] = None,
) -> tuple[EntryDecision, Optional[WizardSession]]:
    """Return the entry decision and, only for SHOW_WIZARD, a fresh session."""
    decision = resolve_entry(principal, store)
    if decision is not EntryDecision.SHOW_WIZARD:
        logger.info("Interest assessment not shown: %s", decision.value)
        return decision, None

    session: Optional[WizardSession] = None

    def _write(payload: dict):
        return store.complete(principal, payload, trace=session.trace)

    session = WizardSession(_write, principal=principal, debounce_ms=debounce_ms, clock=clock)
    return decision, session
