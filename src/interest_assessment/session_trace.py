"""
session_trace.py — Lightweight audit log for wizard sessions
============================================================
Every transition a WizardSession makes is recorded as a WizardEvent.  The
completion service stores the serialised SessionTrace next to the submitted
answers so support staff can see how a student moved through the flow
(e.g. how often step 2 blocked, or how many submits were swallowed).

Data model
----------
  WizardEvent    One transition: kind, step it happened on, free-form detail.
  SessionTrace   Ordered list of WizardEvents for one wizard session.

Event kinds
-----------
  advance | blocked | retreat
  submit_ignored | submit_invalid | submit_succeeded | submit_failed
"""

from __future__ import annotations

import datetime
import json
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any


EVENT_KINDS = frozenset({
    "advance", "blocked", "retreat",
    "submit_ignored", "submit_invalid", "submit_succeeded", "submit_failed",
})


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class WizardEvent:
    kind:   str
    step:   int
    at:     str = field(default_factory=_now_iso)
    detail: dict[str, Any] = field(default_factory=dict)


@dataclass
class SessionTrace:
    session_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8].upper())
    started_at: str = field(default_factory=_now_iso)
    events:     list[WizardEvent] = field(default_factory=list)

    def record(self, kind: str, step: int, **detail: Any) -> WizardEvent:
        if kind not in EVENT_KINDS:
            raise ValueError(f"Unknown wizard event kind: {kind!r}")
        event = WizardEvent(kind=kind, step=int(step), detail=detail)
        self.events.append(event)
        return event

    def count(self, kind: str) -> int:
        return sum(1 for e in self.events if e.kind == kind)

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, raw: str) -> "SessionTrace":
        data = json.loads(raw)
        return cls(
            session_id = data["session_id"],
            started_at = data["started_at"],
            events     = [WizardEvent(**e) for e in data.get("events", [])],
        )
