"""
interest_assessment — Student Interest Assessment Wizard
========================================================
The four-step onboarding questionnaire students complete before their
diagnostic assessment: interest clusters, cluster deep dive, personality
insights and career direction.

Module map
----------
  models.py            Option catalogues, ClusterId, AssessmentAnswerState,
                       Principal and the pydantic submission payload.
  cluster_schemas.py   ClusterId → deep-dive questions registry.
  selection.py         "Choose at most N" toggling rules.
  step_validator.py    Per-step completion rules (W-01..W-08).
  submission.py        At-most-once submit guard (debounce + state machine).
  wizard.py            WizardSession: answers, current step, field errors.
  session_trace.py     WizardEvent / SessionTrace audit log.
  entry.py             Show-or-redirect decision before the wizard opens.
  service.py           Server-side completion (validate, persist, follow-up).
  database.py          SQLite student store.
  question_webhook.py  One-shot diagnostic question generation trigger.
  config.py            Settings loaded from .env.
  errors.py            Exception taxonomy.
  cli.py               Rich terminal front-end.

Flow
----
  resolve_entry → WizardSession
  → advance() [W-01] → advance() [W-02] → advance() [W-03..W-05]
  → advance()/submit() → SubmissionGuard [W-06..W-08]
  → InterestAssessmentService.complete → StudentStore + question webhook
"""
__version__ = "0.1.0"
