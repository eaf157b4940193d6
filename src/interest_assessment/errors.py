"""
errors.py — Exception taxonomy for the interest assessment wizard
=================================================================
Only programmer errors and external write failures are raised.  Step
validation problems are *not* exceptions: they are collected as
StepViolation records by step_validator.py and shown next to the field.

  WizardError
  ├── ConfigurationError     unmapped ClusterId reached the schema registry
  ├── InvalidFieldError      unknown field path or option value (also ValueError)
  ├── SessionClosedError     mutation after a successful submission
  └── SubmissionError        the outbound write failed
      ├── SubmissionRejected payload refused by the completion endpoint (400)
      ├── PermissionDenied   principal is not a student (403)
      └── StudentNotFound    no student record for the principal (404)
"""

from __future__ import annotations


class WizardError(Exception):
    """Base exception for the interest assessment package."""
    pass


class ConfigurationError(WizardError):
    """Raised when a cluster has no schema in the registry."""
    pass


class InvalidFieldError(WizardError, ValueError):
    """Raised for a field path or option value outside the fixed schema."""
    pass


class SessionClosedError(WizardError):
    """Raised when a completed session is mutated."""
    pass


class SubmissionError(WizardError):
    """Raised by the persistence collaborator when the final write fails."""

    status_code = 500


class SubmissionRejected(SubmissionError):
    status_code = 400


class PermissionDenied(SubmissionError):
    status_code = 403


class StudentNotFound(SubmissionError):
    status_code = 404
