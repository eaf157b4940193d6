"""
config.py — Central settings for the Interest Assessment wizard
===============================================================
All configuration is loaded from environment variables / .env file.

  SUBMIT_DEBOUNCE_MS         minimum gap between accepted submits (2000)
  INTEREST_DB_PATH           SQLite file for the student store
  QUESTION_WEBHOOK_URL       follow-up question generation endpoint
  SKIP_QUESTION_WEBHOOK      true → never call the webhook (development)
  QUESTION_WEBHOOK_TIMEOUT   seconds before the webhook call is abandoned (10)
  LOG_LEVEL                  logging level for the CLI (INFO)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env into os.environ (no-op if already set, safe to call multiple times)
load_dotenv(override=False)

_DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent.parent / "interest_assessment.db"


# ─── Helpers ────────────────────────────────────────────────────────────────

def _is_placeholder(value: str) -> bool:
    """Return True if the value looks like an unfilled template placeholder."""
    return not value or "<" in value or value.startswith("your-") or value == "PLACEHOLDER"


# ─── Wizard ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class WizardConfig:
    submit_debounce_ms: int


# ─── Student store ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StoreConfig:
    db_path: Path


# ─── Question generation webhook ────────────────────────────────────────────

@dataclass(frozen=True)
class WebhookConfig:
    url:       str
    skip:      bool
    timeout_s: float

    @property
    def is_configured(self) -> bool:
        return bool(self.url) and not _is_placeholder(self.url)


# ─── App-level settings ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class AppConfig:
    log_level: str


# ─── Master settings object ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Settings:
    wizard:  WizardConfig
    store:   StoreConfig
    webhook: WebhookConfig
    app:     AppConfig

    def status_summary(self) -> dict[str, str]:
        """Return a dict of component → status line for the CLI banner."""
        if self.webhook.skip:
            hook = "⏭ Skipped"
        elif self.webhook.is_configured:
            hook = "🟢 Live"
        else:
            hook = "⚪ Not configured"
        return {
            "Submit debounce":  f"{self.wizard.submit_debounce_ms} ms",
            "Student store":    str(self.store.db_path),
            "Question webhook": hook,
        }


def get_settings() -> Settings:
    """Load all configuration from environment variables."""
    _str   = lambda k, d="": os.getenv(k, d).strip()
    _int   = lambda k, d=0: int(os.getenv(k, str(d)) or d)
    _float = lambda k, d=0.0: float(os.getenv(k, str(d)) or d)
    _bool  = lambda k, d=False: os.getenv(k, str(d)).lower() in ("1", "true", "yes")

    debounce = _int("SUBMIT_DEBOUNCE_MS", 2000)
    if debounce < 0:
        raise ValueError(f"SUBMIT_DEBOUNCE_MS must be >= 0, got {debounce}")

    return Settings(
        wizard=WizardConfig(
            submit_debounce_ms = debounce,
        ),
        store=StoreConfig(
            db_path = Path(_str("INTEREST_DB_PATH") or _DEFAULT_DB_PATH),
        ),
        webhook=WebhookConfig(
            url       = _str("QUESTION_WEBHOOK_URL"),
            skip      = _bool("SKIP_QUESTION_WEBHOOK", False),
            timeout_s = _float("QUESTION_WEBHOOK_TIMEOUT", 10.0),
        ),
        app=AppConfig(
            log_level = _str("LOG_LEVEL", "INFO").upper(),
        ),
    )
