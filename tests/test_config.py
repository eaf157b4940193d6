"""
Smoke tests for config / settings loading.
Run: python -m pytest tests/ -v
"""
import sys
import os
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from interest_assessment.config import get_settings, _is_placeholder, WebhookConfig


class TestIsPlaceholder:
    def test_empty_string_is_placeholder(self):
        assert _is_placeholder("")

    def test_angle_bracket_is_placeholder(self):
        assert _is_placeholder("<your-webhook-url>")

    def test_your_prefix_is_placeholder(self):
        assert _is_placeholder("your-endpoint")

    def test_real_url_not_placeholder(self):
        assert not _is_placeholder("https://hooks.example.org/assessment-questions")


class TestSettingsLoading:
    def test_get_settings_returns_object(self):
        s = get_settings()
        assert hasattr(s, "wizard")
        assert hasattr(s, "store")
        assert hasattr(s, "webhook")

    def test_debounce_defaults_to_2000(self, monkeypatch):
        monkeypatch.delenv("SUBMIT_DEBOUNCE_MS", raising=False)
        assert get_settings().wizard.submit_debounce_ms == 2000

    def test_debounce_from_env(self, monkeypatch):
        monkeypatch.setenv("SUBMIT_DEBOUNCE_MS", "500")
        assert get_settings().wizard.submit_debounce_ms == 500

    def test_negative_debounce_rejected(self, monkeypatch):
        monkeypatch.setenv("SUBMIT_DEBOUNCE_MS", "-1")
        with pytest.raises(ValueError):
            get_settings()

    def test_db_path_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("INTEREST_DB_PATH", str(tmp_path / "x.db"))
        assert get_settings().store.db_path == Path(tmp_path / "x.db")

    def test_skip_webhook_flag(self, monkeypatch):
        monkeypatch.setenv("SKIP_QUESTION_WEBHOOK", "true")
        assert get_settings().webhook.skip

    def test_log_level_upper_cased(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_settings().app.log_level == "DEBUG"

    def test_status_summary_keys(self):
        summary = get_settings().status_summary()
        assert set(summary) == {"Submit debounce", "Student store", "Question webhook"}


class TestWebhookConfig:
    def test_placeholder_url_not_configured(self):
        assert not WebhookConfig(url="<url>", skip=False, timeout_s=1).is_configured

    def test_real_url_is_configured(self):
        assert WebhookConfig(url="https://h.example.org/q", skip=True, timeout_s=1).is_configured
