"""
Tests for the one-shot diagnostic question webhook.
A fake opener replaces urllib.request.urlopen; nothing touches the network.
"""
import io
import json
import urllib.error
from urllib.parse import parse_qs, urlparse

import pytest

from interest_assessment import question_webhook as qw
from interest_assessment.config import WebhookConfig

LIVE = WebhookConfig(url="https://hooks.example.com/questions", skip=False, timeout_s=5.0)


class FakeOpener:
    def __init__(self, body=None, error=None):
        self.body = body
        self.error = error
        self.requests = []

    def __call__(self, req, timeout=None):
        self.requests.append((req, timeout))
        if self.error is not None:
            raise self.error
        raw = self.body if isinstance(self.body, bytes) else json.dumps(self.body).encode()
        return io.BytesIO(raw)


class TestSkipAndConfig:
    def test_skip_records_placeholder(self, store, skip_webhook):
        assert qw.request_diagnostic_questions("STU-1", store, skip_webhook) == qw.SKIPPED
        request = store.get_diagnostic_request("STU-1")
        assert request["webhook_triggered"] == 0
        assert json.loads(request["generated_questions_json"]) == []

    def test_skip_keeps_existing_request(self, store, skip_webhook):
        store.save_diagnostic_request("STU-1", ["old"], triggered=False)
        qw.request_diagnostic_questions("STU-1", store, skip_webhook)
        assert json.loads(store.get_diagnostic_request("STU-1")["generated_questions_json"]) == ["old"]

    @pytest.mark.parametrize("url", ["", "<webhook-url>", "your-webhook"])
    def test_unconfigured_url(self, store, url):
        opener = FakeOpener(body=[])
        config = WebhookConfig(url=url, skip=False, timeout_s=1.0)
        assert qw.request_diagnostic_questions("STU-1", store, config, opener=opener) == qw.NOT_CONFIGURED
        assert opener.requests == []


class TestLiveCall:
    def test_questions_stored_and_marked_triggered(self, store):
        opener = FakeOpener(body=[{"output": ["Q1", "Q2"]}])
        status = qw.request_diagnostic_questions("STU-1", store, LIVE, opener=opener)
        assert status == qw.TRIGGERED
        assert store.webhook_already_triggered("STU-1")
        stored = store.get_diagnostic_request("STU-1")
        assert json.loads(stored["generated_questions_json"]) == ["Q1", "Q2"]

    def test_request_carries_unique_id_and_timeout(self, store):
        opener = FakeOpener(body=[{"output": ["Q1"]}])
        qw.request_diagnostic_questions("STU-7", store, LIVE, opener=opener)
        req, timeout = opener.requests[0]
        query = parse_qs(urlparse(req.full_url).query)
        assert query["UniqueID"] == ["STU-7"]
        assert "submittedAt" in query
        assert req.get_method() == "GET"
        assert timeout == 5.0

    def test_called_at_most_once(self, store):
        opener = FakeOpener(body=[{"output": ["Q1"]}])
        qw.request_diagnostic_questions("STU-1", store, LIVE, opener=opener)
        second = qw.request_diagnostic_questions("STU-1", store, LIVE, opener=opener)
        assert second == qw.ALREADY_TRIGGERED
        assert len(opener.requests) == 1

    @pytest.mark.parametrize("body", [[], [{}], {"output": ["Q"]}, [{"output": []}]])
    def test_missing_output(self, store, body):
        status = qw.request_diagnostic_questions("STU-1", store, LIVE, opener=FakeOpener(body=body))
        assert status == qw.NO_OUTPUT
        assert not store.webhook_already_triggered("STU-1")

    @pytest.mark.parametrize("error", [
        urllib.error.URLError("down"), TimeoutError("slow"), ConnectionResetError(),
    ])
    def test_transport_errors_are_not_raised(self, store, error):
        status = qw.request_diagnostic_questions("STU-1", store, LIVE, opener=FakeOpener(error=error))
        assert status == qw.FAILED
        assert not store.webhook_already_triggered("STU-1")

    def test_invalid_json_fails_softly(self, store):
        status = qw.request_diagnostic_questions("STU-1", store, LIVE, opener=FakeOpener(body=b"<html>"))
        assert status == qw.FAILED
