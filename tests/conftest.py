"""
Shared pytest fixtures for the interest assessment test suite.
No network access: the question webhook is skipped or given a fake opener.
Factory helpers live in tests/factories.py so they can be imported
directly by test modules as well as being used here.
"""
import sys
import os

_tests_dir = os.path.dirname(__file__)
_src_dir   = os.path.join(_tests_dir, "..", "src")
for _p in (_tests_dir, _src_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)

os.environ["SKIP_QUESTION_WEBHOOK"] = "true"


import pytest

from factories import FakeClock, RecordingWriter, make_principal, make_session

from interest_assessment.config import WebhookConfig
from interest_assessment.database import StudentStore
from interest_assessment.service import InterestAssessmentService


# ─── pytest fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def writer():
    return RecordingWriter()


@pytest.fixture
def session(writer, clock):
    return make_session(writer=writer, clock=clock)


@pytest.fixture
def principal():
    return make_principal()


@pytest.fixture
def store(tmp_path):
    return StudentStore(tmp_path / "students.db")


@pytest.fixture
def skip_webhook():
    return WebhookConfig(url="", skip=True, timeout_s=1.0)


@pytest.fixture
def service(store, principal, skip_webhook):
    store.create_student(principal.user_id, principal.unique_id, full_name=principal.full_name)
    return InterestAssessmentService(store, skip_webhook)
