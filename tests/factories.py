"""
Factory helpers for building test objects.
Imported by conftest.py fixtures AND directly by test modules.
"""
import sys
import os

# Ensure both src/ and tests/ are importable in all test files
_tests_dir = os.path.dirname(__file__)
_src_dir   = os.path.join(_tests_dir, "..", "src")
for _p in (_tests_dir, _src_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)

# Never call a real webhook from tests
os.environ["SKIP_QUESTION_WEBHOOK"] = "true"

from interest_assessment.models import Principal, ClusterId
from interest_assessment.wizard import WizardSession


TECH = ClusterId.TECHNOLOGY_COMPUTERS

HAPPY_DEEP_DIVE = {
    "techInterests":    "robots and games",
    "codingExperience": "Scratch at school",
    "buildingGoals":    "a homework helper app",
}


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, start_ms: float = 1_000_000.0):
        self.now = start_ms

    def __call__(self) -> float:
        return self.now

    def tick(self, ms: float) -> None:
        self.now += ms


class RecordingWriter:
    """Stands in for the completion endpoint; counts writes, can fail on demand."""

    def __init__(self, fail_times: int = 0, result="ok"):
        self.payloads: list[dict] = []
        self.fail_times = fail_times
        self.result = result
        self.on_write = None

    @property
    def calls(self) -> int:
        return len(self.payloads)

    def __call__(self, payload: dict):
        self.payloads.append(payload)
        if self.on_write is not None:
            self.on_write()
        if self.fail_times > 0:
            self.fail_times -= 1
            raise ConnectionError("simulated network error")
        return self.result


def make_principal(user_id: str = "u-001", role: str = "student",
                   unique_id: str = "STU-001") -> Principal:
    return Principal(user_id=user_id, role=role, unique_id=unique_id,
                     email=f"{user_id}@example.com", full_name="Test Student")


def make_session(writer=None, clock=None, debounce_ms: int = 2000) -> WizardSession:
    return WizardSession(
        writer if writer is not None else RecordingWriter(),
        principal=make_principal(),
        debounce_ms=debounce_ms,
        clock=clock if clock is not None else FakeClock(),
    )


def fill_step1(session: WizardSession, clusters=(TECH,)) -> None:
    for c in clusters:
        session.toggle("broadInterestClusters", c)


def fill_step2(session: WizardSession) -> None:
    for cluster in session.answers.selected_clusters:
        if cluster is TECH:
            for key, text in HAPPY_DEEP_DIVE.items():
                session.set_field(f"clusterDeepDive.{TECH.value}.{key}", text)
        else:
            session.touch_cluster(cluster)


def fill_step3(session: WizardSession) -> None:
    session.toggle("personalityInsights.learningStyle", "I learn by doing or practicing")
    session.set_field("personalityInsights.challengeApproach", "I break it into steps")
    session.toggle("personalityInsights.coreValues", "Curiosity")
    session.toggle("personalityInsights.coreValues", "Creativity")


def fill_step4(session: WizardSession) -> None:
    session.set_field("careerDirection.dreamCareer", "Robotics engineer")
    session.toggle("careerDirection.excitingCareerTypes", "Engineer or Technologist")
    session.set_field("careerDirection.careerAttraction", "I like building things that move")


def drive_to_final_step(session: WizardSession) -> WizardSession:
    """Answer steps 1–3 and advance; leaves the session on step 4, unanswered."""
    fill_step1(session)
    session.advance()
    fill_step2(session)
    session.advance()
    fill_step3(session)
    session.advance()
    return session


def make_payload(**overrides) -> dict:
    payload = {
        "broadInterestClusters": ["Technology & Computers"],
        "clusterDeepDive": {TECH.value: dict(HAPPY_DEEP_DIVE)},
        "personalityInsights": {
            "learningStyle":     ["I learn by doing or practicing"],
            "challengeApproach": "I break it into steps",
            "coreValues":        ["Curiosity", "Creativity"],
        },
        "careerDirection": {
            "dreamCareer":         "Robotics engineer",
            "excitingCareerTypes": ["Engineer or Technologist"],
            "careerAttraction":    "I like building things that move",
        },
    }
    payload.update(overrides)
    return payload
