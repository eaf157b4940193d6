"""
Tests for per-step completion rules W-01 .. W-08.
"""
import pytest

from factories import HAPPY_DEEP_DIVE, TECH

from interest_assessment.models import AssessmentAnswerState, ClusterId
from interest_assessment.step_validator import (
    StepValidationResult,
    StepViolation,
    WizardStep,
    validate_step,
)


def _codes(result):
    return {v.code for v in result.violations}


class TestStep1ClusterSelection:
    def test_empty_selection_blocks(self):
        result = validate_step(1, AssessmentAnswerState())
        assert not result.passed
        assert _codes(result) == {"W-01"}
        assert "broadInterestClusters" in result.field_errors

    def test_one_cluster_passes(self):
        assert validate_step(1, AssessmentAnswerState(selected_clusters=[TECH])).passed


class TestStep2DeepDive:
    def test_missing_entry_blocks(self):
        state = AssessmentAnswerState(selected_clusters=[TECH])
        result = validate_step(2, state)
        assert _codes(result) == {"W-02"}
        assert result.field_errors == {
            "clusterDeepDive": "Please complete all questions for selected interest areas",
        }

    def test_one_of_two_missing_blocks(self):
        state = AssessmentAnswerState(
            selected_clusters=[TECH, ClusterId.ART_DESIGN],
            cluster_responses={TECH: dict(HAPPY_DEEP_DIVE)},
        )
        assert not validate_step(2, state).passed

    def test_blank_entry_counts_as_complete(self):
        """Entry existence is the completion signal; blank answers still pass."""
        state = AssessmentAnswerState(
            selected_clusters=[TECH],
            cluster_responses={TECH: {"techInterests": "", "codingExperience": "", "buildingGoals": ""}},
        )
        assert validate_step(2, state).passed


class TestStep3Personality:
    def test_all_missing(self):
        result = validate_step(3, AssessmentAnswerState())
        assert _codes(result) == {"W-03", "W-04", "W-05"}
        assert set(result.field_errors) == {"learningStyle", "challengeApproach", "coreValues"}

    def test_complete(self):
        state = AssessmentAnswerState(
            learning_styles=["I prefer learning alone"],
            challenge_approach="I break it into steps",
            core_values=["Respect"],
        )
        assert validate_step(3, state).passed


class TestStep4CareerDirection:
    def test_whitespace_text_blocks(self):
        state = AssessmentAnswerState(
            dream_career_text="   ",
            career_attraction_text="\t",
            exciting_career_types=["Teacher or Educator"],
        )
        result = validate_step(4, state)
        assert _codes(result) == {"W-06", "W-08"}

    def test_no_career_types_blocks(self):
        state = AssessmentAnswerState(dream_career_text="Vet", career_attraction_text="Animals")
        assert _codes(validate_step(4, state)) == {"W-07"}

    def test_complete(self):
        state = AssessmentAnswerState(
            dream_career_text="Vet",
            career_attraction_text="Animals",
            exciting_career_types=["Animal Care Specialist"],
        )
        assert validate_step(4, state).passed


class TestValidateStepArgs:
    def test_accepts_enum(self):
        assert validate_step(WizardStep.CLUSTER_SELECTION, AssessmentAnswerState()).step == 1

    @pytest.mark.parametrize("bad", [0, 5])
    def test_out_of_range_step(self, bad):
        with pytest.raises(ValueError):
            validate_step(bad, AssessmentAnswerState())


class TestStepValidationResult:
    def test_first_violation_per_field_wins(self):
        result = StepValidationResult(step=WizardStep.CAREER_DIRECTION, violations=[
            StepViolation("W-06", "dreamCareer", "first"),
            StepViolation("W-99", "dreamCareer", "second"),
        ])
        assert result.field_errors == {"dreamCareer": "first"}

    def test_summary(self):
        assert validate_step(1, AssessmentAnswerState(selected_clusters=[TECH])).summary() == "Step 1 complete."
        assert "[W-01]" in validate_step(1, AssessmentAnswerState()).summary()
