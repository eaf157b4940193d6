"""
Data models for the Interest Assessment wizard.

The option catalogues below are the fixed choices offered by the student
onboarding flow; every set-valued answer is drawn from one of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from interest_assessment.errors import InvalidFieldError


# ─── Interest clusters ───────────────────────────────────────────────────────

class ClusterId(str, Enum):
    """Topic cluster a student can pick in step 1.  Value = storage key."""
    TECHNOLOGY_COMPUTERS     = "technologyComputers"
    SCIENCE_EXPERIMENTS      = "scienceExperiments"
    ART_DESIGN               = "artDesign"
    LANGUAGE_COMMUNICATION   = "languageCommunication"
    BUSINESS_MONEY           = "businessMoney"
    PERFORMING_ARTS          = "performingArts"
    COOKING_NUTRITION        = "cookingNutrition"
    SPORTS_FITNESS           = "sportsFitness"
    FARMING_GARDENING        = "farmingGardening"
    SOCIAL_WORK              = "socialWork"
    MECHANICS_DIY            = "mechanicsDIY"
    FASHION_TAILORING        = "fashionTailoring"
    ANIMAL_CARE              = "animalCare"
    SPIRITUALITY_MINDFULNESS = "spiritualityMindfulness"

    @property
    def label(self) -> str:
        return CLUSTER_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> "ClusterId":
        """Map a display label (as shown in step 1) back to its ClusterId."""
        try:
            return _LABEL_TO_CLUSTER[label]
        except KeyError:
            raise InvalidFieldError(f"Unknown interest cluster: {label!r}") from None


# Display order matches the step 1 card grid.
CLUSTER_LABELS: dict[ClusterId, str] = {
    ClusterId.TECHNOLOGY_COMPUTERS:     "Technology & Computers",
    ClusterId.SCIENCE_EXPERIMENTS:      "Science & Experiments",
    ClusterId.ART_DESIGN:               "Art & Design",
    ClusterId.LANGUAGE_COMMUNICATION:   "Language & Communication",
    ClusterId.BUSINESS_MONEY:           "Business & Money",
    ClusterId.PERFORMING_ARTS:          "Performing Arts (Music/Dance/Acting)",
    ClusterId.COOKING_NUTRITION:        "Cooking & Nutrition",
    ClusterId.SPORTS_FITNESS:           "Sports & Fitness",
    ClusterId.FARMING_GARDENING:        "Farming, Gardening & Nature",
    ClusterId.SOCIAL_WORK:              "Social Work & Helping People",
    ClusterId.MECHANICS_DIY:            "Mechanics / DIY / Repairs",
    ClusterId.FASHION_TAILORING:        "Fashion & Tailoring",
    ClusterId.ANIMAL_CARE:              "Animal Care",
    ClusterId.SPIRITUALITY_MINDFULNESS: "Spirituality / Mindfulness",
}

_LABEL_TO_CLUSTER = {label: cid for cid, label in CLUSTER_LABELS.items()}


# ─── Option catalogues ───────────────────────────────────────────────────────

LEARNING_STYLES: tuple[str, ...] = (
    "I learn by doing or practicing",
    "I learn by watching or reading",
    "I learn by discussing or teaching",
    "I prefer learning alone",
    "I enjoy group learning",
)

CHALLENGE_APPROACHES: tuple[str, ...] = (
    "I enjoy trying it myself",
    "I break it into steps",
    "I seek help when stuck",
    "I avoid difficult tasks",
    "It depends on the topic",
)

CORE_VALUES: tuple[str, ...] = (
    "Creativity",
    "Curiosity",
    "Empathy",
    "Discipline",
    "Leadership",
    "Spirituality",
    "Respect",
    "Innovation",
    "Teamwork",
)

CAREER_TYPES: tuple[str, ...] = (
    "Scientist or Researcher",
    "Engineer or Technologist",
    "Teacher or Educator",
    "Doctor or Health Worker",
    "Artist or Designer",
    "Entrepreneur or Business Owner",
    "Athlete or Fitness Coach",
    "Actor, Dancer, or Performer",
    "Chef or Nutrition Expert",
    "Fashion Designer or Tailor",
    "Mechanic or Technician",
    "Farmer or Nature Expert",
    "Animal Care Specialist",
    "Social Worker or Leader",
    "Spiritual Guide or Wellness Coach",
    "I'm still exploring",
)

# Upper bounds for the multi-select answers.
MAX_CLUSTERS        = 3
MAX_LEARNING_STYLES = 2
MAX_CORE_VALUES     = 3
MAX_CAREER_TYPES    = 2


# ─── Acting principal ────────────────────────────────────────────────────────

STUDENT_ROLE = "student"


@dataclass(frozen=True)
class Principal:
    """The authenticated user resolved by the host before the wizard opens."""
    user_id:   str
    role:      str                 # "student" | "parent" | "teacher" | "admin"
    unique_id: str = ""            # student-facing id, e.g. "STU-0042"
    email:     str = ""
    full_name: str = ""

    @property
    def is_student(self) -> bool:
        return self.role == STUDENT_ROLE


# ─── Wizard answer aggregate ─────────────────────────────────────────────────

@dataclass
class AssessmentAnswerState:
    """
    Everything the student has answered so far.

    Set-valued answers are kept as insertion-ordered lists without duplicates
    so the submitted payload preserves the order in which options were picked.
    A key exists in cluster_responses only while that cluster is selected.
    """
    selected_clusters:      list[ClusterId] = field(default_factory=list)
    cluster_responses:      dict[ClusterId, dict[str, str]] = field(default_factory=dict)
    learning_styles:        list[str] = field(default_factory=list)
    challenge_approach:     Optional[str] = None
    core_values:            list[str] = field(default_factory=list)
    dream_career_text:      str = ""
    career_attraction_text: str = ""
    exciting_career_types:  list[str] = field(default_factory=list)

    def to_payload(self) -> dict:
        """Flatten into the nested document shape stored for the student."""
        return {
            "broadInterestClusters": [c.label for c in self.selected_clusters],
            "clusterDeepDive": {
                c.value: dict(self.cluster_responses[c])
                for c in self.selected_clusters
                if c in self.cluster_responses
            },
            "personalityInsights": {
                "learningStyle":     list(self.learning_styles),
                "challengeApproach": self.challenge_approach or "",
                "coreValues":        list(self.core_values),
            },
            "careerDirection": {
                "dreamCareer":         self.dream_career_text,
                "excitingCareerTypes": list(self.exciting_career_types),
                "careerAttraction":    self.career_attraction_text,
            },
        }


# ─── Submitted payload (server-side contract) ────────────────────────────────

def _check_catalogue(values: list[str], catalogue: tuple[str, ...], what: str) -> list[str]:
    unknown = [v for v in values if v not in catalogue]
    if unknown:
        raise ValueError(f"unknown {what}: {unknown}")
    if len(set(values)) != len(values):
        raise ValueError(f"duplicate {what}")
    return values


class PersonalityInsights(BaseModel):
    learningStyle:     list[str] = Field(min_length=1, max_length=MAX_LEARNING_STYLES)
    challengeApproach: str       = Field(min_length=1)
    coreValues:        list[str] = Field(min_length=1, max_length=MAX_CORE_VALUES)

    @field_validator("learningStyle")
    @classmethod
    def known_styles(cls, v: list[str]) -> list[str]:
        return _check_catalogue(v, LEARNING_STYLES, "learning style")

    @field_validator("challengeApproach")
    @classmethod
    def known_approach(cls, v: str) -> str:
        if v not in CHALLENGE_APPROACHES:
            raise ValueError(f"unknown challenge approach: {v!r}")
        return v

    @field_validator("coreValues")
    @classmethod
    def known_values(cls, v: list[str]) -> list[str]:
        return _check_catalogue(v, CORE_VALUES, "core value")


class CareerDirection(BaseModel):
    dreamCareer:         str       = Field(min_length=1)
    excitingCareerTypes: list[str] = Field(min_length=1, max_length=MAX_CAREER_TYPES)
    careerAttraction:    str       = Field(min_length=1)

    @field_validator("dreamCareer", "careerAttraction")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("excitingCareerTypes")
    @classmethod
    def known_types(cls, v: list[str]) -> list[str]:
        return _check_catalogue(v, CAREER_TYPES, "career type")


class InterestAssessmentPayload(BaseModel):
    """
    The document written when a student completes the interest assessment.
    Field names follow the stored document, not Python naming.
    """
    broadInterestClusters: list[str] = Field(min_length=1, max_length=MAX_CLUSTERS)
    clusterDeepDive:       dict[str, dict[str, str]] = Field(default_factory=dict)
    personalityInsights:   PersonalityInsights
    careerDirection:       CareerDirection

    @field_validator("broadInterestClusters")
    @classmethod
    def known_clusters(cls, v: list[str]) -> list[str]:
        return _check_catalogue(v, tuple(CLUSTER_LABELS.values()), "interest cluster")

    @field_validator("clusterDeepDive")
    @classmethod
    def known_cluster_keys(cls, v: dict[str, dict[str, str]]) -> dict[str, dict[str, str]]:
        known = {c.value for c in ClusterId}
        unknown = sorted(k for k in v if k not in known)
        if unknown:
            raise ValueError(f"unknown cluster keys: {unknown}")
        return v

    def selected_cluster_ids(self) -> list[ClusterId]:
        return [ClusterId.from_label(label) for label in self.broadInterestClusters]
