"""
Scenarios module data models.

A scenario seed is the generated context, prompt and scripted
follow-up questions for one practice session.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ScenarioType(str, Enum):
    """Supported meeting scenarios."""

    STANDUP = "standup"
    INCIDENT = "incident"


class FollowupType(str, Enum):
    """How a scripted question is injected into the scenario."""

    INTERRUPTION = "interruption"
    FOLLOWUP = "followup"


class FollowupTemplate(BaseModel):
    """A pool entry a follow-up question is drawn from."""

    question: str
    type: FollowupType
    timing: int = Field(..., ge=0, description="Seconds into the response")

    model_config = {"frozen": True}


class FollowupQuestion(BaseModel):
    """A follow-up question selected for a session."""

    id: str = Field(..., description="Question ID (UUID)")
    question: str = Field(..., description="Question text")
    type: FollowupType = Field(..., description="Interruption or follow-up")
    timing: int = Field(default=0, ge=0, description="Seconds into the response")


class ScenarioSeed(BaseModel):
    """Generated prompt material for one session."""

    model_config = ConfigDict(populate_by_name=True)

    scenario_type: ScenarioType
    context: str
    prompts: list[str]
    followups: list[FollowupQuestion]
    time_limit: int = Field(..., alias="timeLimit", description="Seconds")


class ScenarioInfo(BaseModel):
    """Catalogue entry for a scenario type."""

    model_config = ConfigDict(populate_by_name=True)

    scenario_type: ScenarioType
    display_name: str = Field(..., alias="displayName")
    description: str
    time_limit: int = Field(..., alias="timeLimit")


class ScenarioListResponse(BaseModel):
    """API response listing the available scenarios."""

    scenarios: list[ScenarioInfo]
