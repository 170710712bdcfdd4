"""
Scenarios module.

Generates the randomized context, prompt and scripted follow-up
questions for a practice session. Pure logic, no persistence.

Public API:
- ScenarioGenerator: Seedable seed generator
- ScenarioSeed, FollowupQuestion: Generated data
- ScenarioType, FollowupType: Enumerations
"""

from .generator import (
    ScenarioGenerator,
    generate_scenario_seed,
    get_description,
    get_display_name,
    list_scenarios,
)
from .models import (
    FollowupQuestion,
    FollowupType,
    ScenarioInfo,
    ScenarioSeed,
    ScenarioType,
)

__all__ = [
    # Generator
    "ScenarioGenerator",
    "generate_scenario_seed",
    "get_description",
    "get_display_name",
    "list_scenarios",
    # Models
    "FollowupQuestion",
    "FollowupType",
    "ScenarioInfo",
    "ScenarioSeed",
    "ScenarioType",
]
