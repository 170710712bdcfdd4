"""
Scenario seed generation.

Picks a context, a prompt and a handful of scripted follow-up questions
for a scenario type. Randomness comes from an injectable ``random.Random``
so tests can seed it.
"""

import random
import uuid
from typing import Optional

from .models import (
    FollowupQuestion,
    FollowupTemplate,
    FollowupType,
    ScenarioInfo,
    ScenarioSeed,
    ScenarioType,
)


CONTEXTS: dict[ScenarioType, list[str]] = {
    ScenarioType.STANDUP: [
        "You are giving your daily standup update to your team. Your team lead and 5 engineers are listening.",
        "It's Monday morning standup. The product manager has joined to check on sprint progress.",
        "Your standup is running late, and the team seems eager to get back to work. Keep it concise.",
    ],
    ScenarioType.INCIDENT: [
        "There was a production outage affecting 20% of users. You are giving a status update to stakeholders.",
        "A critical API is returning 500 errors. Engineering leadership is on the call for a status update.",
        "Database latency spiked causing slowdowns. The incident commander asked for your update.",
    ],
}

PROMPTS: dict[ScenarioType, list[str]] = {
    ScenarioType.STANDUP: [
        "Share what you worked on yesterday, what you're working on today, and any blockers.",
        "Give your update: accomplishments, current focus, and obstacles.",
        "Time for your standup. What's your status?",
    ],
    ScenarioType.INCIDENT: [
        "Please give us the current status of the incident.",
        "What's the latest on this issue? Impact and timeline?",
        "Update the team on where we are with this incident.",
    ],
}

FOLLOWUP_POOLS: dict[ScenarioType, list[FollowupTemplate]] = {
    ScenarioType.STANDUP: [
        FollowupTemplate(
            question='Can you be more specific about what "almost done" means?',
            type=FollowupType.INTERRUPTION,
            timing=15,
        ),
        FollowupTemplate(
            question="What's the ETA on that task?",
            type=FollowupType.FOLLOWUP,
            timing=30,
        ),
        FollowupTemplate(
            question="Is there anything blocking you that we can help with?",
            type=FollowupType.FOLLOWUP,
            timing=45,
        ),
        FollowupTemplate(
            question="How does this align with the sprint goal?",
            type=FollowupType.FOLLOWUP,
            timing=60,
        ),
        FollowupTemplate(
            question="Wait, didn't you mention that yesterday too?",
            type=FollowupType.INTERRUPTION,
            timing=20,
        ),
    ],
    ScenarioType.INCIDENT: [
        FollowupTemplate(
            question="What's the user impact right now?",
            type=FollowupType.INTERRUPTION,
            timing=10,
        ),
        FollowupTemplate(
            question="When do you expect this to be resolved?",
            type=FollowupType.FOLLOWUP,
            timing=25,
        ),
        FollowupTemplate(
            question="Has this happened before? Is there a pattern?",
            type=FollowupType.FOLLOWUP,
            timing=40,
        ),
        FollowupTemplate(
            question="What's our rollback plan if the fix doesn't work?",
            type=FollowupType.INTERRUPTION,
            timing=35,
        ),
        FollowupTemplate(
            question="Who else needs to be involved in resolving this?",
            type=FollowupType.FOLLOWUP,
            timing=50,
        ),
    ],
}

TIME_LIMITS: dict[ScenarioType, int] = {
    ScenarioType.STANDUP: 90,
    ScenarioType.INCIDENT: 120,
}

DISPLAY_NAMES: dict[ScenarioType, str] = {
    ScenarioType.STANDUP: "Daily Standup",
    ScenarioType.INCIDENT: "Incident Status Update",
}

DESCRIPTIONS: dict[ScenarioType, str] = {
    ScenarioType.STANDUP: "Practice delivering clear, concise daily standup updates under pressure.",
    ScenarioType.INCIDENT: "Practice communicating incident status to stakeholders with clarity and confidence.",
}

THIRD_QUESTION_PROBABILITY = 0.5


class ScenarioGenerator:
    """
    Builds randomized scenario seeds.

    Stateless apart from the random source; safe to share.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng: Random source. Pass a seeded instance for reproducible output.
        """
        self._rng = rng or random.Random()

    def generate(self, scenario_type: ScenarioType) -> ScenarioSeed:
        """Generate a fresh seed for ``scenario_type``."""
        scenario_type = ScenarioType(scenario_type)
        return ScenarioSeed(
            scenario_type=scenario_type,
            context=self._rng.choice(CONTEXTS[scenario_type]),
            prompts=[self._rng.choice(PROMPTS[scenario_type])],
            followups=self.pick_followups(scenario_type),
            time_limit=TIME_LIMITS[scenario_type],
        )

    def pick_followups(self, scenario_type: ScenarioType) -> list[FollowupQuestion]:
        """
        Pick 2-3 follow-up questions for a scenario.

        Always one interruption and one follow-up; with a 50% chance a
        third question from whatever is left in the pool. The result is
        ordered by timing, not by selection order.
        """
        pool = FOLLOWUP_POOLS[scenario_type]
        interruptions = [t for t in pool if t.type == FollowupType.INTERRUPTION]
        followups = [t for t in pool if t.type == FollowupType.FOLLOWUP]

        selected = [
            self._rng.choice(interruptions),
            self._rng.choice(followups),
        ]

        if self._rng.random() < THIRD_QUESTION_PROBABILITY:
            chosen = {t.question for t in selected}
            remaining = [t for t in interruptions + followups if t.question not in chosen]
            if remaining:
                selected.append(self._rng.choice(remaining))

        questions = [
            FollowupQuestion(
                id=str(uuid.uuid4()),
                question=template.question,
                type=template.type,
                timing=template.timing,
            )
            for template in selected
        ]
        return sorted(questions, key=lambda q: q.timing)


def get_display_name(scenario_type: ScenarioType) -> str:
    return DISPLAY_NAMES[ScenarioType(scenario_type)]


def get_description(scenario_type: ScenarioType) -> str:
    return DESCRIPTIONS[ScenarioType(scenario_type)]


def list_scenarios() -> list[ScenarioInfo]:
    """Catalogue of every supported scenario type."""
    return [
        ScenarioInfo(
            scenario_type=scenario_type,
            display_name=DISPLAY_NAMES[scenario_type],
            description=DESCRIPTIONS[scenario_type],
            time_limit=TIME_LIMITS[scenario_type],
        )
        for scenario_type in ScenarioType
    ]


def generate_scenario_seed(
    scenario_type: ScenarioType,
    rng: Optional[random.Random] = None,
) -> ScenarioSeed:
    """Convenience wrapper around ``ScenarioGenerator.generate``."""
    return ScenarioGenerator(rng).generate(scenario_type)
