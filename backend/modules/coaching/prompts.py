"""
Prompt templates for the OpenAI coach.

Each builder returns a (system, user) message pair. All prompts ask for
a JSON object so responses can run in JSON mode.
"""

from modules.scenarios.models import ScenarioType

SCORING_CONTEXT = {
    ScenarioType.STANDUP: "daily standup meeting update",
    ScenarioType.INCIDENT: "incident status update to stakeholders",
}

MEETING_NAME = {
    ScenarioType.STANDUP: "daily standup",
    ScenarioType.INCIDENT: "incident status update",
}

UPDATE_NAME = {
    ScenarioType.STANDUP: "standup update",
    ScenarioType.INCIDENT: "incident update",
}

SCORING_SYSTEM = """You are an expert communication coach evaluating a {context}.
Score the response on three criteria (0-100):
1. Clarity: How clear and understandable is the message?
2. Structure: Is the information well-organized?
3. Tone: Is the tone appropriate for a professional setting?

Also provide:
- 3 actionable tips for improvement
- 2 highlighted moments (one positive, one for improvement) with quotes from the transcript

Return JSON with this structure:
{{
  "scores": {{ "clarity": number, "structure": number, "tone": number, "overall": number }},
  "feedback": {{
    "tips": [string, string, string],
    "highlights": [
      {{ "quote": string, "type": "positive", "explanation": string }},
      {{ "quote": string, "type": "improvement", "explanation": string }}
    ]
  }}
}}"""

FOLLOWUPS_SYSTEM = """You are an AI that generates realistic follow-up questions for a {meeting} meeting simulation.
Based on the user's response, generate 1-2 challenging but realistic follow-up questions that a manager or team lead might ask.
Return JSON: {{ "questions": [{{ "question": string, "type": "interruption" | "followup" }}] }}"""

MOMENTS_SYSTEM = """Analyze this {update} and break it down into key moments.
For each moment (sentence or phrase), provide a score (0-100) and specific feedback.
Return JSON: {{ "moments": [{{ "text": string, "score": number, "feedback": string }}] }}"""

DRILL_SYSTEM = """Compare the original statement with the improved version.
The user was trying to improve: {goal}

Original: "{original}"
New version: "{new}"

Evaluate if the new version is an improvement. Return JSON:
{{ "score": number (0-100), "feedback": string, "improved": boolean }}"""


def scoring_messages(
    transcript: str,
    scenario_type: ScenarioType,
    followup_transcripts: list[str],
) -> tuple[str, str]:
    system = SCORING_SYSTEM.format(context=SCORING_CONTEXT[scenario_type])
    if followup_transcripts:
        numbered = "\n".join(
            f'{i}. "{text}"' for i, text in enumerate(followup_transcripts, start=1)
        )
        user = f'Main response: "{transcript}"\n\nFollow-up responses: {numbered}'
    else:
        user = f'Response: "{transcript}"'
    return system, user


def followups_messages(transcript: str, scenario_type: ScenarioType) -> tuple[str, str]:
    system = FOLLOWUPS_SYSTEM.format(meeting=MEETING_NAME[scenario_type])
    return system, f'User\'s response: "{transcript}"'


def moments_messages(transcript: str, scenario_type: ScenarioType) -> tuple[str, str]:
    return MOMENTS_SYSTEM.format(update=UPDATE_NAME[scenario_type]), transcript


def drill_messages(original: str, new: str, goal: str) -> tuple[str, str]:
    system = DRILL_SYSTEM.format(goal=goal, original=original, new=new)
    return system, "Evaluate the improvement."
