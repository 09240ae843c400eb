import json
from typing import Any, Dict, Sequence

from app.llm.intent import (
    ACTIVE_ITINERARY,
    BUDGET_MODIFICATION,
    CULTURAL_ACTIVITIES,
    RELAX_ITINERARY,
)
from app.models.domain import ChangeDescriptor, Itinerary

CHANGE_SYSTEM_PROMPT = """You are a travel itinerary modification assistant. Based on user input, you will analyze an itinerary and suggest specific changes.

Output format instructions:
1. First, briefly explain what changes you think are needed in 2-3 sentences.
2. Then provide a JSON array of specific changes in the following format:

[
  {
    "type": "modification" | "addition" | "removal",
    "description": "Brief description of what was changed",
    "affectedDays": [day numbers],
    "before": "Original content (for modifications and removals)",
    "after": "New content (for modifications and additions)",
    "activityName": "Name of the affected activity"
  }
]

Keep your JSON array clean, simple and properly formatted. Include 4-6 specific changes at most."""

EXPLANATION_SYSTEM_PROMPT = (
    "You are a helpful travel assistant explaining changes made to an itinerary."
)

DESTINATION_SYSTEM_PROMPT = (
    "You are a travel consultant who turns a traveler's description into destination "
    "recommendations. Respond with ONLY valid JSON - no explanations, no reasoning text."
)

INTEREST_SYSTEM_PROMPT = (
    "You are a destination specialist who creates destination-specific interest "
    "categories for travelers. Respond with ONLY valid JSON - no explanations, no reasoning."
)

ITINERARY_MARKER = "Here is the current itinerary in simplified format:"

_ACTION_GOALS: Dict[str, Sequence[str]] = {
    BUDGET_MODIFICATION: (
        "reduce costs and fit within a budget",
        "Replace expensive activities with more affordable alternatives",
        "Add some free activities",
        "Suggest budget accommodations or dining options",
        "Ensure each modification preserves the essence and enjoyment of the trip",
    ),
    RELAX_ITINERARY: (
        "make it less busy and more relaxed",
        "Reduce the number of activities per day to 2-3 main activities",
        "Add relaxation time and breaks between activities",
        "Ensure there's enough time for leisurely meals and spontaneous exploration",
        "Balance the schedule throughout the day",
    ),
    ACTIVE_ITINERARY: (
        "make it more active and adventurous",
        "Add outdoor activities suited to each destination",
        "Include physical experiences like hiking, biking or water sports",
        "Balance active experiences with the existing itinerary",
        "Consider the destination characteristics when suggesting activities",
    ),
    CULTURAL_ACTIVITIES: (
        "include more cultural experiences",
        "Add visits to museums, historical sites, and cultural landmarks",
        "Include experiences to learn about local traditions and customs",
        "Suggest cultural performances, demonstrations, or workshops",
        "Balance cultural experiences with the existing itinerary",
    ),
}

_GENERIC_GOAL = (
    "reflect the user's request",
    "Be specific about what is being modified, added, or removed",
    "Consider the overall flow and balance of the itinerary",
    "Maintain the essence of what makes each destination special",
    "Make logical changes that enhance the traveler's experience",
)


def simplify_itinerary(itinerary: Itinerary) -> Dict[str, Any]:
    return {
        "destinations": [{"name": d.name, "duration": d.duration} for d in itinerary.destinations],
        "budget": {"total": itinerary.budget.total},
        "itinerary": {
            "days": [
                {
                    "day": day.day,
                    "date": day.date,
                    "destination": day.destination,
                    "title": day.title,
                    "activities": [
                        {
                            "time": a.time,
                            "name": a.name,
                            "description": a.description,
                            "location": a.location,
                            "duration": a.duration,
                            "cost": a.cost,
                        }
                        for a in day.activities
                    ],
                }
                for day in itinerary.days
            ]
        },
    }


def build_change_prompt(message: str, action: str, itinerary: Itinerary) -> str:
    goal, *steps = _ACTION_GOALS.get(action, _GENERIC_GOAL)
    numbered = "\n".join(f"{i}. {step}" for i, step in enumerate(steps, start=1))
    lines = [
        f"You are an AI travel assistant tasked with modifying a travel itinerary to {goal}.",
        f'The user request is: "{message}"',
        "",
        "Current itinerary details:",
        f"- Destinations: {', '.join(itinerary.destination_names())}",
        f"- Duration: {len(itinerary.days)} days",
    ]
    if action == BUDGET_MODIFICATION:
        lines.append(f"- Current budget: {itinerary.budget.total}")
    lines += [
        "",
        "For each change:",
        numbered,
        "",
        ITINERARY_MARKER,
        json.dumps(simplify_itinerary(itinerary), indent=2),
        "",
        "Only respond with your brief analysis and the JSON array of changes as described.",
    ]
    return "\n".join(lines)


def build_explanation_prompt(
    message: str, itinerary: Itinerary, changes: Sequence[ChangeDescriptor]
) -> str:
    described = []
    for change in changes:
        days = ", ".join(str(day) for day in change.affected_days)
        suffix = f" (affecting day(s) {days})" if days else ""
        described.append(f"- {change.description}{suffix}")
    return (
        f'Based on the user\'s request to "{message}", you have modified their '
        f"{' & '.join(itinerary.destination_names())} itinerary.\n\n"
        "The changes you made were:\n"
        + "\n".join(described)
        + "\n\nPlease create a friendly, enthusiastic response explaining these changes "
        "in a natural way."
    )


def build_destination_prompt(description: str) -> str:
    return (
        "Analyze the travel description below and recommend destinations. Destinations "
        "the traveler names explicitly MUST come first.\n\n"
        f'TRAVELER DESCRIPTION: "{description}"\n\n'
        "Return ONLY valid JSON in this exact structure:\n"
        '{"locations": [{"name": "Destination City", "country": "Country", '
        '"reason": "Two sentences on why it fits", "duration": number_of_days}]}'
    )


def build_interest_prompt(destination_names: Sequence[str], travel_style: str) -> str:
    names = ", ".join(destination_names)
    return (
        f"Generate 6-8 interest categories tailored to {names} for a {travel_style} "
        "traveler. Categories must be destination-specific, not generic.\n\n"
        "Return ONLY this JSON structure:\n"
        '[{"name": "Category name", "description": "50-60 character description", '
        '"icon": "emoji", "category": "food|culture|adventure|nature|unique|'
        'entertainment|shopping|wellness"}]'
    )


INSIGHTS_SYSTEM_PROMPT = (
    "You are a local destination expert who gives practical, current advice that helps "
    "visitors experience a place like informed locals. Respond with ONLY valid JSON - no "
    "explanations, no reasoning, no thinking blocks."
)


def build_insights_prompt(
    destination: str,
    interests: Sequence[str],
    travel_style: str,
    budget: str,
    dates: str,
    duration: int,
) -> str:
    interest_text = ", ".join(interests) or "general exploration"
    return (
        f"Give local insights for a traveler visiting {destination}.\n\n"
        "TRAVELER PROFILE:\n"
        f"- Interests: {interest_text}\n"
        f"- Travel style: {travel_style}\n"
        f"- Budget level: {budget}\n"
        f"- Duration: {duration} days\n"
        f"- Travel dates: {dates or 'flexible'}\n\n"
        "Return ONLY this JSON structure, with 2-3 specific entries per list:\n"
        f'{{"destination": "{destination}", "accommodationTips": [], '
        '"localEvents": [{"name": "", "date": "", "description": "", "cost": ""}], '
        '"transportTips": [], "culturalTips": [], "budgetTips": [], "seasonalAdvice": [], '
        '"hiddenGems": [], "foodRecommendations": [], "safetyTips": []}'
    )
