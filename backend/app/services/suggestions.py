import random
from typing import Dict, List, Optional, Sequence, Tuple

from app.llm.intent import (
    ACTIVE_ITINERARY,
    BUDGET_MODIFICATION,
    CULTURAL_ACTIVITIES,
    RELAX_ITINERARY,
)
from app.models.domain import ChangeDescriptor, Itinerary

MAX_SUGGESTIONS = 4
GENERIC_FALLBACK = "What should I pack for this trip?"

ACTION_SUGGESTIONS: Dict[str, Tuple[str, str]] = {
    BUDGET_MODIFICATION: ("Show me more free activities", "Find budget dining options"),
    RELAX_ITINERARY: ("Add more free time", "Make my mornings more relaxed"),
    ACTIVE_ITINERARY: ("Add more outdoor activities", "Find hiking opportunities"),
    CULTURAL_ACTIVITIES: ("Add more historical sites", "Find local cultural events"),
}


def generate_follow_up_suggestions(
    changes: Sequence[ChangeDescriptor],
    action: Optional[str],
    itinerary: Optional[Itinerary],
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Follow-up prompts for the chat after a batch of changes was applied."""
    rng = rng or random.Random()
    suggestions: List[str] = list(ACTION_SUGGESTIONS.get(action or "", ()))

    touched = {day for change in changes for day in change.affected_days}
    day_count = len(itinerary.days) if itinerary else 0
    untouched = [day for day in range(1, day_count + 1) if day not in touched]
    if untouched:
        suggestions.append(f"Modify day {rng.choice(untouched)}")

    if len(suggestions) < MAX_SUGGESTIONS:
        suggestions.append(GENERIC_FALLBACK)
    return suggestions[:MAX_SUGGESTIONS]
