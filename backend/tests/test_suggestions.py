import random

from app.llm.intent import BUDGET_MODIFICATION, MODIFY_ITINERARY
from app.models.domain import ChangeDescriptor, ChangeType
from app.services.suggestions import GENERIC_FALLBACK, generate_follow_up_suggestions


def _change(days):
    return ChangeDescriptor(
        type=ChangeType.addition, affected_days=days, activity_name="x", after="y"
    )


def test_budget_suggestions_point_at_untouched_day(itinerary):
    suggestions = generate_follow_up_suggestions(
        [_change([1])], BUDGET_MODIFICATION, itinerary, rng=random.Random(3)
    )

    assert suggestions[:2] == ["Show me more free activities", "Find budget dining options"]
    assert suggestions[2] in ("Modify day 2", "Modify day 3")
    assert suggestions[3] == GENERIC_FALLBACK
    assert len(suggestions) == 4


def test_all_days_touched_skips_day_prompt(itinerary):
    suggestions = generate_follow_up_suggestions(
        [_change([1, 2]), _change([3])], BUDGET_MODIFICATION, itinerary
    )
    assert suggestions == [
        "Show me more free activities",
        "Find budget dining options",
        GENERIC_FALLBACK,
    ]


def test_generic_action_gets_day_prompt_and_fallback(itinerary):
    suggestions = generate_follow_up_suggestions(
        [_change([2]), _change([3])], MODIFY_ITINERARY, itinerary
    )
    assert suggestions == ["Modify day 1", GENERIC_FALLBACK]


def test_nothing_known_returns_only_fallback():
    assert generate_follow_up_suggestions([], None, None) == [GENERIC_FALLBACK]
