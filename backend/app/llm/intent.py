from dataclasses import dataclass
from typing import List, Tuple

from app.models.domain import Intent, IntentAnalysis

BUDGET_MODIFICATION = "budget modification"
RELAX_ITINERARY = "relax itinerary"
ACTIVE_ITINERARY = "active itinerary"
CULTURAL_ACTIVITIES = "add cultural activities"
MODIFY_ITINERARY = "modify itinerary"
ANSWER_QUESTION = "answer question"
PROVIDE_SUGGESTIONS = "provide suggestions"
SOLVE_PROBLEM = "solve problem"
GENERAL_CONVERSATION = "general conversation"


@dataclass(frozen=True)
class IntentRule:
    keywords: Tuple[str, ...]
    intent: Intent
    action: str
    confidence: float

    def matches(self, lowered: str) -> bool:
        return any(keyword in lowered for keyword in self.keywords)


# Order matters: specific phrases must be checked before the generic verbs,
# e.g. "make my trip cheaper" is a budget change, not a generic one.
INTENT_RULES: List[IntentRule] = [
    IntentRule(
        ("save money", "cheaper", "budget", "expensive"),
        Intent.modify_itinerary,
        BUDGET_MODIFICATION,
        0.9,
    ),
    IntentRule(
        ("less busy", "more relaxed", "too busy", "slow down"),
        Intent.modify_itinerary,
        RELAX_ITINERARY,
        0.9,
    ),
    IntentRule(
        ("more active", "adventurous", "energetic", "outdoor", "exciting", "adventure"),
        Intent.modify_itinerary,
        ACTIVE_ITINERARY,
        0.9,
    ),
    IntentRule(
        ("cultural", "culture", "museum", "historical"),
        Intent.modify_itinerary,
        CULTURAL_ACTIVITIES,
        0.9,
    ),
    IntentRule(
        ("make", "add", "remove", "change", "modify", "replace", "swap"),
        Intent.modify_itinerary,
        MODIFY_ITINERARY,
        0.9,
    ),
    IntentRule(
        ("what", "where", "when", "how", "why", "tell me", "explain", "should i"),
        Intent.ask_question,
        ANSWER_QUESTION,
        0.8,
    ),
    IntentRule(
        ("suggest", "recommend", "alternatives", "options", "better", "ideas"),
        Intent.get_suggestions,
        PROVIDE_SUGGESTIONS,
        0.8,
    ),
    IntentRule(
        ("problem", "issue", "conflict", "fix"),
        Intent.troubleshoot,
        SOLVE_PROBLEM,
        0.8,
    ),
]


def classify_intent(message: str) -> IntentAnalysis:
    lowered = (message or "").lower()
    for rule in INTENT_RULES:
        if rule.matches(lowered):
            return IntentAnalysis(
                intent=rule.intent, action=rule.action, confidence=rule.confidence
            )
    return IntentAnalysis(
        intent=Intent.general_chat, action=GENERAL_CONVERSATION, confidence=0.5
    )
