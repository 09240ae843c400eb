import json
import logging
import re
from typing import List

from app.llm.client import GenerationOptions, TextGenerationBackend
from app.llm.prompts import (
    CHANGE_SYSTEM_PROMPT,
    DESTINATION_SYSTEM_PROMPT,
    INSIGHTS_SYSTEM_PROMPT,
    INTEREST_SYSTEM_PROMPT,
    ITINERARY_MARKER,
)
from app.llm.response_filter import extract_structured_payload

logger = logging.getLogger(__name__)


class MockTextBackend(TextGenerationBackend):
    """
    A deterministic generator that imitates a hosted model, so the app runs
    without network access. Change requests get a short analysis followed by
    a fenced JSON array, the way real models tend to answer.
    """

    name = "mock"

    def generate_text(
        self, prompt: str, system_prompt: str, options: GenerationOptions
    ) -> str:
        if system_prompt == CHANGE_SYSTEM_PROMPT:
            return self._changes(prompt)
        if system_prompt == DESTINATION_SYSTEM_PROMPT:
            return self._destinations()
        if system_prompt == INTEREST_SYSTEM_PROMPT:
            return self._interests()
        if system_prompt == INSIGHTS_SYSTEM_PROMPT:
            return self._insights(prompt)
        return (
            "Great news! I've updated your itinerary with the changes you asked for. "
            "Take a look and let me know if you'd like any further tweaks."
        )

    def _changes(self, prompt: str) -> str:
        _, _, itinerary_text = prompt.partition(ITINERARY_MARKER)
        found = extract_structured_payload(itinerary_text)
        days = []
        if found is not None and isinstance(found.value, dict):
            days = found.value.get("itinerary", {}).get("days", [])
        if not days:
            return "I couldn't find any days to change in this itinerary."

        first_day = days[0]
        changes: List[dict] = [
            {
                "type": "addition",
                "description": "Add a relaxed local market visit",
                "affectedDays": [first_day.get("day", 1)],
                "activityName": "Local Market Stroll",
                "after": "Wander the neighbourhood market and try local snacks",
            }
        ]
        activities = first_day.get("activities") or []
        if "reduce costs" in prompt and activities:
            name = activities[-1].get("name", "")
            changes.append(
                {
                    "type": "modification",
                    "description": "Swap for a cheaper option",
                    "affectedDays": [first_day.get("day", 1)],
                    "activityName": name,
                    "before": name,
                    "after": f"{name} (self-guided): Explore at your own pace for free",
                }
            )
        logger.debug("Mock generator produced %d changes", len(changes))
        return (
            "<think>Looking at the first day to find room for changes.</think>\n"
            "Here are the changes I recommend:\n```json\n"
            + json.dumps(changes, indent=2)
            + "\n```"
        )

    @staticmethod
    def _destinations() -> str:
        return json.dumps(
            {
                "locations": [
                    {
                        "name": "Lisbon",
                        "country": "Portugal",
                        "reason": "Walkable historic districts and great food. Mild weather most of the year.",
                        "duration": 4,
                    },
                    {
                        "name": "Porto",
                        "country": "Portugal",
                        "reason": "Riverside views and port cellars. Easy to combine with Lisbon by train.",
                        "duration": 3,
                    },
                ]
            }
        )

    @staticmethod
    def _interests() -> str:
        return json.dumps(
            [
                {
                    "name": "Old Town Food Walks",
                    "description": "Taste local specialties in historic lanes",
                    "icon": "🍲",
                    "category": "food",
                },
                {
                    "name": "Viewpoints and Hills",
                    "description": "Catch sunsets from the best city lookouts",
                    "icon": "🌅",
                    "category": "nature",
                },
            ]
        )

    @staticmethod
    def _insights(prompt: str) -> str:
        match = re.search(r"visiting (.+?)\.\n", prompt)
        destination = match.group(1) if match else "your destination"
        return (
            "<think>Drafting insights.</think>\n"
            + json.dumps(
                {
                    "destination": destination,
                    "accommodationTips": [f"Stay near the old town in {destination}"],
                    "localEvents": [
                        {
                            "name": "Neighbourhood festival",
                            "date": "Summer weekends",
                            "description": "Street food and live music",
                            "cost": "Free",
                        }
                    ],
                    "transportTips": ["Buy a rechargeable transit card"],
                    "culturalTips": ["Greet shopkeepers when you walk in"],
                    "budgetTips": ["Set lunch menus are the best value"],
                    "seasonalAdvice": ["Pack a light layer for evenings"],
                    "hiddenGems": ["Sunset from the quieter viewpoints"],
                    "foodRecommendations": ["Try the local bakery specialties"],
                    "safetyTips": ["Watch for pickpockets on busy trams"],
                }
            )
        )
