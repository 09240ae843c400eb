import logging
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from app.core.config import Settings, settings as default_settings
from app.llm import prompts
from app.llm.client import GenerationError, GenerationOptions, LLMClient
from app.llm.response_filter import extract_structured_payload
from app.models.schemas import InterestCategorySchema, LocalInsightsSchema, LocationSchema

logger = logging.getLogger(__name__)

MAX_LOCATIONS = 10


def _valid_entries(items: Sequence[Any], schema) -> List[Any]:
    valid = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            valid.append(schema.model_validate(item))
        except ValidationError:
            logger.debug("Dropping malformed %s entry: %r", schema.__name__, item)
    return valid


class DiscoveryService:
    """Destination and interest ideas generated from free-form traveler input."""

    def __init__(self, llm_client: LLMClient, settings: Optional[Settings] = None):
        self.llm_client = llm_client
        self.settings = settings or default_settings

    def _generate(self, prompt: str, system_prompt: str) -> Optional[Any]:
        try:
            raw = self.llm_client.generate_text(
                prompt,
                system_prompt,
                GenerationOptions(
                    temperature=self.settings.discovery_temperature,
                    max_tokens=self.settings.discovery_max_tokens,
                ),
            )
        except GenerationError as exc:
            logger.error("Discovery generation failed: %s", exc)
            return None
        found = extract_structured_payload(raw)
        if found is None:
            logger.warning("Discovery response contained no JSON")
            return None
        return found.value

    def suggest_destinations(self, description: str) -> List[LocationSchema]:
        payload = self._generate(
            prompts.build_destination_prompt(description), prompts.DESTINATION_SYSTEM_PROMPT
        )
        if isinstance(payload, dict):
            payload = payload.get("locations")
        if not isinstance(payload, list):
            return []
        locations = [
            loc
            for loc in _valid_entries(payload, LocationSchema)
            if loc.name and loc.country and loc.reason
        ]
        return locations[:MAX_LOCATIONS]

    def suggest_interests(
        self, destination_names: Sequence[str], travel_style: str
    ) -> List[InterestCategorySchema]:
        names = [name for name in destination_names if name]
        if not names:
            return []
        payload = self._generate(
            prompts.build_interest_prompt(names, travel_style), prompts.INTEREST_SYSTEM_PROMPT
        )
        if not isinstance(payload, list):
            return []
        return _valid_entries(payload, InterestCategorySchema)

    def local_insights(
        self,
        destination: str,
        interests: Sequence[str] = (),
        travel_style: str = "balanced",
        budget: str = "moderate",
        dates: str = "",
        duration: int = 3,
    ) -> LocalInsightsSchema:
        try:
            raw = self.llm_client.generate_text(
                prompts.build_insights_prompt(
                    destination, interests, travel_style, budget, dates, duration
                ),
                prompts.INSIGHTS_SYSTEM_PROMPT,
                GenerationOptions(
                    temperature=self.settings.insights_temperature,
                    max_tokens=self.settings.insights_max_tokens,
                ),
            )
        except GenerationError as exc:
            logger.error("Local insights generation failed: %s", exc)
            return LocalInsightsSchema(destination=destination)

        found = extract_structured_payload(raw)
        if found is not None and isinstance(found.value, dict):
            try:
                return LocalInsightsSchema.model_validate(
                    {**found.value, "destination": found.value.get("destination") or destination}
                )
            except ValidationError:
                logger.warning("Local insights payload did not match the expected shape")
        return _generic_insights(destination, budget)


def _generic_insights(destination: str, budget: str) -> LocalInsightsSchema:
    return LocalInsightsSchema(
        destination=destination,
        accommodation_tips=[
            f"Check local accommodation options in {destination} for {budget} budget travelers"
        ],
        transport_tips=[f"Research local transportation options in {destination}"],
        cultural_tips=[f"Learn about local customs and etiquette in {destination}"],
        budget_tips=[f"Budget {budget} travelers should research local pricing in {destination}"],
        seasonal_advice=[f"Check current weather and seasonal considerations for {destination}"],
        hidden_gems=[f"Explore local recommendations and hidden gems in {destination}"],
        food_recommendations=[f"Try local cuisine and traditional dishes in {destination}"],
        safety_tips=[f"Follow standard travel safety precautions in {destination}"],
    )
