import logging
import random
from typing import List, Optional

from app.core.config import Settings, settings as default_settings
from app.llm import prompts
from app.llm.client import GenerationError, GenerationOptions, LLMClient
from app.llm.intent import BUDGET_MODIFICATION, classify_intent
from app.llm.response_filter import clean_response, extract_structured_payload
from app.models.domain import ChangeDescriptor, Intent, IntentAnalysis, Itinerary
from app.models.schemas import (
    ChangeDescriptorSchema,
    ChatResponse,
    ItinerarySchema,
    parse_change_descriptors,
)
from app.services.itinerary_editor import ChangeObserver, apply_changes
from app.services.suggestions import generate_follow_up_suggestions

logger = logging.getLogger(__name__)

UPSTREAM_FAILURE_SUGGESTIONS = [
    "Help me with day 1 of my trip",
    "Suggest some relaxing activities",
    "What would you change about my itinerary?",
    "Make one day less busy",
]
MALFORMED_BATCH_SUGGESTIONS = [
    "Show me specific changes for day 1",
    "Tell me more about the cultural activities",
    "What would make this itinerary less busy?",
    "Help me balance my trip better",
]
GENERAL_SUGGESTIONS = [
    "Modify my itinerary",
    "Ask about destinations",
    "Get travel suggestions",
    "Solve a planning issue",
]


def _contains(lowered: str, *keywords: str) -> bool:
    return any(keyword in lowered for keyword in keywords)


class AssistantService:
    def __init__(
        self,
        llm_client: LLMClient,
        settings: Optional[Settings] = None,
        observer: Optional[ChangeObserver] = None,
        rng: Optional[random.Random] = None,
    ):
        self.llm_client = llm_client
        self.settings = settings or default_settings
        self.observer = observer
        self.rng = rng or random.Random()

    def chat(self, message: str, itinerary: ItinerarySchema) -> ChatResponse:
        analysis = classify_intent(message)
        trip = itinerary.to_domain()
        logger.info(
            "Chat message classified as %s (%s, %.1f)",
            analysis.intent.value,
            analysis.action,
            analysis.confidence,
        )
        if analysis.intent is Intent.modify_itinerary:
            reply = self.modify_itinerary(message, itinerary, analysis)
        elif analysis.intent is Intent.ask_question:
            reply = self.answer_question(message, trip)
        elif analysis.intent is Intent.get_suggestions:
            reply = self.provide_suggestions(message, trip)
        elif analysis.intent is Intent.troubleshoot:
            reply = self.troubleshoot(message, itinerary)
        else:
            reply = self.general_chat(message, trip)
        reply.response = clean_response(reply.response)
        return reply

    def modify_itinerary(
        self, message: str, source: ItinerarySchema, analysis: IntentAnalysis
    ) -> ChatResponse:
        itinerary = source.to_domain()
        try:
            raw = self.llm_client.generate_text(
                prompts.build_change_prompt(message, analysis.action, itinerary),
                prompts.CHANGE_SYSTEM_PROMPT,
                GenerationOptions(
                    temperature=self.settings.modification_temperature,
                    max_tokens=self.settings.modification_max_tokens,
                ),
            )
        except GenerationError as exc:
            logger.error("Change generation failed: %s", exc)
            return self._upstream_failure()

        found = extract_structured_payload(raw)
        descriptors = parse_change_descriptors(found.value) if found else None
        if not descriptors:
            logger.warning("No usable change list in generator output")
            return self._clarify_changes(itinerary)

        result = apply_changes(itinerary, descriptors, observer=self.observer, rng=self.rng)
        if result.failed:
            described = ", ".join(d.description for d in descriptors if d.description)
            return ChatResponse(
                response=(
                    "I've analyzed your itinerary and have some suggestions, but I need "
                    f"your help to finalize them. I'd like to make these changes: {described}. "
                    "Would you like me to be more specific about any of these?"
                ),
                suggestions=list(MALFORMED_BATCH_SUGGESTIONS),
            )

        try:
            explanation = self.llm_client.generate_text(
                prompts.build_explanation_prompt(message, itinerary, result.applied_changes),
                prompts.EXPLANATION_SYSTEM_PROMPT,
                GenerationOptions(
                    temperature=self.settings.explanation_temperature,
                    max_tokens=self.settings.explanation_max_tokens,
                ),
            )
        except GenerationError as exc:
            logger.error("Explanation generation failed: %s", exc)
            return self._upstream_failure()

        if not clean_response(explanation):
            explanation = self._summarize(result.applied_changes, result.applied_count)

        return ChatResponse(
            response=explanation,
            updated_itinerary=source.to_document(result.itinerary),
            changes=[ChangeDescriptorSchema.from_domain(c) for c in result.applied_changes],
            requires_confirmation=True,
            suggestions=generate_follow_up_suggestions(
                result.applied_changes, analysis.action, result.itinerary, rng=self.rng
            ),
        )

    @staticmethod
    def _summarize(changes: List[ChangeDescriptor], applied_count: int) -> str:
        if not applied_count:
            return (
                "I couldn't match those changes to your itinerary. Could you tell me "
                "which day or activity you'd like to adjust?"
            )
        listed = "; ".join(c.description for c in changes if c.description)
        return f"I've updated your itinerary with {applied_count} change(s): {listed}."

    def _clarify_changes(self, itinerary: Itinerary) -> ChatResponse:
        suggestions = [
            "Make my itinerary less busy",
            "Add more cultural activities",
            "Help me save money",
        ]
        if itinerary.days:
            suggestions.append(f"Make changes to day {self.rng.randint(1, len(itinerary.days))}")
        return ChatResponse(
            response=(
                "I've analyzed your itinerary and have some suggestions for changes based on "
                "your request. Would you like me to modify specific days or aspects of your trip?"
            ),
            suggestions=suggestions,
        )

    @staticmethod
    def _upstream_failure() -> ChatResponse:
        return ChatResponse(
            response=(
                "I apologize, but I'm having trouble processing your itinerary right now. "
                "Could we try a different approach? Perhaps you could tell me specific days "
                "or activities you'd like to modify."
            ),
            suggestions=list(UPSTREAM_FAILURE_SUGGESTIONS),
        )

    def answer_question(self, message: str, itinerary: Itinerary) -> ChatResponse:
        lowered = message.lower()
        destinations = " and ".join(itinerary.destination_names())
        if _contains(lowered, "get around", "transport"):
            return ChatResponse(
                response=(
                    f"For getting around {destinations}, public transportation is usually "
                    "efficient and cost-effective. Consider a day pass or travel card for "
                    "convenience and savings."
                ),
                suggestions=[
                    "What should I pack?",
                    "Tell me about local customs",
                    "What's the weather like?",
                    "Any safety tips?",
                ],
            )
        if _contains(lowered, "pack", "bring"):
            return ChatResponse(
                response=(
                    f"For your {len(itinerary.days)}-day trip to {destinations}, pack comfortable "
                    "walking shoes, weather-appropriate clothing, a portable charger and a travel "
                    "adapter. A small daypack is handy for daily excursions."
                ),
                suggestions=[
                    "What's the best way to get around?",
                    "Tell me about local customs",
                    "What's the weather like?",
                    "Any dining recommendations?",
                ],
            )
        if _contains(lowered, "weather", "climate"):
            return ChatResponse(
                response=(
                    "Check the forecast closer to your departure date and pack layers. Your "
                    "itinerary mixes indoor and outdoor activities, so minor weather changes "
                    "won't spoil the plan."
                ),
                suggestions=[
                    "What should I pack?",
                    "How do I get around?",
                    "Tell me about local customs",
                    "Any safety tips?",
                ],
            )
        if _contains(lowered, "custom", "culture", "etiquette"):
            return ChatResponse(
                response=(
                    f"Understanding local customs will enhance your time in {destinations}. Be "
                    "respectful at religious sites, learn a few basic phrases, and watch how "
                    "locals behave in different situations."
                ),
                suggestions=[
                    "What should I pack?",
                    "How do I get around?",
                    "What's the weather like?",
                    "Any dining recommendations?",
                ],
            )
        if _contains(lowered, "cost", "budget", "money"):
            categories = ", ".join(itinerary.budget.breakdown) or "your planned expenses"
            return ChatResponse(
                response=(
                    f"Your current itinerary has a total estimated cost of "
                    f"{itinerary.budget.total or 'an unknown amount'} with a daily average of "
                    f"{itinerary.budget.daily_average or 'an unknown amount'}. This includes "
                    f"{categories}. Let me know if you'd like ways to save money or upgrade."
                ),
                suggestions=[
                    "Help me save money",
                    "What payment methods should I use?",
                    "Are tips expected?",
                    "What about emergency funds?",
                ],
            )
        return ChatResponse(
            response=(
                f"I'd be happy to help answer your question about your {destinations} trip! "
                "Could you be more specific about what you'd like to know?"
            ),
            suggestions=[
                "What's the best way to get around?",
                "What should I pack?",
                "Tell me about local customs",
                "What's the weather like?",
            ],
        )

    def provide_suggestions(self, message: str, itinerary: Itinerary) -> ChatResponse:
        lowered = message.lower()
        destinations = " and ".join(itinerary.destination_names())
        if _contains(lowered, "food", "dining", "restaurant"):
            bullets = [
                "Try local street food markets for authentic, budget-friendly flavors",
                "Book a food tour to discover hidden culinary gems",
                "Visit family-run restaurants for traditional dishes",
            ]
            header = f"Here are some great dining suggestions for {destinations}:"
            follow_ups = [
                "Show me unique local experiences",
                "Recommend photo-worthy spots",
                "Find budget-friendly alternatives",
                "Suggest cultural activities",
            ]
        elif _contains(lowered, "photo", "instagram", "scenic"):
            bullets = [
                "Golden hour shots at viewpoints and landmarks",
                "Local markets with colorful displays",
                "Historic neighborhoods and traditional architecture",
            ]
            header = f"Perfect photo opportunities in {destinations}:"
            follow_ups = [
                "Suggest food and dining options",
                "Show me unique local experiences",
                "Find budget-friendly alternatives",
                "Recommend cultural activities",
            ]
        elif _contains(lowered, "unique", "local", "authentic"):
            bullets = [
                "Join local workshops or classes such as cooking or crafts",
                "Visit neighborhood markets and chat with vendors",
                "Take walking tours led by local residents",
            ]
            header = f"Unique local experiences in {destinations}:"
            follow_ups = [
                "Suggest food and dining options",
                "Recommend photo-worthy spots",
                "Find budget-friendly alternatives",
                "Ask about local customs",
            ]
        else:
            bullets = [
                "Cultural experiences: museums, temples, historic sites",
                "Food adventures: local markets, cooking classes, food tours",
                "Scenic spots: viewpoints, parks, photo opportunities",
            ]
            header = f"I'd love to give you personalized suggestions for your {destinations} trip!"
            follow_ups = [
                "Show me unique local experiences",
                "Suggest food and dining options",
                "Recommend photo-worthy spots",
                "Find budget-friendly alternatives",
            ]
        body = "\n".join(f"• {line}" for line in bullets)
        return ChatResponse(response=f"{header}\n\n{body}", suggestions=follow_ups)

    def troubleshoot(self, message: str, source: ItinerarySchema) -> ChatResponse:
        lowered = message.lower()
        destinations = " and ".join(source.to_domain().destination_names())
        if _contains(lowered, "expensive", "budget", "cost", "save money"):
            analysis = IntentAnalysis(
                intent=Intent.modify_itinerary, action=BUDGET_MODIFICATION, confidence=0.9
            )
            return self.modify_itinerary("help me save money", source, analysis)
        if _contains(lowered, "busy", "packed", "rushed"):
            return ChatResponse(
                response=(
                    f"Your {destinations} itinerary does seem quite packed! Reduce activities to "
                    "3-4 per day, add breaks between major activities and group nearby "
                    "attractions together. Would you like me to make it less busy?"
                ),
                suggestions=[
                    "Make my itinerary less busy",
                    "Add more rest time",
                    "Group activities by location",
                    "Show me which days are too packed",
                ],
            )
        if _contains(lowered, "transport", "timing", "schedule"):
            return ChatResponse(
                response=(
                    f"Transportation timing in {destinations} can be tricky. Add 30-60 minutes "
                    "of buffer between activities, plan around peak hours and group activities "
                    "by neighborhood."
                ),
                suggestions=[
                    "Reorganize my daily schedule",
                    "Add buffer time between activities",
                    "Group activities by location",
                    "Show me transport options",
                ],
            )
        return ChatResponse(
            response=(
                f"I'm here to help solve any issues with your {destinations} trip! I can help "
                "with budget concerns, overpacked schedules, transportation timing and "
                "weather backup plans. What specific issue would you like help with?"
            ),
            suggestions=[
                "My itinerary is too expensive",
                "Days are too packed with activities",
                "Transportation timing doesn't work",
                "I need backup plans for bad weather",
            ],
        )

    def general_chat(self, message: str, itinerary: Itinerary) -> ChatResponse:
        lowered = message.lower()
        destinations = " and ".join(itinerary.destination_names())
        words = set(lowered.replace("!", " ").replace(",", " ").split())
        if words & {"hello", "hi", "hey"}:
            return ChatResponse(
                response=(
                    f"Hello! I'm your travel assistant for your {destinations} trip. I can modify "
                    "your itinerary, answer questions, provide suggestions, or solve planning "
                    "issues. What would you like to work on?"
                ),
                suggestions=[
                    "Make my itinerary less busy",
                    "Add more cultural activities",
                    "Help me save money",
                    "What should I pack?",
                ],
            )
        if "thank" in lowered:
            return ChatResponse(
                response=(
                    f"You're very welcome! I'm here to help make your {destinations} trip "
                    "amazing. Is there anything else you'd like to adjust?"
                ),
                suggestions=list(GENERAL_SUGGESTIONS),
            )
        return ChatResponse(
            response=(
                f"I'm here to help with your {destinations} trip! I can modify your itinerary, "
                "answer questions, provide suggestions and solve problems. "
                "What would you like to work on?"
            ),
            suggestions=list(GENERAL_SUGGESTIONS),
        )
