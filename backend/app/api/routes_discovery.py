from fastapi import APIRouter, Depends, HTTPException

from app.api import get_llm_client
from app.llm.client import LLMClient
from app.models.schemas import (
    DestinationSuggestionRequest,
    DestinationSuggestionResponse,
    InterestSuggestionRequest,
    InterestSuggestionResponse,
    LocalInsightsRequest,
    LocalInsightsSchema,
)
from app.services.discovery_service import DiscoveryService

router = APIRouter()


def get_discovery_service(
    llm_client: LLMClient = Depends(get_llm_client),
) -> DiscoveryService:
    return DiscoveryService(llm_client=llm_client)


@router.post("/destinations", response_model=DestinationSuggestionResponse)
def suggest_destinations(
    request: DestinationSuggestionRequest,
    service: DiscoveryService = Depends(get_discovery_service),
) -> DestinationSuggestionResponse:
    if not request.description.strip():
        raise HTTPException(status_code=400, detail="Description is required")
    return DestinationSuggestionResponse(
        locations=service.suggest_destinations(request.description)
    )


@router.post("/interests", response_model=InterestSuggestionResponse)
def suggest_interests(
    request: InterestSuggestionRequest,
    service: DiscoveryService = Depends(get_discovery_service),
) -> InterestSuggestionResponse:
    names = [d.name for d in request.destinations]
    return InterestSuggestionResponse(
        suggestions=service.suggest_interests(names, request.travel_style)
    )


@router.post("/insights", response_model=LocalInsightsSchema)
def local_insights(
    request: LocalInsightsRequest,
    service: DiscoveryService = Depends(get_discovery_service),
) -> LocalInsightsSchema:
    if not request.destination.strip():
        raise HTTPException(status_code=400, detail="Destination is required")
    return service.local_insights(
        request.destination,
        interests=request.interests,
        travel_style=request.travel_style,
        budget=request.budget,
        dates=request.dates,
        duration=request.duration,
    )
