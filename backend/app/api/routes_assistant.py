from fastapi import APIRouter, Depends

from app.api import get_llm_client
from app.llm.client import LLMClient
from app.models.schemas import ChatRequest, ChatResponse
from app.services.assistant_service import AssistantService

router = APIRouter()


def get_assistant_service(
    llm_client: LLMClient = Depends(get_llm_client),
) -> AssistantService:
    return AssistantService(llm_client=llm_client)


@router.post("/chat", response_model=ChatResponse)
def chat(
    request: ChatRequest,
    service: AssistantService = Depends(get_assistant_service),
) -> ChatResponse:
    return service.chat(message=request.message, itinerary=request.itinerary)
