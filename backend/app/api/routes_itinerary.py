from fastapi import APIRouter

from app.llm.response_filter import extract_structured_payload
from app.models.schemas import (
    ApplyChangesRequest,
    ApplyChangesResponse,
    ExtractRequest,
    ExtractResponse,
)
from app.services.itinerary_editor import apply_changes

router = APIRouter()


@router.post("/changes", response_model=ApplyChangesResponse)
def apply_itinerary_changes(request: ApplyChangesRequest) -> ApplyChangesResponse:
    result = apply_changes(
        request.itinerary.to_domain(), [c.to_domain() for c in request.changes]
    )
    return ApplyChangesResponse(
        itinerary=request.itinerary.to_document(result.itinerary),
        applied_count=result.applied_count,
        failed=result.failed,
    )


@router.post("/extract", response_model=ExtractResponse)
def extract_payload(request: ExtractRequest) -> ExtractResponse:
    found = extract_structured_payload(request.text)
    if found is None:
        return ExtractResponse(found=False)
    return ExtractResponse(found=True, payload=found.value)
