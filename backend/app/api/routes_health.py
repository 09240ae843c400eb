from fastapi import APIRouter, Depends

from app.api import get_llm_client
from app.llm.client import LLMClient

router = APIRouter()


@router.get("/health")
def healthcheck(llm_client: LLMClient = Depends(get_llm_client)) -> dict:
    return {"status": "ok", "generator": llm_client.backend.name}
