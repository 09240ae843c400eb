from fastapi import HTTPException
from starlette.requests import Request

from app.llm.client import LLMClient


def get_llm_client(request: Request) -> LLMClient:
    client = getattr(request.app.state, "llm_client", None)
    if client is None:
        raise HTTPException(status_code=500, detail="Text generation client not initialized")
    return client
