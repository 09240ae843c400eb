from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import routes_assistant, routes_discovery, routes_health, routes_itinerary
from app.core.config import settings
from app.core.logging import configure_logging
from app.llm.client import LLMClient, build_llm_client


def create_app(llm_client: LLMClient | None = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.app_name, version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(routes_assistant.router, prefix="/assistant", tags=["assistant"])
    app.include_router(routes_itinerary.router, prefix="/itinerary", tags=["itinerary"])
    app.include_router(routes_discovery.router, prefix="/discover", tags=["discovery"])

    # Shared by request dependencies; holds no per-request state
    app.state.llm_client = llm_client or build_llm_client(settings)
    app.state.settings = settings
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
