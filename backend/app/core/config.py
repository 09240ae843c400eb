from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False)

    app_name: str = "Travel Itinerary Assistant"
    environment: str = "local"
    log_level: str = "INFO"

    llm_provider: str = "mock"
    groq_api_key: Optional[str] = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    fallback_enabled: bool = True
    fallback_base_url: str = "https://ai.hackclub.com"
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "llama3"
    request_timeout_seconds: float = Field(30.0, gt=0)

    modification_temperature: float = 0.3
    modification_max_tokens: int = 2048
    explanation_temperature: float = 0.7
    explanation_max_tokens: int = 300
    discovery_temperature: float = 0.7
    discovery_max_tokens: int = 3000
    insights_temperature: float = 0.3
    insights_max_tokens: int = 1500


@lru_cache()
def get_settings() -> Settings:
    load_dotenv(".env")
    return Settings()


settings = get_settings()
