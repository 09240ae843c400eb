import logging
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """Every configured text-generation backend failed."""


@dataclass
class GenerationOptions:
    temperature: float = 0.7
    max_tokens: int = 1000


class TextGenerationBackend(Protocol):
    name: str

    def generate_text(
        self, prompt: str, system_prompt: str, options: GenerationOptions
    ) -> str:
        ...


class LLMClient:
    """
    Pluggable text-generation client. The primary backend is tried first;
    when it raises, the optional fallback backend gets the same request.
    Content may come back empty; callers are expected to cope with that.
    """

    def __init__(
        self,
        backend: TextGenerationBackend,
        fallback: Optional[TextGenerationBackend] = None,
    ):
        self.backend = backend
        self.fallback = fallback

    def generate_text(
        self,
        prompt: str,
        system_prompt: str = "",
        options: Optional[GenerationOptions] = None,
    ) -> str:
        options = options or GenerationOptions()
        try:
            return self.backend.generate_text(prompt, system_prompt, options) or ""
        except Exception as exc:  # noqa: BLE001
            logger.error("Generation via %s failed: %s", self.backend.name, exc)
            if self.fallback is None:
                raise GenerationError(str(exc)) from exc

        logger.warning("Falling back to %s", self.fallback.name)
        try:
            return self.fallback.generate_text(prompt, system_prompt, options) or ""
        except Exception as exc:  # noqa: BLE001
            logger.error("Fallback generation via %s failed: %s", self.fallback.name, exc)
            raise GenerationError(str(exc)) from exc


def build_llm_client(settings) -> LLMClient:
    from app.llm.backends.ollama_backend import OllamaBackend
    from app.llm.backends.openai_backend import OpenAICompatibleBackend
    from app.llm.mock_backend import MockTextBackend

    provider = settings.llm_provider.lower()
    timeout = settings.request_timeout_seconds
    if provider == "groq":
        primary = OpenAICompatibleBackend(
            base_url=settings.groq_base_url,
            model=settings.groq_model,
            api_key=settings.groq_api_key,
            timeout=timeout,
            name="groq",
        )
    elif provider == "ollama":
        primary = OllamaBackend(
            host=settings.ollama_host, model=settings.ollama_model, timeout=timeout
        )
    else:
        return LLMClient(backend=MockTextBackend())

    fallback = None
    if settings.fallback_enabled and settings.fallback_base_url:
        fallback = OpenAICompatibleBackend(
            base_url=settings.fallback_base_url,
            model=settings.groq_model,
            api_key=None,
            timeout=timeout,
            name="fallback",
        )
    return LLMClient(backend=primary, fallback=fallback)
