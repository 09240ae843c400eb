from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import requests

from app.llm.client import GenerationOptions, TextGenerationBackend

logger = logging.getLogger(__name__)


@dataclass
class OllamaBackend(TextGenerationBackend):
    """
    Text generation through Ollama's chat API.
    Returns the assistant message content as-is; parsing is the caller's job.
    """

    host: str = "http://localhost:11434"
    model: str = "llama3"
    timeout: float = 30.0
    name: str = "ollama"

    def _build_messages(self, prompt: str, system_prompt: str) -> List[dict]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def generate_text(
        self, prompt: str, system_prompt: str, options: GenerationOptions
    ) -> str:
        payload = {
            "model": self.model,
            "messages": self._build_messages(prompt, system_prompt),
            "stream": False,
            "options": {
                "temperature": options.temperature,
                "num_predict": options.max_tokens,
            },
        }
        try:
            resp = requests.post(
                f"{self.host.rstrip('/')}/api/chat", json=payload, timeout=self.timeout
            )
            resp.raise_for_status()
        except Exception as exc:  # noqa: BLE001
            logger.error("Ollama request failed: %s", exc)
            raise

        content = resp.json().get("message", {}).get("content", "")
        logger.debug("Ollama returned %d chars", len(content or ""))
        return content or ""
