from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from app.llm.client import GenerationOptions, TextGenerationBackend

logger = logging.getLogger(__name__)


@dataclass
class OpenAICompatibleBackend(TextGenerationBackend):
    """
    Backend for hosted services exposing an OpenAI-style
    ``/chat/completions`` endpoint (Groq, and the keyless fallback).
    """

    base_url: str
    model: str
    api_key: Optional[str] = None
    timeout: float = 30.0
    name: str = "openai-compatible"

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

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
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }
        try:
            resp = requests.post(
                f"{self.base_url.rstrip('/')}/chat/completions",
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except Exception as exc:  # noqa: BLE001
            logger.error("%s request failed: %s", self.name, exc)
            raise

        data = resp.json() if resp.content else {}
        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        return content or ""
