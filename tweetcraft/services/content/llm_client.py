"""
Thin client for an OpenAI-compatible chat-completions endpoint
(DeepSeek by default).
"""
import json
import time
import logging
from typing import Dict, List, Optional

import requests

from tweetcraft.core.config import Settings, get_settings
from tweetcraft.services.logging.service import get_logging_service

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Raised when the completion endpoint is unreachable or returns garbage."""


class LLMNotConfigured(LLMError):
    """Raised when no API key is set."""


class LLMClient:

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.api_key = settings.deepseek_api_key
        self.base_url = settings.llm_base_url
        self.model = settings.llm_model
        self.timeout = settings.llm_timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
        json_mode: bool = False,
    ) -> str:
        """
        Send one chat-completions request and return the message text.

        Raises:
            LLMNotConfigured: no API key
            LLMError: transport failure, non-200 status or malformed body
        """
        if not self.api_key:
            raise LLMNotConfigured("DEEPSEEK_API_KEY is not set")

        url = f"{self.base_url}/chat/completions"
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        start = time.time()
        try:
            response = requests.post(
                url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            duration_ms = int((time.time() - start) * 1000)
            get_logging_service().log_outbound_request(
                method="POST", url=url, status_code=0, duration_ms=duration_ms,
                service_name="llm", response_body=str(e),
            )
            raise LLMError(f"LLM request failed: {e}") from e

        duration_ms = int((time.time() - start) * 1000)
        get_logging_service().log_outbound_request(
            method="POST", url=url, status_code=response.status_code,
            duration_ms=duration_ms, service_name="llm",
            response_body=response.text if response.status_code != 200 else None,
        )

        if response.status_code != 200:
            raise LLMError(f"LLM API error: {response.status_code}")

        try:
            result = response.json()
            return result["choices"][0]["message"]["content"].strip()
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise LLMError(f"Malformed LLM response: {e}") from e


def strip_code_fence(text: str) -> str:
    """Remove a ```json fence around a completion, if present."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
    return text.strip()


def parse_json_response(text: str) -> dict:
    """Parse a JSON completion. Raises LLMError on anything else."""
    try:
        return json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse LLM JSON response: %s", e)
        raise LLMError(f"LLM returned invalid JSON: {e}") from e
