"""OpenAI chat-completion client used by the breakdown and summary services."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import openai

from taskbreakdown.core.config import Settings, settings as default_settings
from taskbreakdown.services.errors import LLMConfigurationError, UpstreamModelError

logger = logging.getLogger(__name__)

BREAKDOWN_FUNCTION_NAME = "create_task_breakdown"
BREAKDOWN_FUNCTION_PARAMETERS: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "breakdown": {
            "type": "array",
            "description": "One entry per planning period, in chronological order.",
            "items": {
                "type": "object",
                "properties": {
                    "unit": {"type": "string", "description": 'Period label, e.g. "Day 1 (2 hours focus)".'},
                    "tasks": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Concrete tasks to complete in this period.",
                    },
                },
                "required": ["unit", "tasks"],
            },
        }
    },
    "required": ["breakdown"],
}


class OpenAIChatClient:
    """Thin wrapper around ``chat.completions.create`` returning plain text.

    In ``function_call`` mode the model is forced to call
    ``create_task_breakdown`` and the call arguments are returned; in
    ``json_object`` mode the JSON completion content is returned. Callers treat
    both the same way.
    """

    def __init__(self, config: Settings | None = None, client: Optional[openai.OpenAI] = None) -> None:
        self._config = config or default_settings
        self._client = client

    def _get_client(self) -> openai.OpenAI:
        if self._client is None:
            if not self._config.openai_api_key:
                raise LLMConfigurationError("OPENAI_API_KEY is not configured")
            self._client = openai.OpenAI(api_key=self._config.openai_api_key)
        return self._client

    def complete(self, system_prompt: str, user_prompt: str, *, structured: bool = True) -> str:
        client = self._get_client()
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        kwargs: Dict[str, Any] = {
            "model": self._config.openai_model,
            "messages": messages,
            "temperature": self._config.llm_temperature,
        }
        if structured and self._config.llm_response_mode == "function_call":
            kwargs["tools"] = [
                {
                    "type": "function",
                    "function": {
                        "name": BREAKDOWN_FUNCTION_NAME,
                        "description": "Return the task breakdown for the user's goal.",
                        "parameters": BREAKDOWN_FUNCTION_PARAMETERS,
                    },
                }
            ]
            kwargs["tool_choice"] = {"type": "function", "function": {"name": BREAKDOWN_FUNCTION_NAME}}
        elif structured:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            completion = client.chat.completions.create(**kwargs)
        except openai.OpenAIError as exc:
            logger.warning("Model call failed (%s): %s", type(exc).__name__, exc)
            raise UpstreamModelError(f"Language model request failed: {exc}") from exc

        return extract_completion_text(completion)


def extract_completion_text(completion: Any) -> str:
    """Return tool-call arguments, legacy function-call arguments, or content."""
    choices = getattr(completion, "choices", None) or []
    if not choices:
        raise UpstreamModelError("Language model returned no choices")
    message = choices[0].message

    tool_calls = getattr(message, "tool_calls", None) or []
    for call in tool_calls:
        function = getattr(call, "function", None)
        if function is not None and function.arguments:
            return function.arguments

    function_call = getattr(message, "function_call", None)
    if function_call is not None and function_call.arguments:
        return function_call.arguments

    return message.content or ""
