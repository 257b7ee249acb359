from __future__ import annotations

from typing import Any, List, Optional

from pydantic_ai import Agent
from pydantic_ai.messages import (
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.litellm import LiteLLMProvider

from engagement.config import get_settings
from engagement.infra.logging_config import get_logger

logger = get_logger("llm")


def _history_to_message_list(history: List[dict[str, str]]) -> List[Any]:
    """Convert list of {role, content} to pydantic_ai ModelMessage list for message_history."""
    out: List[Any] = []
    for item in history:
        role = item.get("role", "user")
        content = (item.get("content") or "").strip()
        if not content:
            continue
        if role == "user":
            out.append(ModelRequest(parts=[UserPromptPart(content=content)]))
        elif role == "assistant":
            out.append(ModelResponse(parts=[TextPart(content=content)]))
        elif role == "system":
            out.append(ModelRequest(parts=[SystemPromptPart(content=content)]))
    return out


def _split_messages(
    messages: List[dict[str, str]],
) -> tuple[str, List[dict[str, str]]]:
    """Split an ordered message list into (prompt, history); the prompt is the last user turn."""
    history = list(messages)
    for index in range(len(history) - 1, -1, -1):
        if history[index].get("role") == "user":
            prompt = history.pop(index).get("content") or ""
            return prompt, history
    return "", history


def _message_list_with_system_prompt(history: List[dict[str, str]]) -> List[Any]:
    """Build message_history with system entries always first, then the conversation."""

    # https://github.com/pydantic/pydantic-ai/issues/4039
    # https://ai.pydantic.dev/agent/#system-prompts
    system = [m for m in history if m.get("role") == "system"]
    rest = [m for m in history if m.get("role") != "system"]
    return _history_to_message_list(system) + _history_to_message_list(rest)


class LLMRunner:
    """Chat completion over an OpenAI-compatible model behind LiteLLM."""

    def __init__(
        self,
        model_name: str,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> None:
        self.model_name = model_name
        self._api_key = api_key
        self._api_base = api_base
        self._temperature = temperature
        self._agent: Optional[Agent] = None

    def _get_agent(self) -> Agent:
        # Built on first use so provider misconfiguration fails the call, not startup.
        if self._agent is None:
            logger.info(f"Initializing LLM runner with model {self.model_name}")
            provider = LiteLLMProvider(api_key=self._api_key, api_base=self._api_base)
            model = OpenAIChatModel(self.model_name, provider=provider)
            self._agent = Agent(model)
        return self._agent

    async def complete(
        self,
        messages: List[dict[str, str]],
        temperature: Optional[float] = None,
    ) -> str:
        """Send ordered {role, content} messages and return the model's text answer."""
        prompt, history = _split_messages(messages)
        message_history = _message_list_with_system_prompt(history)
        temperature = temperature if temperature is not None else self._temperature
        model_settings = {"temperature": temperature} if temperature is not None else None
        result = await self._get_agent().run(
            prompt,
            message_history=message_history or None,
            model_settings=model_settings,
        )
        return str(result.output)


def build_llm_runner_from_env(model_name: Optional[str] = None) -> LLMRunner:
    settings = get_settings()
    model_name = model_name or settings.llm_model
    logger.info(
        "LLM runner config: model=%s, api_key=%s, api_base=%s",
        model_name,
        "set" if settings.litellm_api_key else "not set",
        settings.litellm_api_base or "(default)",
    )
    if not settings.litellm_api_key:
        logger.warning(
            "LITELLM_API_KEY is not set; set it to a valid OpenAI or LiteLLM API key to avoid 401 errors."
        )

    return LLMRunner(
        model_name=model_name,
        api_key=settings.litellm_api_key,
        api_base=settings.litellm_api_base,
    )
