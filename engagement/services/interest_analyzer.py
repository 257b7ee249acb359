"""
Semantic interest analysis of a whole conversation.

The LLM is asked for a JSON assessment. Any provider failure, timeout or
unusable answer is logged and replaced by a keyword heuristic over the
customer's messages, so analysis never fails its caller.
"""

from __future__ import annotations

import asyncio
import json
import re
from typing import Any, Iterable, List, Optional, Protocol, Union

from pydantic import ValidationError as PydanticValidationError

from engagement.config import get_settings
from engagement.constants.engagement import (
    ANALYZABLE_INTEREST_LEVELS,
    AnalysisMethod,
    InterestLevel,
)
from engagement.constants.interest_analysis_prompt import InterestAnalysisPrompt
from engagement.exceptions import ExternalServiceError, ParseError
from engagement.infra.logging_config import get_logger
from engagement.schemas.contact_analytics import ConversationMessage, InterestAssessment

logger = get_logger("interest_analyzer")

EMPTY_CONVERSATION_REASON = "No conversation history available"
FALLBACK_REASON = "Keyword-based analysis (AI analysis failed)"

FALLBACK_POSITIVE = re.compile(
    r"\b(?:interested|yes|sure|okay|want|need|details|price|payment)\b",
    re.IGNORECASE,
)
FALLBACK_NEGATIVE = re.compile(
    r"\b(?:no|not interested|later|busy|expensive|can't|don't)\b",
    re.IGNORECASE,
)
FALLBACK_POSITIVE_SCORE = 60
FALLBACK_NEGATIVE_SCORE = 30
FALLBACK_NEUTRAL_SCORE = 50
FALLBACK_POSITIVE_SIGNAL = "Shows interest in keywords"
FALLBACK_NEGATIVE_SIGNAL = "Shows disinterest in keywords"

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class ChatRunner(Protocol):
    async def complete(
        self, messages: List[dict[str, str]], temperature: Optional[float] = None
    ) -> str: ...


def coerce_messages(
    messages: Iterable[Union[ConversationMessage, dict[str, Any]]],
) -> List[ConversationMessage]:
    return [
        m if isinstance(m, ConversationMessage) else ConversationMessage.model_validate(m)
        for m in messages
    ]


def build_transcript(messages: List[ConversationMessage]) -> str:
    return "\n".join(
        f"{'Customer' if m.is_inbound else 'Agent'}: {m.content}" for m in messages
    )


def parse_assessment(raw: str) -> InterestAssessment:
    """Parse the model's answer. Raises ParseError when it is not a usable assessment."""
    text = _CODE_FENCE.sub("", (raw or "").strip()).strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"LLM response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError("LLM response is not a JSON object")

    level = data.get("interestLevel", data.get("interest_level"))
    if level not in (None, "") and level not in ANALYZABLE_INTEREST_LEVELS:
        raise ParseError(f"Unknown interest level: {level!r}")

    data.pop("analysisMethod", None)
    data.pop("analysis_method", None)
    try:
        assessment = InterestAssessment.model_validate(data)
    except (PydanticValidationError, TypeError) as exc:
        raise ParseError(f"LLM response has invalid fields: {exc}") from exc
    return assessment.model_copy(update={"analysis_method": AnalysisMethod.AI})


def keyword_fallback(messages: List[ConversationMessage]) -> InterestAssessment:
    """
    Heuristic assessment from the customer's own messages.

    A negative match decides the level, but any positive match keeps the
    score at the positive value.
    """
    customer_text = " ".join(m.content for m in messages if m.is_inbound)
    positive = bool(FALLBACK_POSITIVE.search(customer_text))
    negative = bool(FALLBACK_NEGATIVE.search(customer_text))

    if negative:
        level = InterestLevel.NOT_INTERESTED
    elif positive:
        level = InterestLevel.INTERESTED
    else:
        level = InterestLevel.NEUTRAL

    if positive:
        score = FALLBACK_POSITIVE_SCORE
    elif negative:
        score = FALLBACK_NEGATIVE_SCORE
    else:
        score = FALLBACK_NEUTRAL_SCORE

    return InterestAssessment(
        interest_level=level,
        interest_score=score,
        interest_reason=FALLBACK_REASON,
        positive_signals=[FALLBACK_POSITIVE_SIGNAL] if positive else [],
        negative_signals=[FALLBACK_NEGATIVE_SIGNAL] if negative else [],
        analysis_method=AnalysisMethod.KEYWORD,
    )


def empty_assessment() -> InterestAssessment:
    return InterestAssessment(
        interest_level=InterestLevel.PENDING,
        interest_score=0,
        interest_reason=EMPTY_CONVERSATION_REASON,
        analysis_method=AnalysisMethod.NONE,
    )


class InterestAnalyzer:
    def __init__(
        self,
        runner: Optional[ChatRunner] = None,
        timeout_seconds: Optional[float] = None,
        model_name: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self._runner = runner
        self.timeout_seconds = timeout_seconds or settings.llm_timeout_seconds
        self.model_name = model_name or settings.analysis_model
        self.temperature = (
            temperature if temperature is not None else settings.analysis_temperature
        )

    def _get_runner(self) -> ChatRunner:
        if self._runner is None:
            from engagement.workers.llm import build_llm_runner_from_env

            self._runner = build_llm_runner_from_env(model_name=self.model_name)
        return self._runner

    async def _request_assessment(self, transcript: str) -> InterestAssessment:
        messages = [
            {"role": "system", "content": InterestAnalysisPrompt.CONTENT.strip()},
            {"role": "user", "content": transcript},
        ]
        try:
            raw = await asyncio.wait_for(
                self._get_runner().complete(messages, temperature=self.temperature),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise ExternalServiceError(
                f"LLM call timed out after {self.timeout_seconds}s"
            ) from exc
        except Exception as exc:
            raise ExternalServiceError(f"LLM call failed: {exc}") from exc
        return parse_assessment(raw)

    async def analyze_contact_conversation(
        self,
        phone: str,
        messages: Iterable[Union[ConversationMessage, dict[str, Any]]],
        user_id: Optional[str] = None,
    ) -> InterestAssessment:
        """Assess a conversation. Never raises for provider or parse failures."""
        conversation = coerce_messages(messages)
        if not conversation:
            return empty_assessment()

        try:
            assessment = await self._request_assessment(build_transcript(conversation))
        except (ExternalServiceError, ParseError) as exc:
            logger.warning(
                "Interest analysis for %s fell back to keywords: %s", phone, exc
            )
            return keyword_fallback(conversation)

        logger.info(
            "Interest analysis for %s: %s (%s)",
            phone,
            assessment.interest_level,
            assessment.interest_score,
        )
        return assessment
