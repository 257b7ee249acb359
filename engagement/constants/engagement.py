"""Enumerations shared by records, schemas and reports."""

from enum import StrEnum


class QualificationSource(StrEnum):
    """Channel through which a contact first engaged."""

    AI_CHAT = "ai_chat"
    CAMPAIGN = "campaign"
    AD = "ad"
    LEAD_FORM = "lead_form"
    MANUAL = "manual"


class QualificationCategory(StrEnum):
    """Keyword-derived interest category."""

    INTERESTED = "interested"
    NOT_INTERESTED = "not_interested"
    PENDING = "pending"


class InterestLevel(StrEnum):
    """LLM-derived interest level. PENDING means not analyzed yet."""

    HIGHLY_INTERESTED = "highly_interested"
    INTERESTED = "interested"
    NEUTRAL = "neutral"
    NOT_INTERESTED = "not_interested"
    PENDING = "pending"


# Levels the model is allowed to answer with.
ANALYZABLE_INTEREST_LEVELS = (
    InterestLevel.HIGHLY_INTERESTED,
    InterestLevel.INTERESTED,
    InterestLevel.NEUTRAL,
    InterestLevel.NOT_INTERESTED,
)


class AnalysisMethod(StrEnum):
    """Provenance of a ContactAnalytics assessment."""

    AI = "ai"
    KEYWORD = "keyword"
    NONE = "none"


class MessageDirection(StrEnum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class ConversationRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


CONVERSATION_HISTORY_LIMIT = 20
