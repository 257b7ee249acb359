"""
Deterministic keyword classifier for single messages.

Negative phrases are matched first and their text is blanked out before the
positive scan, so "not interested" never also counts as "interested". Within
each dictionary longer phrases win ("maybe later" before "later").
"""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from engagement.constants.engagement import QualificationCategory
from engagement.schemas.qualification import MessageAnalysis

BASE_SCORE = 50
POSITIVE_STEP = 15
NEGATIVE_STEP = 20
MIN_SCORE = 0
MAX_SCORE = 100

INTERESTED_KEYWORDS: Tuple[str, ...] = (
    "interested",
    "yes",
    "tell me more",
    "how much",
    "price",
    "register",
    "sign up",
    "book",
    "schedule",
    "appointment",
    "buy",
    "purchase",
    "order",
    "want",
    "need",
    "looking for",
    "details",
    "more information",
    "brochure",
    "catalog",
    "demo",
    "trial",
    "subscribe",
    "join",
    "apply",
    "confirm",
    "proceed",
    "next steps",
)

NOT_INTERESTED_KEYWORDS: Tuple[str, ...] = (
    "not interested",
    "no thanks",
    "no thank you",
    "stop",
    "unsubscribe",
    "remove",
    "don't contact",
    "dont contact",
    "spam",
    "wrong number",
    "busy",
    "later",
    "not now",
    "maybe later",
    "not looking",
    "already have",
    "not for me",
)


def _compile(keywords: Sequence[str]) -> List[Tuple[str, re.Pattern[str]]]:
    ordered = sorted(keywords, key=len, reverse=True)
    return [
        (keyword, re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)"))
        for keyword in ordered
    ]


_POSITIVE_PATTERNS = _compile(INTERESTED_KEYWORDS)
_NEGATIVE_PATTERNS = _compile(NOT_INTERESTED_KEYWORDS)


def _scan(
    text: str,
    patterns: List[Tuple[str, re.Pattern[str]]],
    dictionary: Sequence[str],
) -> Tuple[List[str], str]:
    """Return matched keywords (dictionary order) and the text with matches blanked."""
    found = set()
    for keyword, pattern in patterns:
        if pattern.search(text):
            found.add(keyword)
            text = pattern.sub(lambda m: " " * len(m.group(0)), text)
    return [kw for kw in dictionary if kw in found], text


def analyze_message(text: str | None) -> MessageAnalysis:
    """Classify one message into a category, a 0-100 score and the matched keywords."""
    if not text:
        return MessageAnalysis(
            category=QualificationCategory.PENDING, score=BASE_SCORE, keywords=[]
        )

    lowered = text.lower()
    negatives, remaining = _scan(lowered, _NEGATIVE_PATTERNS, NOT_INTERESTED_KEYWORDS)
    positives, _ = _scan(remaining, _POSITIVE_PATTERNS, INTERESTED_KEYWORDS)

    if negatives:
        score = max(MIN_SCORE, BASE_SCORE - NEGATIVE_STEP * len(negatives))
        category = QualificationCategory.NOT_INTERESTED
    elif positives:
        score = min(MAX_SCORE, BASE_SCORE + POSITIVE_STEP * len(positives))
        category = QualificationCategory.INTERESTED
    else:
        score = BASE_SCORE
        category = QualificationCategory.PENDING

    return MessageAnalysis(
        category=category, score=score, keywords=positives + negatives
    )
