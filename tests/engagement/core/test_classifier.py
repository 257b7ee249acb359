"""Tests for the keyword message classifier."""

import pytest

from engagement.constants.engagement import QualificationCategory
from engagement.core.classifier import (
    INTERESTED_KEYWORDS,
    NOT_INTERESTED_KEYWORDS,
    analyze_message,
)

FILLER_WORDS = ("hello", "team", "thanks", "question", "about", "product", "today")


def test_price_question_is_interested():
    """A price question matches "how much" and scores one positive step."""
    result = analyze_message("How much does it cost?")
    assert result.category == QualificationCategory.INTERESTED
    assert result.score == 65
    assert result.keywords == ["how much"]


def test_negative_phrases_lower_the_score_per_keyword():
    """Each negative phrase takes 20 points off the base score."""
    result = analyze_message("actually not interested, stop")
    assert result.category == QualificationCategory.NOT_INTERESTED
    assert result.score == 10
    assert result.keywords == ["not interested", "stop"]


def test_not_interested_does_not_also_count_as_interested():
    """"Not interested" is only counted as a negative phrase."""
    result = analyze_message("Not interested")
    assert result.category == QualificationCategory.NOT_INTERESTED
    assert result.score == 30
    assert result.keywords == ["not interested"]


def test_negative_wins_over_positive_in_same_message():
    """Positive keywords are reported but a negative one decides the category."""
    result = analyze_message("Yes I'm interested but maybe later")
    assert result.category == QualificationCategory.NOT_INTERESTED
    assert result.score == 30
    assert "maybe later" in result.keywords
    assert "later" not in result.keywords
    assert result.keywords[:2] == ["interested", "yes"]


def test_score_is_capped_at_100():
    """Many positive keywords stop at 100."""
    result = analyze_message("Yes, I want to book an appointment and buy")
    assert result.category == QualificationCategory.INTERESTED
    assert result.score == 100


def test_score_is_floored_at_0():
    """Many negative keywords stop at 0."""
    result = analyze_message("stop, spam, wrong number, unsubscribe, not interested")
    assert result.category == QualificationCategory.NOT_INTERESTED
    assert result.score == 0


def test_matching_is_case_insensitive():
    """Upper-case text still matches."""
    assert analyze_message("TELL ME MORE").keywords == ["tell me more"]


def test_keywords_match_whole_words_only():
    """Keywords inside longer words do not match."""
    result = analyze_message("yesterday I was ordering lunch")
    assert result.category == QualificationCategory.PENDING
    assert result.keywords == []


@pytest.mark.parametrize("text", [None, "", "hello there"])
def test_neutral_messages_are_pending(text):
    """Empty or keyword-free messages stay pending at the base score."""
    result = analyze_message(text)
    assert result.category == QualificationCategory.PENDING
    assert result.score == 50
    assert result.keywords == []


def _sample_message(rng, positives, negatives):
    words = [rng.choice(FILLER_WORDS) for _ in range(rng.randint(0, 6))]
    words += [rng.choice(INTERESTED_KEYWORDS) for _ in range(positives)]
    words += [rng.choice(NOT_INTERESTED_KEYWORDS) for _ in range(negatives)]
    rng.shuffle(words)
    return " ".join(words)


def test_score_always_in_range(faker):
    """Random keyword mixes always score within 0..100 and negatives always win."""
    faker.seed_instance(2026)
    rng = faker.random
    for _ in range(500):
        positives = rng.randint(0, 8)
        negatives = rng.randint(0, 6)
        result = analyze_message(_sample_message(rng, positives, negatives))

        assert 0 <= result.score <= 100
        if negatives:
            assert result.category == QualificationCategory.NOT_INTERESTED
            assert result.score <= 30
        elif positives:
            assert result.category == QualificationCategory.INTERESTED
            assert result.score >= 65
        else:
            assert result.category == QualificationCategory.PENDING
            assert result.score == 50


def test_free_text_score_in_range(faker):
    """Arbitrary sentences never push the score out of range."""
    for _ in range(50):
        result = analyze_message(faker.sentence(nb_words=12))
        assert 0 <= result.score <= 100
