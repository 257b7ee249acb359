"""Fixtures for qualification model."""

from datetime import datetime, timezone

import pytest

from engagement.constants.engagement import QualificationCategory, QualificationSource
from engagement.models.qualification import Qualification


@pytest.fixture(scope="function")
def make_qualification(db, faker):
    """Factory creating qualifications with sensible random defaults."""

    def _make(**overrides) -> Qualification:
        now = datetime.now(timezone.utc)
        phone = overrides.pop("phone", faker.numerify("1415#######"))
        data = {
            "contact_id": faker.uuid4(),
            "phone": phone,
            "name": faker.name(),
            "source": QualificationSource.AI_CHAT,
            "category": QualificationCategory.PENDING,
            "score": 50,
            "total_messages": 1,
            "keywords": [],
            "first_contact_at": now,
            "last_message_at": now,
            "notes": "",
        }
        data.update(overrides)
        qualification = Qualification(**data)
        db.add(qualification)
        db.commit()
        db.refresh(qualification)
        return qualification

    return _make


@pytest.fixture(scope="function")
def setup_qualification(make_qualification):
    """An interested qualification from a campaign."""
    return make_qualification(
        category=QualificationCategory.INTERESTED,
        score=65,
        keywords=["how much"],
        source=QualificationSource.CAMPAIGN,
        campaign_id="cmp-1",
        campaign_name="Spring Launch",
    )
