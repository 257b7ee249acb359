"""Tests for AgentAssignmentService."""

from datetime import datetime, timedelta, timezone

import pytest

from engagement.constants.engagement import ConversationRole
from engagement.exceptions import ValidationError
from engagement.models.agent_assignment import AgentAssignment
from engagement.services.agent_assignment_service import AgentAssignmentService


def test_assign_creates_active_assignment(db):
    """The first assignment is active with an empty history."""
    svc = AgentAssignmentService(db)
    assignment = svc.assign("c-1", "+1 (415) 555-0100", "agent-1", "Ava")

    assert assignment.id is not None
    assert assignment.phone == "14155550100"
    assert assignment.is_active is True
    assert assignment.conversation_history == []
    assert svc.get_agent_for_contact("4155550100").id == assignment.id


def test_assign_requires_phone(db):
    """An empty phone raises and nothing is stored."""
    with pytest.raises(ValidationError):
        AgentAssignmentService(db).assign("c-1", "", "agent-1")
    assert db.query(AgentAssignment).count() == 0


def test_reassign_updates_in_place(db, setup_assignment):
    """Reassigning keeps the row and its history."""
    svc = AgentAssignmentService(db)
    updated = svc.assign("", "4155550100", "agent-2", "Ben")

    assert updated.id == setup_assignment.id
    assert updated.agent_id == "agent-2"
    assert updated.agent_name == "Ben"
    assert updated.contact_id == setup_assignment.contact_id
    assert db.query(AgentAssignment).count() == 1


def test_remove_deactivates_and_keeps_history(db, setup_assignment):
    """Removal only clears the active flag."""
    svc = AgentAssignmentService(db)
    svc.add_message_to_history("14155550100", ConversationRole.USER, "hi")

    assert svc.remove_agent_from_contact("+1 415 555 0100") is True
    assert svc.get_agent_for_contact("14155550100") is None
    assert svc.get_conversation_history("14155550100") == [
        {"role": "user", "content": "hi"}
    ]
    assert svc.remove_agent_from_contact("14155550100") is False


def test_assign_reactivates_deactivated_assignment(db, setup_assignment):
    """Assigning again reactivates the old row."""
    svc = AgentAssignmentService(db)
    svc.remove_agent_from_contact("14155550100")

    reactivated = svc.assign("", "14155550100", "agent-3")
    assert reactivated.id == setup_assignment.id
    assert reactivated.is_active is True


def test_add_message_without_assignment_returns_false(db):
    """History is never appended without an assignment."""
    svc = AgentAssignmentService(db)
    assert svc.add_message_to_history("14155550100", ConversationRole.USER, "hi") is False
    assert db.query(AgentAssignment).count() == 0


def test_history_keeps_twenty_most_recent_in_order(db, setup_assignment):
    """Only the latest twenty turns are kept."""
    svc = AgentAssignmentService(db)
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for i in range(25):
        role = ConversationRole.USER if i % 2 == 0 else ConversationRole.ASSISTANT
        assert svc.add_message_to_history(
            "14155550100", role, f"message {i}", start + timedelta(minutes=i)
        )

    history = svc.get_conversation_history("14155550100")
    assert len(history) == 20
    assert [h["content"] for h in history] == [f"message {i}" for i in range(5, 25)]

    entries = svc.get_history_entries("14155550100")
    assert entries[0].timestamp == start + timedelta(minutes=5)
    assert entries[-1].role == ConversationRole.USER


def test_history_for_unknown_phone_is_empty(db):
    """An unknown phone has no history."""
    svc = AgentAssignmentService(db)
    assert svc.get_conversation_history("14155550100") == []
    assert svc.get_history_entries("") == []


def test_get_agent_matches_on_suffix(db, setup_assignment):
    """Lookups match on the last ten digits."""
    svc = AgentAssignmentService(db)
    assert svc.get_agent_for_contact("001-415-555-0100").id == setup_assignment.id
    assert svc.get_agent_for_contact("4155550101") is None


def test_get_all_contact_agents(db, setup_assignment):
    """Every assignment is listed."""
    svc = AgentAssignmentService(db)
    svc.assign("c-2", "442071234567", "agent-9")
    svc.remove_agent_from_contact("442071234567")

    phones = {a.phone for a in svc.get_all_contact_agents()}
    assert phones == {"14155550100", "442071234567"}


def test_concurrent_history_appends_are_kept(db, other_db, setup_assignment):
    """Appends from two sessions both land in the history."""
    other = AgentAssignmentService(other_db)
    assert other.get_assignment("14155550100").conversation_history == []

    AgentAssignmentService(db).add_message_to_history(
        "14155550100", ConversationRole.USER, "hi"
    )
    other.add_message_to_history("14155550100", ConversationRole.ASSISTANT, "hello")

    history = other.get_conversation_history("14155550100")
    assert [h["content"] for h in history] == ["hi", "hello"]
