"""Tests for contact analytics router."""

from engagement.constants.engagement import ConversationRole, InterestLevel
from engagement.services.agent_assignment_service import AgentAssignmentService


def test_analyze_contact(client, stub_runner):
    """Analysis stores the AI assessment and message counts."""
    payload = {
        "contactId": "c-1",
        "contactName": "Ann",
        "messages": [
            {
                "direction": "inbound",
                "content": "I want details",
                "timestamp": "2026-10-18T10:00:00Z",
            },
            {
                "direction": "outbound",
                "content": "Sure, here they are",
                "timestamp": "2026-10-18T10:30:00Z",
            },
        ],
    }
    r = client.post("/contact-analytics/analyze/+14155550100", json=payload)
    assert r.status_code == 200
    data = r.json()
    assert data["phone"] == "14155550100"
    assert data["contactName"] == "Ann"
    assert data["interestLevel"] == "interested"
    assert data["interestScore"] == 80
    assert data["analysisMethod"] == "ai"
    assert data["totalMessages"] == 2
    assert data["inboundMessages"] == 1
    assert data["conversationDuration"] == 30
    assert len(stub_runner.calls) == 1


def test_analyze_empty_conversation(client, stub_runner):
    """An empty conversation stays pending without calling the provider."""
    r = client.post("/contact-analytics/analyze/14155550100", json={"messages": []})
    assert r.status_code == 200
    data = r.json()
    assert data["interestLevel"] == "pending"
    assert data["interestReason"] == "No conversation history available"
    assert stub_runner.calls == []


def test_analyze_invalid_phone(client):
    """A phone without digits is rejected with 400."""
    r = client.post("/contact-analytics/analyze/unknown", json={"messages": []})
    assert r.status_code == 400


def test_get_report(client, make_contact_analytics):
    """A report is found by any phone format with the same digits."""
    record = make_contact_analytics(phone="14155550100")
    r = client.get("/contact-analytics/reports/4155550100")
    assert r.status_code == 200
    assert r.json()["id"] == str(record.id)


def test_get_report_not_found(client):
    """An unknown phone returns 404."""
    r = client.get("/contact-analytics/reports/14155550100")
    assert r.status_code == 404


def test_list_reports(client, make_contact_analytics):
    """Reports filter by interest level; "all" disables the filter."""
    make_contact_analytics(interest_level=InterestLevel.NEUTRAL)
    make_contact_analytics(interest_level=InterestLevel.INTERESTED)

    r = client.get("/contact-analytics/reports", params={"interestLevel": "neutral"})
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 1
    assert data["reports"][0]["interestLevel"] == "neutral"

    r = client.get("/contact-analytics/reports", params={"interestLevel": "all"})
    assert r.json()["total"] == 2


def test_summary(client, make_contact_analytics):
    """The summary counts levels and averages scores."""
    make_contact_analytics(interest_level=InterestLevel.INTERESTED, interest_score=90)

    r = client.get("/contact-analytics/summary")
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 1
    assert data["averageScore"] == 90
    assert data["byInterestLevel"][1] == {
        "level": "interested",
        "count": 1,
        "percentage": 100,
    }


def test_analyze_all(client, db, stub_runner):
    """Re-analyzes every stored conversation and lists the outcome per contact."""
    svc = AgentAssignmentService(db)
    svc.assign("c-1", "14155550100", "agent-1", "Ava")
    svc.add_message_to_history("14155550100", ConversationRole.USER, "send details")
    svc.assign("c-2", "14155550101", "agent-1", "Ava")

    r = client.post("/contact-analytics/analyze-all")
    assert r.status_code == 200
    data = r.json()
    assert data["analyzed"] == 1
    assert data["results"] == [
        {
            "phone": "14155550100",
            "name": None,
            "interestLevel": "interested",
            "interestScore": 80,
        }
    ]
    assert len(stub_runner.calls) == 1
