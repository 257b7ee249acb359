"""Tests for qualifications router."""

from uuid import uuid4

from engagement.constants.engagement import QualificationCategory, QualificationSource


def test_list_qualifications(client, setup_qualification):
    """GET /qualifications returns a limit/offset page in camelCase."""
    r = client.get("/qualifications")
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 1
    item = data["items"][0]
    assert item["id"] == str(setup_qualification.id)
    assert item["campaignName"] == "Spring Launch"
    assert item["totalMessages"] == 1
    assert item["keywords"] == ["how much"]


def test_list_qualifications_by_source(client, make_qualification):
    """The source filter narrows the listing."""
    make_qualification(source=QualificationSource.AD)
    make_qualification(source=QualificationSource.MANUAL)

    r = client.get("/qualifications", params={"source": "ad", "limit": 10})
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 1
    assert data["items"][0]["source"] == "ad"


def test_get_qualification(client, setup_qualification):
    """A qualification is returned by id."""
    r = client.get(f"/qualifications/{setup_qualification.id}")
    assert r.status_code == 200
    assert r.json()["category"] == "interested"


def test_get_qualification_not_found(client):
    """An unknown id returns 404."""
    r = client.get(f"/qualifications/{uuid4()}")
    assert r.status_code == 404


def test_stats(client, make_qualification):
    """Stats count categories as percentages."""
    make_qualification(category=QualificationCategory.INTERESTED)
    make_qualification(category=QualificationCategory.NOT_INTERESTED)

    r = client.get("/qualifications/stats")
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 2
    assert data["interestedPercent"] == 50
    assert data["notInterestedPercent"] == 50


def test_report(client, setup_qualification):
    """The report groups by source, campaign and agent."""
    r = client.get("/qualifications/report")
    assert r.status_code == 200
    data = r.json()
    assert set(data["bySource"]) == {s.value for s in QualificationSource}
    assert data["byCampaign"]["cmp-1"]["campaignName"] == "Spring Launch"
    assert data["overall"]["total"] == 1


def test_update_category(client, setup_qualification):
    """A manual category update is stored with its notes."""
    r = client.put(
        f"/qualifications/{setup_qualification.id}/category",
        json={"category": "not_interested", "notes": "asked to be removed"},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["category"] == "not_interested"
    assert data["notes"] == "asked to be removed"


def test_update_category_rejects_unknown_value(client, setup_qualification):
    """An unknown category is a validation error."""
    r = client.put(
        f"/qualifications/{setup_qualification.id}/category",
        json={"category": "maybe"},
    )
    assert r.status_code == 422


def test_update_notes(client, setup_qualification):
    """Notes are replaced."""
    r = client.put(
        f"/qualifications/{setup_qualification.id}/notes", json={"notes": "VIP"}
    )
    assert r.status_code == 200
    assert r.json()["notes"] == "VIP"


def test_update_notes_not_found(client):
    """Updating notes of an unknown id returns 404."""
    r = client.put(f"/qualifications/{uuid4()}/notes", json={"notes": "x"})
    assert r.status_code == 404


def test_delete_qualification(client, setup_qualification):
    """A deleted qualification is gone."""
    r = client.delete(f"/qualifications/{setup_qualification.id}")
    assert r.status_code == 204
    r2 = client.get(f"/qualifications/{setup_qualification.id}")
    assert r2.status_code == 404
