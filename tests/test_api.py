import pytest

from liturgy.domain.exceptions import StoreError
from liturgy.domain.models import Availability, PrayerText, RoleAssignment, Volunteer
from liturgy.domain.repositories import AvailabilityRepository, PublicationRepository

def _payload(full_selections):
    return {"selections": full_selections.to_dict()}

# ===== Voluntários =====

@pytest.mark.django_db
def test_list_volunteers_is_public(api_client, volunteers):
    resp = api_client.get("/api/v1/volunteers")
    assert resp.status_code == 200
    assert [v["name"] for v in resp.json()][:2] == ["Ana", "Bruno"]

@pytest.mark.django_db
def test_filter_volunteers_by_name(api_client, volunteers):
    resp = api_client.get("/api/v1/volunteers", {"name": "arl"})
    assert [v["name"] for v in resp.json()] == ["Carla"]

@pytest.mark.django_db
def test_create_volunteer_requires_admin(api_client):
    resp = api_client.post("/api/v1/volunteers", {"name": "Zeca"}, format="json")
    assert resp.status_code == 403
    assert not Volunteer.objects.exists()

@pytest.mark.django_db
def test_admin_creates_volunteer(admin_api, volunteers):
    resp = admin_api.post("/api/v1/volunteers", {"name": "  Zeca "}, format="json")
    assert resp.status_code == 201
    assert resp.json()["name"] == "Zeca"

    dup = admin_api.post("/api/v1/volunteers", {"name": "Ana"}, format="json")
    assert dup.status_code == 400
    blank = admin_api.post("/api/v1/volunteers", {"name": "   "}, format="json")
    assert blank.status_code == 400

@pytest.mark.django_db
def test_admin_renames_and_deletes(admin_api, volunteers):
    ana = volunteers[0]
    resp = admin_api.patch(f"/api/v1/volunteers/{ana.id}", {"name": "Ana Clara"}, format="json")
    assert resp.status_code == 200
    assert Volunteer.objects.get(pk=ana.id).name == "Ana Clara"

    dup = admin_api.patch(f"/api/v1/volunteers/{ana.id}", {"name": "Bruno"}, format="json")
    assert dup.status_code == 400

    AvailabilityRepository.set_availability(ana.id, "2025-03-02", True)
    resp = admin_api.delete(f"/api/v1/volunteers/{ana.id}")
    assert resp.status_code == 200
    assert resp.json() == {"availability_removed": 1}

    assert admin_api.delete(f"/api/v1/volunteers/{ana.id}").status_code == 404

@pytest.mark.django_db
def test_identify_volunteer(api_client, volunteers):
    resp = api_client.post("/api/v1/volunteers/identify", {"name": " Bruno "}, format="json")
    assert resp.status_code == 200
    assert resp.json()["id"] == volunteers[1].id
    assert api_client.post("/api/v1/volunteers/identify", {"name": "bruno"}, format="json").status_code == 404

# ===== Mês =====

@pytest.mark.django_db
def test_month_detail_and_admin_updates(api_client, admin_api):
    resp = api_client.get("/api/v1/months/2025/3")
    assert resp.status_code == 200
    body = resp.json()
    assert body["is_open"] is False
    assert len(body["enabled_dates"]) == 5

    assert api_client.put("/api/v1/months/2025/3/open", {"is_open": True}, format="json").status_code == 403
    assert admin_api.put("/api/v1/months/2025/3/open", {"is_open": True}, format="json").status_code == 200
    resp = admin_api.put("/api/v1/months/2025/3/dates", {"dates": ["2025-03-09", "2025-03-01"]}, format="json")
    assert resp.json()["enabled_dates"] == ["2025-03-01", "2025-03-09"]

    body = api_client.get("/api/v1/months/2025/3").json()
    assert body["is_open"] is True
    assert [d["date"] for d in body["enabled_dates"]] == ["2025-03-01", "2025-03-09"]

@pytest.mark.django_db
def test_enabled_dates_outside_month_rejected(admin_api):
    resp = admin_api.put("/api/v1/months/2025/3/dates", {"dates": ["2025-04-06"]}, format="json")
    assert resp.status_code == 400

@pytest.mark.django_db
def test_invalid_month(api_client):
    assert api_client.get("/api/v1/months/2025/13").status_code == 400

@pytest.mark.django_db
def test_announcement(api_client, admin_api):
    assert api_client.get("/api/v1/announcements/2025/3").json()["content"] == ""
    assert api_client.put("/api/v1/announcements/2025/3", {"content": "x"}, format="json").status_code == 403
    resp = admin_api.put("/api/v1/announcements/2025/3", {"content": "Reunião dia 5."}, format="json")
    assert resp.status_code == 200
    assert api_client.get("/api/v1/announcements/2025/3").json()["content"] == "Reunião dia 5."

# ===== Inscrições =====

@pytest.mark.django_db
def test_volunteer_availability_gated(api_client, volunteers):
    ana = volunteers[0]
    url = f"/api/v1/availability/2025/3/{ana.id}"
    resp = api_client.put(url, {"date": "2025-03-02", "available": True}, format="json")
    assert resp.status_code == 409
    assert resp.json()["code"] == "MonthClosedError"

    PublicationRepository.set_month_open(2025, 3, True)
    resp = api_client.put(url, {"date": "2025-03-01", "available": True}, format="json")
    assert resp.status_code == 409
    assert resp.json()["code"] == "DateNotEnabledError"

    resp = api_client.put(url, {"date": "2025-03-02", "available": True}, format="json")
    assert resp.status_code == 200
    assert resp.json()["availability"]["2025-03-02"] is True
    assert api_client.get(url).json()["availability"]["2025-03-09"] is False

@pytest.mark.django_db
def test_admin_availability_bypasses_gate(admin_api, volunteers):
    url = f"/api/v1/availability/2025/3/{volunteers[0].id}"
    resp = admin_api.put(url, {"date": "2025-03-02", "available": True}, format="json")
    assert resp.status_code == 200
    assert Availability.objects.filter(volunteer=volunteers[0]).count() == 1

@pytest.mark.django_db
def test_availability_date_must_match_month(api_client, volunteers):
    url = f"/api/v1/availability/2025/3/{volunteers[0].id}"
    resp = api_client.put(url, {"date": "2025-04-06", "available": True}, format="json")
    assert resp.status_code == 400

@pytest.mark.django_db
def test_availability_unknown_volunteer(api_client):
    assert api_client.get("/api/v1/availability/2025/3/999").status_code == 404

@pytest.mark.django_db
def test_application_status(api_client, volunteers):
    AvailabilityRepository.set_availability(volunteers[2].id, "2025-03-02", True)
    AvailabilityRepository.set_availability(volunteers[0].id, "2025-03-02", True)
    body = api_client.get("/api/v1/status/2025/3").json()
    assert [v["name"] for v in body["2025-03-02"]] == ["Ana", "Carla"]
    assert body["2025-03-09"] == []

# ===== Escala =====

@pytest.mark.django_db
def test_assignment_requires_admin(api_client):
    assert api_client.get("/api/v1/assignments/2025-03-02").status_code == 403

@pytest.mark.django_db
def test_assignment_get_lists_available_with_tally(admin_api, volunteers, full_selections):
    RoleAssignment.objects.create(date="2025-02-23", selections=full_selections.to_dict(), version=1)
    AvailabilityRepository.set_availability(volunteers[1].id, "2025-03-02", True)
    body = admin_api.get("/api/v1/assignments/2025-03-02").json()
    assert body["version"] == 0
    assert body["selections"]["commentary"] == []
    assert body["available"] == [
        {"id": volunteers[1].id, "name": "Bruno", "tally": {"commentary": 0, "reading": 1, "prayer": 0}},
    ]

@pytest.mark.django_db
def test_save_assignment(admin_api, full_selections, available):
    resp = admin_api.put("/api/v1/assignments/2025-03-02", _payload(full_selections), format="json")
    assert resp.status_code == 200
    assert resp.json()["version"] == 1
    assert RoleAssignment.objects.get(date="2025-03-02").selections == full_selections.to_dict()

@pytest.mark.django_db
def test_save_incomplete_assignment(admin_api, full_selections):
    data = _payload(full_selections)
    data["selections"]["reading_2"] = []
    resp = admin_api.put("/api/v1/assignments/2025-03-02", data, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "IncompleteError"
    assert resp.json()["slot"] == "reading_2"
    assert not RoleAssignment.objects.exists()

@pytest.mark.django_db
def test_save_refused_while_month_open(admin_api, full_selections):
    PublicationRepository.set_month_open(2025, 3, True)
    resp = admin_api.put("/api/v1/assignments/2025-03-02", _payload(full_selections), format="json")
    assert resp.status_code == 409
    assert resp.json()["code"] == "MonthOpenError"

@pytest.mark.django_db
def test_save_with_stale_version(admin_api, full_selections, available):
    data = {**_payload(full_selections), "expected_version": 0}
    assert admin_api.put("/api/v1/assignments/2025-03-02", data, format="json").status_code == 200
    resp = admin_api.put("/api/v1/assignments/2025-03-02", data, format="json")
    assert resp.status_code == 409
    assert resp.json()["current_version"] == 1

@pytest.mark.django_db
def test_unknown_role_key_rejected(admin_api):
    resp = admin_api.put("/api/v1/assignments/2025-03-02", {"selections": {"choir": [1]}}, format="json")
    assert resp.status_code == 400

@pytest.mark.django_db
def test_bad_date(admin_api):
    assert admin_api.get("/api/v1/assignments/02-03-2025").status_code == 400

@pytest.mark.django_db
def test_toggle_endpoint(admin_api, volunteers, available):
    ana = volunteers[0]
    url = "/api/v1/assignments/2025-03-02/toggle"
    resp = admin_api.post(url, {"slot": "commentary", "volunteer_id": ana.id}, format="json")
    assert resp.status_code == 200
    draft = resp.json()["selections"]
    assert draft["commentary"] == [ana.id]
    assert not RoleAssignment.objects.exists()

    resp = admin_api.post(url, {"slot": "reading_1", "volunteer_id": ana.id, "selections": draft}, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "ConflictError"

    resp = admin_api.post(url, {"slot": "prayer_2", "volunteer_id": ana.id, "selections": draft}, format="json")
    assert resp.json()["selections"]["prayer_2"] == [ana.id]

@pytest.mark.django_db
def test_tallies_endpoint(admin_api, volunteers, full_selections):
    RoleAssignment.objects.create(date="2025-03-02", selections=full_selections.to_dict(), version=1)
    ana = volunteers[0]
    resp = admin_api.get("/api/v1/tallies/2025", {"ids": f"{ana.id},{volunteers[3].id}"})
    assert resp.json()[str(ana.id)] == {"commentary": 1, "reading": 0, "prayer": 1}
    assert resp.json()[str(volunteers[3].id)] == {"commentary": 0, "reading": 0, "prayer": 1}
    assert admin_api.get("/api/v1/tallies/2025", {"ids": "a,b"}).status_code == 400

@pytest.mark.django_db
def test_schedule_is_public(api_client, full_selections):
    RoleAssignment.objects.create(date="2025-03-09", selections=full_selections.to_dict(), version=1)
    rows = api_client.get("/api/v1/schedule/2025/3").json()
    assert len(rows) == 5
    assert rows[1]["date"] == "2025-03-09"
    assert rows[1]["commentary"] == ["Ana"]
    assert rows[1]["complete"] is True
    assert rows[0]["complete"] is False

# ===== Preces =====

@pytest.mark.django_db
def test_prayers(api_client, admin_api, full_selections):
    RoleAssignment.objects.create(date="2025-03-02", selections=full_selections.to_dict(), version=1)
    assert api_client.put("/api/v1/prayers/2025-03-02/1", {"content": "x"}, format="json").status_code == 403

    resp = admin_api.put("/api/v1/prayers/2025-03-02/2", {"content": "Pelos jovens"}, format="json")
    assert resp.status_code == 200
    assert resp.json() == {"slot": 2, "text": "Pelos jovens", "state": "saved"}

    body = api_client.get("/api/v1/prayers/2025-03-02").json()
    assert body["prayers"][1]["text"] == "Pelos jovens"
    assert body["prayers"][1]["volunteers"] == ["Eva"]
    assert body["prayers"][0]["state"] == "unset"
    assert PrayerText.objects.count() == 1

@pytest.mark.django_db
def test_prayer_slot_out_of_range(admin_api):
    assert admin_api.put("/api/v1/prayers/2025-03-02/5", {"content": "x"}, format="json").status_code == 400

# ===== Erros de armazenamento =====

@pytest.mark.django_db
def test_store_error_is_503(api_client, monkeypatch):
    def boom(year, month):
        raise StoreError("falha")
    monkeypatch.setattr("liturgy.api.v1.views.month_overview", boom)
    resp = api_client.get("/api/v1/months/2025/3")
    assert resp.status_code == 503
    assert "falha" not in resp.json()["detail"]

@pytest.mark.django_db
def test_toggle_on_empty_draft_ignores_saved_record(admin_api, volunteers, full_selections, available):
    assert admin_api.put("/api/v1/assignments/2025-03-02", _payload(full_selections), format="json").status_code == 200
    ana = volunteers[0]
    url = "/api/v1/assignments/2025-03-02/toggle"
    resp = admin_api.post(url, {"slot": "reading_1", "volunteer_id": ana.id, "selections": {}}, format="json")
    assert resp.status_code == 200
    assert resp.json()["selections"]["reading_1"] == [ana.id]
    assert resp.json()["selections"]["commentary"] == []

    # sem rascunho, parte da escala salva
    resp = admin_api.post(url, {"slot": "reading_1", "volunteer_id": ana.id}, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "ConflictError"

@pytest.mark.django_db
def test_toggle_rejects_volunteer_not_available(admin_api, volunteers):
    url = "/api/v1/assignments/2025-03-02/toggle"
    resp = admin_api.post(url, {"slot": "commentary", "volunteer_id": volunteers[0].id, "selections": {}}, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "UnavailableVolunteerError"

    resp = admin_api.post(url, {"slot": "commentary", "volunteer_id": 9991}, format="json")
    assert resp.status_code == 400

@pytest.mark.django_db
def test_toggle_removal_of_unavailable_id_allowed(admin_api):
    url = "/api/v1/assignments/2025-03-02/toggle"
    resp = admin_api.post(url, {"slot": "prayer_1", "volunteer_id": 9991, "selections": {"prayer_1": [9991]}}, format="json")
    assert resp.status_code == 200
    assert resp.json()["selections"]["prayer_1"] == []

@pytest.mark.django_db
def test_save_with_unknown_ids_rejected(admin_api):
    selections = {slot: [9991 + i] for i, slot in enumerate(
        ["commentary", "reading_1", "reading_2", "prayer_1", "prayer_2", "prayer_3", "prayer_4"]
    )}
    resp = admin_api.put("/api/v1/assignments/2025-03-02", {"selections": selections}, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "UnavailableVolunteerError"
    assert not RoleAssignment.objects.exists()

@pytest.mark.django_db
@pytest.mark.parametrize("url", [
    "/api/v1/months/0/3",
    "/api/v1/months/10000/3",
    "/api/v1/announcements/0/3",
    "/api/v1/schedule/0/3",
    "/api/v1/status/10000/1",
    "/api/v1/availability/0/3/1",
])
def test_year_out_of_range(api_client, url):
    assert api_client.get(url).status_code == 400

@pytest.mark.django_db
def test_admin_year_out_of_range(admin_api):
    assert admin_api.get("/api/v1/tallies/0").status_code == 400
    assert admin_api.put("/api/v1/months/0/3/open", {"is_open": True}, format="json").status_code == 400
    assert admin_api.get("/api/v1/export/xlsx", {"year": 0, "month": 3}).status_code == 400

@pytest.mark.django_db
def test_admin_login_does_not_leak_to_other_clients(api_client, admin_api):
    assert admin_api.get("/api/v1/assignments/2025-03-02").status_code == 200
    assert api_client.get("/api/v1/assignments/2025-03-02").status_code == 403
