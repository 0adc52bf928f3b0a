import pytest

from liturgy.domain.models import AuditLog
from liturgy.domain.repositories import PublicationRepository
from liturgy.services.publication import (
    InvalidTransitionError,
    PrayerCard,
    PrayerEditState,
    month_overview,
    prayer_cards,
)

@pytest.mark.django_db
def test_month_open_defaults_to_closed():
    assert PublicationRepository.get_month_open(2025, 3) is False
    PublicationRepository.set_month_open(2025, 3, True)
    assert PublicationRepository.get_month_open(2025, 3) is True
    assert PublicationRepository.get_month_open(2025, 4) is False

@pytest.mark.django_db
def test_enabled_dates_absent_vs_empty():
    assert PublicationRepository.get_enabled_dates(2025, 3) is None
    assert PublicationRepository.set_enabled_dates(2025, 3, []) == []
    assert PublicationRepository.get_enabled_dates(2025, 3) == []

@pytest.mark.django_db
def test_enabled_dates_sorted_and_validated():
    saved = PublicationRepository.set_enabled_dates(2025, 3, ["2025-03-09", "2025-03-01", "2025-03-09"])
    assert saved == ["2025-03-01", "2025-03-09"]
    with pytest.raises(ValueError):
        PublicationRepository.set_enabled_dates(2025, 3, ["2025-04-06"])
    with pytest.raises(ValueError):
        PublicationRepository.set_enabled_dates(2025, 3, ["09/03/2025"])

@pytest.mark.django_db
def test_announcement():
    assert PublicationRepository.get_announcement(2025, 3) == ""
    PublicationRepository.set_announcement(2025, 3, "Ensaio sábado às 16h.")
    assert PublicationRepository.get_announcement(2025, 3) == "Ensaio sábado às 16h."

@pytest.mark.django_db
def test_prayer_texts_are_independent():
    PublicationRepository.set_prayer_text("2025-03-02", 2, "Pela Igreja")
    assert PublicationRepository.get_prayers_for_date("2025-03-02") == {1: "", 2: "Pela Igreja", 3: "", 4: ""}
    with pytest.raises(ValueError):
        PublicationRepository.set_prayer_text("2025-03-02", 5, "x")

@pytest.mark.django_db
def test_prayer_card_cycle():
    card = PrayerCard.load("2025-03-02", 1)
    assert card.state == PrayerEditState.UNSET
    with pytest.raises(InvalidTransitionError):
        card.save("cedo demais")
    card.start_editing()
    card.save("Pelos doentes")
    assert card.state == PrayerEditState.SAVED
    with pytest.raises(InvalidTransitionError):
        card.save("de novo")
    card.start_editing()
    assert card.state == PrayerEditState.EDITING
    assert PrayerCard.load("2025-03-02", 1).state == PrayerEditState.SAVED

@pytest.mark.django_db
def test_prayer_cards_state_from_text():
    PublicationRepository.set_prayer_text("2025-03-02", 3, "Pela paz")
    cards = prayer_cards("2025-03-02")
    assert [c.slot for c in cards] == [1, 2, 3, 4]
    assert [c.state for c in cards] == [
        PrayerEditState.UNSET, PrayerEditState.UNSET, PrayerEditState.SAVED, PrayerEditState.UNSET,
    ]

@pytest.mark.django_db
def test_month_overview():
    PublicationRepository.set_month_open(2025, 3, True)
    overview = month_overview(2025, 3)
    assert overview["is_open"] is True
    assert overview["has_enabled_dates_record"] is False
    assert [d["date"] for d in overview["enabled_dates"]][0] == "2025-03-02"

@pytest.mark.django_db
def test_changes_are_audited():
    PublicationRepository.set_announcement(2025, 3, "a")
    PublicationRepository.set_announcement(2025, 3, "b")
    logs = AuditLog.objects.filter(table="liturgy_announcement").order_by("created_at", "id")
    assert [log.action for log in logs] == ["create", "update"]
    assert logs[1].before["content"] == "a"
    assert logs[1].after["content"] == "b"
    assert logs[1].actor == "system"
