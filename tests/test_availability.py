import pytest

from liturgy.domain.exceptions import DateNotEnabledError, MonthClosedError, NotFoundError
from liturgy.domain.models import Availability
from liturgy.domain.repositories import AvailabilityRepository, PublicationRepository
from liturgy.services.availability import AvailabilityService

@pytest.mark.django_db
def test_set_availability_is_idempotent(volunteers):
    v = volunteers[0]
    AvailabilityRepository.set_availability(v.id, "2025-03-02", True)
    AvailabilityRepository.set_availability(v.id, "2025-03-02", True)
    assert Availability.objects.filter(volunteer=v).count() == 1
    AvailabilityRepository.set_availability(v.id, "2025-03-02", False)
    AvailabilityRepository.set_availability(v.id, "2025-03-02", False)
    assert not Availability.objects.filter(volunteer=v).exists()

@pytest.mark.django_db
def test_get_available_volunteers_with_timestamp(volunteers):
    a, b = volunteers[:2]
    AvailabilityRepository.set_availability(a.id, "2025-03-02", True)
    AvailabilityRepository.set_availability(b.id, "2025-03-09", True)
    out = AvailabilityRepository.get_available_volunteers("2025-03-02")
    assert [v.id for v in out] == [a.id]
    assert out[0].availability_timestamp is not None
    assert AvailabilityRepository.get_available_volunteers("2025-03-16") == []

@pytest.mark.django_db
def test_toggle_requires_open_month(volunteers):
    with pytest.raises(MonthClosedError):
        AvailabilityService.toggle_for_volunteer(volunteers[0].id, "2025-03-02", True)

@pytest.mark.django_db
def test_toggle_requires_enabled_date(volunteers):
    PublicationRepository.set_month_open(2025, 3, True)
    # sem registro de datas: apenas domingos
    with pytest.raises(DateNotEnabledError):
        AvailabilityService.toggle_for_volunteer(volunteers[0].id, "2025-03-01", True)
    assert AvailabilityService.toggle_for_volunteer(volunteers[0].id, "2025-03-02", True) is True

@pytest.mark.django_db
def test_toggle_unknown_volunteer():
    PublicationRepository.set_month_open(2025, 3, True)
    with pytest.raises(NotFoundError):
        AvailabilityService.toggle_for_volunteer(4242, "2025-03-02", True)

@pytest.mark.django_db
def test_month_for_volunteer(volunteers):
    PublicationRepository.set_enabled_dates(2025, 3, ["2025-03-08", "2025-03-09"])
    AvailabilityRepository.set_availability(volunteers[0].id, "2025-03-09", True)
    assert AvailabilityService.month_for_volunteer(volunteers[0].id, 2025, 3) == {
        "2025-03-08": False,
        "2025-03-09": True,
    }

@pytest.mark.django_db
def test_status_for_month_sorted_by_name(volunteers):
    PublicationRepository.set_enabled_dates(2025, 3, ["2025-03-09", "2025-03-16"])
    for v in reversed(volunteers[:3]):
        AvailabilityRepository.set_availability(v.id, "2025-03-09", True)
    status = AvailabilityService.status_for_month(2025, 3)
    assert list(status) == ["2025-03-09", "2025-03-16"]
    assert [v.name for v in status["2025-03-09"]] == ["Ana", "Bruno", "Carla"]
    assert status["2025-03-16"] == []
