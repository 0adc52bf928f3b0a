from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from liturgy.domain.models import Availability, Volunteer
from liturgy.domain.repositories import PublicationRepository

@pytest.mark.django_db
def test_seed_demo_is_idempotent():
    call_command("seed_demo", "--names", "Ana,Bruno", "--year", "2025", "--month", "3", stdout=StringIO())
    call_command("seed_demo", "--names", "Ana,Bruno", "--year", "2025", "--month", "3", stdout=StringIO())
    assert Volunteer.objects.count() == 2
    assert PublicationRepository.get_month_open(2025, 3) is True
    assert PublicationRepository.get_enabled_dates(2025, 3) == [
        "2025-03-02", "2025-03-09", "2025-03-16", "2025-03-23", "2025-03-30",
    ]
    # domingos alternados: 3 para Ana, 2 para Bruno
    assert Availability.objects.count() == 5

@pytest.mark.django_db
def test_month_status_open_and_dates():
    out = StringIO()
    call_command("month_status", "--year", "2025", "--month", "3", "--open", "--dates", "2025-03-01", "2025-03-02", stdout=out)
    assert PublicationRepository.get_month_open(2025, 3) is True
    assert PublicationRepository.get_enabled_dates(2025, 3) == ["2025-03-01", "2025-03-02"]
    assert "abertas" in out.getvalue()

    call_command("month_status", "--year", "2025", "--month", "3", "--close", "--dates", stdout=out)
    assert PublicationRepository.get_month_open(2025, 3) is False
    assert PublicationRepository.get_enabled_dates(2025, 3) == []

    call_command("month_status", "--year", "2025", "--month", "3", "--sundays", stdout=out)
    assert len(PublicationRepository.get_enabled_dates(2025, 3)) == 5

@pytest.mark.django_db
def test_month_status_rejects_foreign_dates():
    with pytest.raises(CommandError):
        call_command("month_status", "--year", "2025", "--month", "3", "--dates", "2025-04-06", stdout=StringIO())
