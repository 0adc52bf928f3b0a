from __future__ import annotations

import logging
from typing import Dict, List

from liturgy.domain.exceptions import DateNotEnabledError, MonthClosedError
from liturgy.domain.models import Volunteer
from liturgy.domain.repositories import AvailabilityRepository, PublicationRepository, VolunteerRepository
from liturgy.services.calendar import effective_enabled_dates
from liturgy.utils import parse_date_string

log = logging.getLogger(__name__)

def _by_name(volunteers: List[Volunteer]) -> List[Volunteer]:
    return sorted(volunteers, key=lambda v: (v.name.casefold(), v.id))

class AvailabilityService:
    """Inscrições dos voluntários nas datas habilitadas."""

    @staticmethod
    def toggle_for_volunteer(volunteer_id: int, date_string: str, available: bool) -> bool:
        """Inscrição feita pelo próprio voluntário: exige mês aberto e data habilitada.

        Raises:
            NotFoundError: Voluntário inexistente.
            MonthClosedError: Inscrições do mês fechadas.
            DateNotEnabledError: Data fora das habilitadas.

        Returns:
            bool: O novo valor de disponibilidade.
        """
        VolunteerRepository.get(volunteer_id)
        d = parse_date_string(date_string)
        if not PublicationRepository.get_month_open(d.year, d.month):
            raise MonthClosedError("As inscrições deste mês estão fechadas.")
        enabled = {day.date_string for day in effective_enabled_dates(d.year, d.month)}
        if d.isoformat() not in enabled:
            raise DateNotEnabledError(f"A data {d.isoformat()} não está aberta para inscrição.")
        AvailabilityRepository.set_availability(volunteer_id, d.isoformat(), available)
        log.info("Disponibilidade %s em %s: %s", volunteer_id, d.isoformat(), available)
        return bool(available)

    @staticmethod
    def month_for_volunteer(volunteer_id: int, year: int, month: int) -> Dict[str, bool]:
        """Mapa data -> disponível para as datas habilitadas do mês."""
        days = [d.date_string for d in effective_enabled_dates(year, month)]
        marked = set(AvailabilityRepository.dates_for_volunteer(volunteer_id, days))
        return {ds: ds in marked for ds in days}

    @staticmethod
    def status_for_month(year: int, month: int) -> Dict[str, List[Volunteer]]:
        """Inscritos por data habilitada, ordenados por nome."""
        days = [d.date_string for d in effective_enabled_dates(year, month)]
        by_date = AvailabilityRepository.available_by_date(days)
        return {ds: _by_name(vs) for ds, vs in by_date.items()}

    @staticmethod
    def available_sorted(date_string: str) -> List[Volunteer]:
        return _by_name(AvailabilityRepository.get_available_volunteers(date_string))
