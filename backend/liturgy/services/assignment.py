from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from liturgy.domain.exceptions import MonthOpenError, UnavailableVolunteerError
from liturgy.domain.models import Volunteer
from liturgy.domain.repositories import (
    AssignmentRepository,
    AvailabilityRepository,
    PublicationRepository,
    VolunteerRepository,
)
from liturgy.domain.roles import (
    PRAYER_SLOTS,
    READING_SLOTS,
    SLOTS,
    RoleSelections,
    RoleSlot,
    ServiceTally,
    is_complete,
    tally_from,
    toggle,
    validate_for_save,
)
from liturgy.services.calendar import DayInfo, day_info, effective_enabled_dates
from liturgy.utils import parse_date_string

log = logging.getLogger(__name__)

# ===== Data Classes =====

@dataclass
class PublishedDay:
    """Escala de um dia agrupada para publicação (nomes já resolvidos)."""
    day: DayInfo
    commentary: List[Volunteer] = field(default_factory=list)
    reading: List[Volunteer] = field(default_factory=list)
    prayer: List[Volunteer] = field(default_factory=list)
    by_slot: Dict[str, List[Volunteer]] = field(default_factory=dict)
    complete: bool = False

    def to_dict(self) -> Dict[str, object]:
        def names(vs: Iterable[Volunteer]) -> List[str]:
            return [v.name for v in vs]
        return {
            **self.day.to_dict(),
            "commentary": names(self.commentary),
            "reading": names(self.reading),
            "prayer": names(self.prayer),
            "slots": {slot: names(vs) for slot, vs in self.by_slot.items()},
            "complete": self.complete,
        }

# ===== Helpers =====

def _unique(ids: Iterable[int]) -> List[int]:
    seen = set()
    out = []
    for vid in ids:
        if vid not in seen:
            seen.add(vid)
            out.append(vid)
    return out

def _resolve(ids: Iterable[int], volunteers: Dict[int, Volunteer]) -> List[Volunteer]:
    """Ids sem voluntário correspondente (excluído) são ignorados."""
    return [volunteers[vid] for vid in ids if vid in volunteers]

# ===== Service =====

class AssignmentService:
    """Regras de negócio da escala por data: montar, validar, salvar e contar."""

    @staticmethod
    def load(date_string: str) -> RoleSelections:
        """Retorna a escala salva da data, ou uma escala vazia."""
        selections, _ = AssignmentRepository.load(date_string)
        return selections

    @staticmethod
    def load_with_version(date_string: str) -> tuple[RoleSelections, int]:
        return AssignmentRepository.load(date_string)

    @staticmethod
    def toggle(slot: RoleSlot | str, volunteer_id: int, selections: RoleSelections) -> RoleSelections:
        """Aplica toggle() a um rascunho; nenhum estado é persistido."""
        return toggle(slot, volunteer_id, selections)

    @staticmethod
    def check_assignable(date_string: str, volunteer_ids: Iterable[int]) -> None:
        """Só entram na escala os inscritos na data.

        Ids que já estão na escala salva continuam aceitos, mesmo que o
        voluntário tenha sido excluído depois.
        """
        allowed = {v.id for v in AvailabilityRepository.get_available_volunteers(date_string)}
        allowed |= AssignmentService.load(date_string).volunteer_ids()
        missing = set(volunteer_ids) - allowed
        if missing:
            raise UnavailableVolunteerError(date_string, missing)

    @staticmethod
    def save(date_string: str, selections: RoleSelections, expected_version: Optional[int] = None) -> int:
        """Valida e grava a escala da data, sobrescrevendo a anterior.

        Args:
            date_string (str): A data 'yyyy-MM-dd'.
            selections (RoleSelections): A escala completa.
            expected_version (Optional[int], optional): Se informado, a gravação só ocorre
                se a versão salva for esta. Sem ele, vale a última escrita.

        Raises:
            IncompleteError | CapacityError | ConflictError: Escala inválida (nada é gravado).
            MonthOpenError: Inscrições do mês ainda abertas.
            UnavailableVolunteerError: Id sem inscrição na data.
            StaleAssignmentError: Versão divergente.

        Returns:
            int: A nova versão gravada.
        """
        validate_for_save(selections)
        d = parse_date_string(date_string)
        if PublicationRepository.get_month_open(d.year, d.month):
            raise MonthOpenError("Feche as inscrições do mês antes de salvar a escala.")
        AssignmentService.check_assignable(d.isoformat(), selections.volunteer_ids())
        record = AssignmentRepository.write(d.isoformat(), selections, expected_version)
        log.info("Escala de %s salva (v%d).", d.isoformat(), record.version)
        return record.version

    @staticmethod
    def tally(volunteer_id: int, year: int) -> ServiceTally:
        """Contagem anual do voluntário por categoria (apenas indicativa)."""
        return tally_from(volunteer_id, year, AssignmentRepository.iter_year(year))

    @staticmethod
    def tallies_for(volunteer_ids: Iterable[int], year: int) -> Dict[int, ServiceTally]:
        """Contagens de vários voluntários com uma única leitura das escalas do ano."""
        records = list(AssignmentRepository.iter_year(year))
        return {vid: tally_from(vid, year, records) for vid in volunteer_ids}

    @staticmethod
    def published_day(day: DayInfo, selections: RoleSelections, volunteers: Dict[int, Volunteer]) -> PublishedDay:
        """Agrupa a escala em comentário/leitura/prece, sem repetir nomes."""
        reading_ids = _unique(vid for s in READING_SLOTS for vid in selections.get(s))
        prayer_ids = _unique(vid for s in PRAYER_SLOTS for vid in selections.get(s))
        return PublishedDay(
            day=day,
            commentary=_resolve(selections.get(RoleSlot.COMMENTARY), volunteers),
            reading=_resolve(reading_ids, volunteers),
            prayer=_resolve(prayer_ids, volunteers),
            by_slot={slot.value: _resolve(selections.get(slot), volunteers) for slot in SLOTS},
            complete=is_complete(selections),
        )

    @staticmethod
    def selections_with_names(date_string: str) -> PublishedDay:
        """Escala salva da data já com os nomes resolvidos."""
        d = parse_date_string(date_string)
        selections = AssignmentService.load(d.isoformat())
        volunteers = VolunteerRepository.by_ids(selections.volunteer_ids())
        return AssignmentService.published_day(day_info(d), selections, volunteers)

    @staticmethod
    def month_schedule(year: int, month: int) -> List[PublishedDay]:
        """Linhas da tabela mensal: uma por data habilitada, com ou sem escala salva."""
        days = effective_enabled_dates(year, month)
        saved = AssignmentRepository.for_dates(d.date_string for d in days)
        ids = set()
        for selections in saved.values():
            ids |= selections.volunteer_ids()
        volunteers = VolunteerRepository.by_ids(ids)
        return [
            AssignmentService.published_day(d, saved.get(d.date_string, RoleSelections.empty()), volunteers)
            for d in days
        ]
