from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from django.db import models

from liturgy.domain.exceptions import LiturgyError
from liturgy.domain.models import PrayerSlot
from liturgy.domain.repositories import PublicationRepository
from liturgy.services.calendar import effective_enabled_dates

log = logging.getLogger(__name__)

class PrayerEditState(models.TextChoices):
    UNSET = "unset", "Sem texto"
    EDITING = "editing", "Editando"
    SAVED = "saved", "Salvo"

class InvalidTransitionError(LiturgyError):
    """Transição inválida no ciclo de edição de uma prece."""

# unset -> editing -> saved, e saved -> editing
_TRANSITIONS = {
    PrayerEditState.UNSET: {PrayerEditState.EDITING},
    PrayerEditState.EDITING: {PrayerEditState.SAVED},
    PrayerEditState.SAVED: {PrayerEditState.EDITING},
}

@dataclass
class PrayerCard:
    """Uma prece de uma data, com seu próprio ciclo de edição."""
    date_string: str
    slot: int
    text: str = ""
    state: PrayerEditState = PrayerEditState.UNSET

    @classmethod
    def load(cls, date_string: str, slot: int) -> PrayerCard:
        text = PublicationRepository.get_prayer_text(date_string, slot)
        state = PrayerEditState.SAVED if text.strip() else PrayerEditState.UNSET
        return cls(date_string=date_string, slot=int(slot), text=text, state=state)

    def _move(self, target: PrayerEditState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(f"Prece {self.slot}: {self.state} -> {target} não permitido.")
        self.state = target

    def start_editing(self) -> None:
        self._move(PrayerEditState.EDITING)

    def save(self, text: str) -> None:
        """Grava o texto; em caso de falha o card continua em edição."""
        if self.state != PrayerEditState.EDITING:
            raise InvalidTransitionError(f"Prece {self.slot}: salve apenas durante a edição.")
        PublicationRepository.set_prayer_text(self.date_string, self.slot, text)
        self.text = text or ""
        self._move(PrayerEditState.SAVED)
        log.info("Prece %s de %s salva.", self.slot, self.date_string)

    def to_dict(self) -> Dict[str, object]:
        return {"slot": self.slot, "text": self.text, "state": self.state.value}

def prayer_cards(date_string: str) -> List[PrayerCard]:
    """Os quatro cards de prece da data, com estado derivado do texto salvo."""
    texts = PublicationRepository.get_prayers_for_date(date_string)
    return [
        PrayerCard(
            date_string=date_string,
            slot=int(slot),
            text=texts[int(slot)],
            state=PrayerEditState.SAVED if texts[int(slot)].strip() else PrayerEditState.UNSET,
        )
        for slot in PrayerSlot.values
    ]

def month_overview(year: int, month: int) -> Dict[str, object]:
    """Resumo do mês para as telas: status, datas habilitadas efetivas e aviso."""
    enabled = PublicationRepository.get_enabled_dates(year, month)
    return {
        "year": year,
        "month": month,
        "is_open": PublicationRepository.get_month_open(year, month),
        "has_enabled_dates_record": enabled is not None,
        "enabled_dates": [d.to_dict() for d in effective_enabled_dates(year, month)],
        "announcement": PublicationRepository.get_announcement(year, month),
    }
