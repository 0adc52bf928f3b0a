from __future__ import annotations

import calendar as pycal
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from liturgy.domain.repositories import PublicationRepository

WEEKDAY_ABBR = ["seg", "ter", "qua", "qui", "sex", "sáb", "dom"]

MONTH_NAMES = [
    "", "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]

SATURDAY, SUNDAY = 5, 6

@dataclass(frozen=True)
class DayInfo:
    """Descritor de um dia do mês."""
    date: date
    date_string: str
    display: str
    weekday: int  # 0=Seg ... 6=Domingo

    @property
    def weekday_label(self) -> str:
        return WEEKDAY_ABBR[self.weekday]

    def to_dict(self) -> dict:
        return {
            "date": self.date_string,
            "display": self.display,
            "weekday": self.weekday,
            "weekday_label": self.weekday_label,
        }

# ========= Utilidades puras =========

def day_info(d: date) -> DayInfo:
    return DayInfo(
        date=d,
        date_string=d.isoformat(),
        display=f"{d.day} de {MONTH_NAMES[d.month]} ({WEEKDAY_ABBR[d.weekday()]})",
        weekday=d.weekday(),
    )

def days_in_month(year: int, month: int) -> List[DayInfo]:
    """Lista todos os dias do mês/ano, em ordem crescente.

    Args:
        year (int): Ano.
        month (int): Mês (1..12).

    Returns:
        List[DayInfo]: Um descritor por dia.
    """
    _, last = pycal.monthrange(year, month)
    return [day_info(date(year, month, day)) for day in range(1, last + 1)]

def _sunday_first_week(d: date) -> int:
    """Índice da semana iniciada no domingo a que a data pertence."""
    return d.toordinal() // 7

def weekends_in_month(year: int, month: int) -> List[DayInfo]:
    """Lista sábados e domingos do mês.

    Dentro da mesma semana (iniciada no domingo) o domingo vem antes do sábado;
    entre semanas diferentes a ordem é cronológica.
    """
    weekends = [d for d in days_in_month(year, month) if d.weekday in (SATURDAY, SUNDAY)]
    weekends.sort(key=lambda d: (_sunday_first_week(d.date), d.weekday != SUNDAY, d.date))
    return weekends

def sundays_in_month(year: int, month: int) -> List[DayInfo]:
    """Lista os domingos (weekday=6) do mês/ano informados."""
    return [d for d in days_in_month(year, month) if d.weekday == SUNDAY]

# ========= Datas habilitadas =========

def resolve_enabled_days(year: int, month: int, enabled: Optional[Iterable[str]]) -> List[DayInfo]:
    """Resolve o registro de datas habilitadas para dias concretos.

    None (sem registro) significa todos os domingos; lista vazia significa nenhuma data.
    """
    if enabled is None:
        return sundays_in_month(year, month)
    wanted = set(enabled)
    return [d for d in days_in_month(year, month) if d.date_string in wanted]

def effective_enabled_dates(year: int, month: int) -> List[DayInfo]:
    """Datas habilitadas do mês, já com o padrão aplicado."""
    return resolve_enabled_days(year, month, PublicationRepository.get_enabled_dates(year, month))
