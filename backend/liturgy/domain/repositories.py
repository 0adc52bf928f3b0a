from __future__ import annotations

import functools
import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple, TypeVar

from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from liturgy.domain.exceptions import NotFoundError, StaleAssignmentError, StoreError
from liturgy.domain.models import (
    Announcement,
    Availability,
    EnabledDates,
    MonthOpenStatus,
    PrayerSlot,
    PrayerText,
    RoleAssignment,
    Volunteer,
)
from liturgy.domain.roles import RoleSelections
from liturgy.utils import month_key, parse_date_string

log = logging.getLogger(__name__)

T = TypeVar("T")

# ==========================================================
# Fronteira de I/O
# ==========================================================
def _store_call(func: Callable[..., T]) -> Callable[..., T]:
    """Converte falhas do banco em StoreError, registrando a exceção uma vez."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            log.exception("Falha de armazenamento em %s", func.__qualname__)
            raise StoreError(f"Falha ao acessar o banco ({func.__name__}).") from exc
    return wrapper

# ==========================================================
# Volunteer Repository
# ==========================================================
class VolunteerRepository:
    """Repositório para operações relacionadas a Volunteer."""

    @classmethod
    @_store_call
    def list_all(cls) -> List[Volunteer]:
        """Retorna todos os voluntários.

        Returns:
            List[Volunteer]: Todos os voluntários, ordenados por nome.
        """
        return list(Volunteer.objects.all().order_by("name"))

    @classmethod
    def queryset(cls) -> QuerySet[Volunteer]:
        return Volunteer.objects.all().order_by("name")

    @classmethod
    @_store_call
    def get(cls, volunteer_id: int) -> Volunteer:
        """Retorna o voluntário pelo id.

        Raises:
            NotFoundError: Se não existir.
        """
        try:
            return Volunteer.objects.get(pk=volunteer_id)
        except Volunteer.DoesNotExist:
            raise NotFoundError("Voluntário", volunteer_id) from None

    @classmethod
    @_store_call
    def by_ids(cls, ids: Iterable[int]) -> Dict[int, Volunteer]:
        """Retorna um mapa id -> voluntário para os ids existentes."""
        return {v.id: v for v in Volunteer.objects.filter(id__in=list(ids))}

    @classmethod
    @_store_call
    def add(cls, name: str) -> Volunteer:
        """Cria um voluntário. Não verifica duplicidade de nome.

        Args:
            name (str): O nome (espaços nas pontas são removidos).

        Returns:
            Volunteer: O voluntário criado.
        """
        clean = (name or "").strip()
        if not clean:
            raise ValueError("O nome não pode ser vazio.")
        return Volunteer.objects.create(name=clean)

    @classmethod
    @_store_call
    def rename(cls, volunteer_id: int, new_name: str) -> Volunteer:
        """Renomeia o voluntário no lugar.

        Raises:
            NotFoundError: Se o voluntário não existir.
        """
        clean = (new_name or "").strip()
        if not clean:
            raise ValueError("O nome não pode ser vazio.")
        volunteer = cls.get(volunteer_id)
        volunteer.name = clean
        volunteer.updated_at = timezone.now()
        volunteer.save(update_fields=["name", "updated_at"])
        return volunteer

    @classmethod
    @_store_call
    @transaction.atomic
    def remove(cls, volunteer_id: int) -> int:
        """Exclui o voluntário e todas as suas disponibilidades.

        Escalas já salvas (RoleAssignment) não são alteradas: os ids continuam lá.

        Returns:
            int: Número de disponibilidades removidas.

        Raises:
            NotFoundError: Se o voluntário não existir.
        """
        volunteer = cls.get(volunteer_id)
        removed, _ = Availability.objects.filter(volunteer_id=volunteer_id).delete()
        volunteer.delete()
        log.info("Voluntário %s removido (%d disponibilidade(s)).", volunteer_id, removed)
        return removed

    @classmethod
    @_store_call
    def find_id_by_name(cls, name: str) -> int:
        """Busca exata (após trim, sensível a maiúsculas) pelo nome.

        Raises:
            NotFoundError: Se nenhum voluntário tiver o nome.
        """
        clean = (name or "").strip()
        volunteer_id = (
            Volunteer.objects.filter(name=clean).order_by("created_at", "id").values_list("id", flat=True).first()
        )
        if volunteer_id is None:
            raise NotFoundError("Voluntário", clean)
        return volunteer_id

    @classmethod
    def name_taken(cls, name: str, exclude_id: Optional[int] = None) -> bool:
        """Verificação de duplicidade (melhor esforço, sujeita a corrida)."""
        clean = (name or "").strip()
        return any(v.name == clean and v.id != exclude_id for v in cls.list_all())

# ==========================================================
# Availability Repository
# ==========================================================
class AvailabilityRepository:
    """Repositório para operações relacionadas a Availability."""

    @classmethod
    @_store_call
    def set_availability(cls, volunteer_id: int, date_string: str, available: bool) -> None:
        """Marca (upsert com timestamp) ou desmarca (delete) a presença. Idempotente.

        Args:
            volunteer_id (int): O voluntário.
            date_string (str): A data 'yyyy-MM-dd'.
            available (bool): True para disponível, False para remover.
        """
        d = parse_date_string(date_string)
        if available:
            Availability.objects.update_or_create(
                volunteer_id=volunteer_id, date=d, defaults={"timestamp": timezone.now()}
            )
        else:
            Availability.objects.filter(volunteer_id=volunteer_id, date=d).delete()

    @classmethod
    @_store_call
    def get_available_volunteers(cls, date_string: str) -> List[Volunteer]:
        """Retorna os voluntários com presença registrada na data (sem ordenação garantida).

        Args:
            date_string (str): A data 'yyyy-MM-dd'.

        Returns:
            List[Volunteer]: Voluntários disponíveis; cada um com `availability_timestamp`.
        """
        d = parse_date_string(date_string)
        out: List[Volunteer] = []
        for a in Availability.objects.filter(date=d).select_related("volunteer"):
            v = a.volunteer
            v.availability_timestamp = a.timestamp
            out.append(v)
        return out

    @classmethod
    @_store_call
    def available_by_date(cls, date_strings: Iterable[str]) -> Dict[str, List[Volunteer]]:
        """Retorna os voluntários disponíveis de várias datas em uma única consulta."""
        dates = [parse_date_string(s) for s in date_strings]
        out: Dict[str, List[Volunteer]] = {d.isoformat(): [] for d in dates}
        qs = Availability.objects.filter(date__in=dates).select_related("volunteer")
        for a in qs:
            out[a.date.isoformat()].append(a.volunteer)
        return out

    @classmethod
    @_store_call
    def dates_for_volunteer(cls, volunteer_id: int, date_strings: Iterable[str]) -> List[str]:
        """Retorna as datas (dentre as informadas) em que o voluntário está disponível."""
        dates = [parse_date_string(s) for s in date_strings]
        qs = Availability.objects.filter(volunteer_id=volunteer_id, date__in=dates).order_by("date")
        return [d.isoformat() for d in qs.values_list("date", flat=True)]

# ==========================================================
# Publication Repository
# ==========================================================
class PublicationRepository:
    """Registros mensais simples: status do mês, datas habilitadas, avisos e preces."""

    @classmethod
    @_store_call
    def get_month_open(cls, year: int, month: int) -> bool:
        """Retorna se as inscrições do mês estão abertas (padrão: fechado)."""
        status = MonthOpenStatus.objects.filter(year=year, month=month).values_list("is_open", flat=True).first()
        return bool(status)

    @classmethod
    @_store_call
    def set_month_open(cls, year: int, month: int, is_open: bool) -> None:
        MonthOpenStatus.objects.update_or_create(year=year, month=month, defaults={"is_open": bool(is_open)})
        log.info("Mês %s %s.", month_key(year, month), "aberto" if is_open else "fechado")

    @classmethod
    @_store_call
    def get_enabled_dates(cls, year: int, month: int) -> Optional[List[str]]:
        """Retorna as datas habilitadas do mês.

        Returns:
            Optional[List[str]]: None se não houver registro (usar padrão), ou a lista (possivelmente vazia).
        """
        record = EnabledDates.objects.filter(year=year, month=month).first()
        if record is None:
            return None
        return list(record.dates or [])

    @classmethod
    @_store_call
    def set_enabled_dates(cls, year: int, month: int, dates: Iterable[str]) -> List[str]:
        """Grava a lista de datas habilitadas (ordenada e sem repetição).

        Raises:
            ValueError: Se alguma data for inválida ou não pertencer ao mês.
        """
        clean = sorted({parse_date_string(s) for s in dates})
        for d in clean:
            if (d.year, d.month) != (year, month):
                raise ValueError(f"A data {d.isoformat()} não pertence a {month_key(year, month)}.")
        values = [d.isoformat() for d in clean]
        EnabledDates.objects.update_or_create(year=year, month=month, defaults={"dates": values})
        return values

    @classmethod
    @_store_call
    def get_announcement(cls, year: int, month: int) -> str:
        content = Announcement.objects.filter(year=year, month=month).values_list("content", flat=True).first()
        return content or ""

    @classmethod
    @_store_call
    def set_announcement(cls, year: int, month: int, content: str) -> None:
        Announcement.objects.update_or_create(year=year, month=month, defaults={"content": content or ""})

    @classmethod
    @_store_call
    def get_prayer_text(cls, date_string: str, slot: int) -> str:
        slot = PrayerSlot(int(slot))
        d = parse_date_string(date_string)
        content = PrayerText.objects.filter(date=d, slot=slot).values_list("content", flat=True).first()
        return content or ""

    @classmethod
    @_store_call
    def set_prayer_text(cls, date_string: str, slot: int, content: str) -> None:
        """Grava o texto de uma prece (cada prece é salva de forma independente).

        Raises:
            ValueError: Se a prece não estiver entre 1 e 4.
        """
        slot = PrayerSlot(int(slot))
        d = parse_date_string(date_string)
        PrayerText.objects.update_or_create(date=d, slot=slot, defaults={"content": content or ""})

    @classmethod
    @_store_call
    def get_prayers_for_date(cls, date_string: str) -> Dict[int, str]:
        """Retorna {1..4: texto}, com '' para preces ainda não escritas."""
        d = parse_date_string(date_string)
        out = {int(s): "" for s in PrayerSlot.values}
        for slot, content in PrayerText.objects.filter(date=d).values_list("slot", "content"):
            out[int(slot)] = content or ""
        return out

# ==========================================================
# Assignment Repository
# ==========================================================
class AssignmentRepository:
    """Repositório para a escala por data (RoleAssignment)."""

    @classmethod
    @_store_call
    def get(cls, date_string: str) -> Optional[RoleAssignment]:
        return RoleAssignment.objects.filter(date=parse_date_string(date_string)).first()

    @classmethod
    @_store_call
    def load(cls, date_string: str) -> Tuple[RoleSelections, int]:
        """Retorna (seleções, versão); escala vazia e versão 0 se não existir."""
        record = cls.get(date_string)
        if record is None:
            return RoleSelections.empty(), 0
        return RoleSelections.from_dict(record.selections), record.version

    @classmethod
    @_store_call
    @transaction.atomic
    def write(
        cls, date_string: str, selections: RoleSelections, expected_version: Optional[int] = None
    ) -> RoleAssignment:
        """Sobrescreve a escala inteira da data em uma única escrita e incrementa a versão.

        Com expected_version, a versão é conferida com a linha já travada; divergência
        levanta StaleAssignmentError e nada é gravado.
        """
        d = parse_date_string(date_string)
        record = RoleAssignment.objects.select_for_update().filter(date=d).first()
        if record is None:
            record = RoleAssignment(date=d, version=0)
        if expected_version is not None and record.version != expected_version:
            raise StaleAssignmentError(d.isoformat(), expected_version, record.version)
        record.selections = selections.to_dict()
        record.version += 1
        record.save()
        return record

    @classmethod
    @_store_call
    def current_version(cls, date_string: str) -> int:
        version = (
            RoleAssignment.objects.filter(date=parse_date_string(date_string))
            .values_list("version", flat=True)
            .first()
        )
        return version or 0

    @classmethod
    @_store_call
    def for_dates(cls, date_strings: Iterable[str]) -> Dict[str, RoleSelections]:
        """Retorna as escalas salvas das datas informadas (datas sem escala ficam de fora)."""
        dates = [parse_date_string(s) for s in date_strings]
        return {
            r.date.isoformat(): RoleSelections.from_dict(r.selections)
            for r in RoleAssignment.objects.filter(date__in=dates)
        }

    @classmethod
    @_store_call
    def iter_year(cls, year: int) -> Iterator[Tuple[str, RoleSelections]]:
        """Itera (data ISO, seleções) das escalas salvas no ano."""
        qs = RoleAssignment.objects.filter(date__year=year).order_by("date")
        return iter([(r.date.isoformat(), RoleSelections.from_dict(r.selections)) for r in qs])

