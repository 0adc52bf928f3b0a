from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from django.db import models

from liturgy.domain.exceptions import (
    CapacityError,
    ConflictError,
    IncompleteError,
    UnknownSlotError,
)

# =========================
# Funções litúrgicas
# =========================

class RoleSlot(models.TextChoices):
    COMMENTARY = "commentary", "Comentário"
    READING_1 = "reading_1", "1ª Leitura"
    READING_2 = "reading_2", "2ª Leitura"
    PRAYER_1 = "prayer_1", "Prece 1"
    PRAYER_2 = "prayer_2", "Prece 2"
    PRAYER_3 = "prayer_3", "Prece 3"
    PRAYER_4 = "prayer_4", "Prece 4"

# ordem canônica (também a ordem de validação)
SLOTS: Tuple[RoleSlot, ...] = tuple(RoleSlot)

READING_SLOTS = (RoleSlot.READING_1, RoleSlot.READING_2)
PRAYER_SLOTS = (RoleSlot.PRAYER_1, RoleSlot.PRAYER_2, RoleSlot.PRAYER_3, RoleSlot.PRAYER_4)

# commentary, reading_1 e reading_2: no máximo um deles por voluntário
EXCLUSIVE_SLOTS = (RoleSlot.COMMENTARY,) + READING_SLOTS

CAPACITY: Dict[RoleSlot, int] = {slot: 1 for slot in SLOTS}
CAPACITY[RoleSlot.COMMENTARY] = 2

def capacity(slot: RoleSlot) -> int:
    return CAPACITY[RoleSlot(slot)]

def parse_slot(key: Any) -> RoleSlot:
    """Converte uma chave externa em RoleSlot, rejeitando valores desconhecidos."""
    try:
        return RoleSlot(key)
    except ValueError:
        raise UnknownSlotError(str(key)) from None

# =========================
# Registro tipado da escala do dia
# =========================

@dataclass(frozen=True)
class RoleSelections:
    """Escala de um dia: função -> ids de voluntários, na ordem de escolha."""
    slots: Mapping[RoleSlot, Tuple[int, ...]] = field(default_factory=dict)

    def __post_init__(self):
        normalized = {slot: tuple(self.slots.get(slot, ())) for slot in SLOTS}
        object.__setattr__(self, "slots", normalized)

    @classmethod
    def empty(cls) -> RoleSelections:
        return cls({})

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> RoleSelections:
        """Constrói a partir do JSON persistido/recebido.

        Args:
            raw (Optional[Mapping[str, Any]]): Mapeamento função -> lista de ids.

        Raises:
            UnknownSlotError: Se houver chave de função desconhecida.
            ValueError: Se algum valor não for lista de inteiros.

        Returns:
            RoleSelections: O registro normalizado (funções ausentes ficam vazias).
        """
        if not raw:
            return cls.empty()
        slots: Dict[RoleSlot, Tuple[int, ...]] = {}
        for key, ids in raw.items():
            slot = parse_slot(key)
            if ids is None:
                ids = []
            if not isinstance(ids, (list, tuple)):
                raise ValueError(f"'{slot.value}' deve ser uma lista de ids.")
            slots[slot] = tuple(_as_id(v) for v in ids)
        return cls(slots)

    def to_dict(self) -> Dict[str, list]:
        return {slot.value: list(self.slots[slot]) for slot in SLOTS}

    def get(self, slot: RoleSlot) -> Tuple[int, ...]:
        return self.slots[RoleSlot(slot)]

    def contains(self, slot: RoleSlot, volunteer_id: int) -> bool:
        return volunteer_id in self.slots[RoleSlot(slot)]

    def replace(self, slot: RoleSlot, ids: Iterable[int]) -> RoleSelections:
        slots = dict(self.slots)
        slots[RoleSlot(slot)] = tuple(ids)
        return RoleSelections(slots)

    def volunteer_ids(self) -> set:
        out = set()
        for ids in self.slots.values():
            out.update(ids)
        return out

def _as_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Id de voluntário inválido: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Id de voluntário inválido: {value!r}") from None

# =========================
# Regras
# =========================

def _check_exclusivity(slot: RoleSlot, volunteer_id: int, selections: RoleSelections) -> None:
    """Levanta ConflictError se o voluntário já estiver em função incompatível."""
    if slot not in EXCLUSIVE_SLOTS:
        return
    for other in EXCLUSIVE_SLOTS:
        if other != slot and selections.contains(other, volunteer_id):
            raise ConflictError(slot.value, volunteer_id, other.value)

def toggle(slot: RoleSlot, volunteer_id: int, selections: RoleSelections) -> RoleSelections:
    """Adiciona ou remove um voluntário de uma função.

    Remover é sempre permitido. Ao adicionar, commentary/reading_1/reading_2 são
    mutuamente exclusivos para o mesmo voluntário; preces não têm exclusividade.

    Args:
        slot (RoleSlot): A função alvo.
        volunteer_id (int): O voluntário.
        selections (RoleSelections): O estado atual do dia.

    Raises:
        ConflictError: Se o voluntário já ocupa função incompatível.
        CapacityError: Se a função já está cheia.

    Returns:
        RoleSelections: Novo estado; as demais funções ficam inalteradas.
    """
    slot = parse_slot(slot)
    current = list(selections.get(slot))
    if volunteer_id in current:
        candidate = [vid for vid in current if vid != volunteer_id]
    else:
        _check_exclusivity(slot, volunteer_id, selections)
        candidate = current + [volunteer_id]
    limit = capacity(slot)
    if len(candidate) > limit:
        raise CapacityError(slot.value, limit)
    return selections.replace(slot, candidate)

def validate_for_save(selections: RoleSelections) -> None:
    """Valida a escala antes de persistir.

    Exige pelo menos 1 em commentary e exatamente 1 em cada leitura e prece.
    Também confere capacidade e exclusividade, pois o payload pode não ter
    passado por toggle().

    Raises:
        IncompleteError: Na primeira função obrigatória não preenchida.
        CapacityError: Se alguma função excede o limite.
        ConflictError: Se um voluntário ocupa funções incompatíveis.
    """
    if len(selections.get(RoleSlot.COMMENTARY)) < 1:
        raise IncompleteError(RoleSlot.COMMENTARY.value, 1)
    for slot in READING_SLOTS + PRAYER_SLOTS:
        if len(selections.get(slot)) != 1:
            raise IncompleteError(slot.value, 1, exact=True)

    for slot in SLOTS:
        ids = selections.get(slot)
        if len(ids) > capacity(slot):
            raise CapacityError(slot.value, capacity(slot))

    seen: Dict[int, RoleSlot] = {}
    for slot in EXCLUSIVE_SLOTS:
        for vid in selections.get(slot):
            if vid in seen and seen[vid] != slot:
                raise ConflictError(slot.value, vid, seen[vid].value)
            seen[vid] = slot

def is_complete(selections: RoleSelections) -> bool:
    try:
        validate_for_save(selections)
    except (IncompleteError, CapacityError, ConflictError):
        return False
    return True

# =========================
# Contagem anual
# =========================

@dataclass
class ServiceTally:
    """Quantas vezes um voluntário serviu em cada categoria no ano."""
    commentary: int = 0
    reading: int = 0
    prayer: int = 0

    def add(self, volunteer_id: int, selections: RoleSelections) -> None:
        """Soma no máximo uma unidade por categoria para a data das seleções.

        Um voluntário em duas preces no mesmo dia conta uma vez só.
        """
        if selections.contains(RoleSlot.COMMENTARY, volunteer_id):
            self.commentary += 1
        if any(selections.contains(s, volunteer_id) for s in READING_SLOTS):
            self.reading += 1
        if any(selections.contains(s, volunteer_id) for s in PRAYER_SLOTS):
            self.prayer += 1

    def to_dict(self) -> Dict[str, int]:
        return {"commentary": self.commentary, "reading": self.reading, "prayer": self.prayer}

def tally_from(volunteer_id: int, year: int, records: Iterable[Tuple[str, RoleSelections]]) -> ServiceTally:
    """Conta as participações do voluntário nas escalas cujo dia começa com o ano.

    Args:
        volunteer_id (int): O voluntário.
        year (int): O ano (comparação por prefixo da data ISO).
        records (Iterable[Tuple[str, RoleSelections]]): Pares (data ISO, seleções).

    Returns:
        ServiceTally: A contagem por categoria.
    """
    prefix = f"{int(year):04d}-"
    out = ServiceTally()
    for date_string, selections in records:
        if date_string.startswith(prefix):
            out.add(volunteer_id, selections)
    return out
