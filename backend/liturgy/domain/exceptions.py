from __future__ import annotations

from typing import Optional


class LiturgyError(Exception):
    """Erro base do domínio da escala litúrgica."""


# =========================
# Regras de atribuição de funções
# =========================

class RoleAssignmentError(LiturgyError):
    """Violação de regra ao montar a escala de um dia."""


class ConflictError(RoleAssignmentError):
    """O voluntário já ocupa uma função incompatível no mesmo dia."""

    def __init__(self, slot: str, volunteer_id: int, conflicting_slot: str):
        self.slot = slot
        self.volunteer_id = volunteer_id
        self.conflicting_slot = conflicting_slot
        super().__init__(
            f"Voluntário {volunteer_id} já está em '{conflicting_slot}' e não pode ser escalado em '{slot}'."
        )


class CapacityError(RoleAssignmentError):
    """A função atingiu o número máximo de voluntários."""

    def __init__(self, slot: str, limit: int):
        self.slot = slot
        self.limit = limit
        super().__init__(f"'{slot}' aceita no máximo {limit} voluntário(s).")


class IncompleteError(RoleAssignmentError):
    """Função obrigatória sem o número exigido de voluntários no momento de salvar."""

    def __init__(self, slot: str, minimum: int, exact: bool = False):
        self.slot = slot
        self.minimum = minimum
        self.exact = exact
        qualifier = "exatamente" if exact else "pelo menos"
        super().__init__(f"'{slot}' precisa de {qualifier} {minimum} voluntário(s).")


class UnknownSlotError(RoleAssignmentError):
    """Chave de função desconhecida recebida na fronteira."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Função desconhecida: {key!r}.")


class UnavailableVolunteerError(RoleAssignmentError):
    """Voluntário sem inscrição na data (ou inexistente)."""

    def __init__(self, date_string: str, volunteer_ids):
        self.date_string = date_string
        self.volunteer_ids = sorted(volunteer_ids)
        ids = ", ".join(str(v) for v in self.volunteer_ids)
        super().__init__(f"Voluntário(s) {ids} não inscrito(s) em {date_string}.")


# =========================
# Fluxo do mês
# =========================

class MonthClosedError(LiturgyError):
    """Inscrições do mês estão fechadas."""


class MonthOpenError(LiturgyError):
    """A escala só pode ser salva depois que as inscrições do mês forem fechadas."""


class DateNotEnabledError(LiturgyError):
    """A data não está habilitada para inscrição neste mês."""


class StaleAssignmentError(LiturgyError):
    """A escala foi alterada por outra pessoa desde a última leitura."""

    def __init__(self, date_string: str, expected: int, current: int):
        self.date_string = date_string
        self.expected = expected
        self.current = current
        super().__init__(
            f"Escala de {date_string} mudou (versão esperada {expected}, atual {current})."
        )


# =========================
# Diretório / armazenamento
# =========================

class NotFoundError(LiturgyError):
    """Registro não encontrado por nome ou id."""

    def __init__(self, what: str, key: Optional[object] = None):
        self.what = what
        self.key = key
        super().__init__(f"{what} não encontrado: {key!r}" if key is not None else f"{what} não encontrado")


class DuplicateNameError(LiturgyError):
    """Já existe um voluntário com este nome."""


class StoreError(LiturgyError):
    """Falha de leitura/escrita no banco (transporte ou permissão)."""
