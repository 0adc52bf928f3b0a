from __future__ import annotations

import logging
from typing import List

from django.apps import AppConfig
from django.core.checks import Error, Warning, Tags, register

from liturgy.utils import _get_setting

log = logging.getLogger(__name__)

# =========================
# System checks (validações de settings)
# =========================

def _validate_time_string(value: str, setting_name: str, error_id: str) -> List[Error]:
    try:
        hh, mm = str(value).split(":")
        h, m = int(hh), int(mm)
        if not (0 <= h <= 23 and 0 <= m <= 59):
            raise ValueError
    except ValueError:
        return [
            Error(
                f"{setting_name} deve estar no formato HH:MM (ex.: '10:00'). Valor atual: {value!r}",
                id=error_id,
            )
        ]
    return []

@register(Tags.compatibility)
def liturgy_settings_check(app_configs, **kwargs):
    """Garante que os settings essenciais estejam válidos."""
    errors: List[Error] = []

    password = _get_setting("ADMIN_PASSWORD", "")
    if not password:
        errors.append(
            Error(
                "ADMIN_PASSWORD não pode ser vazio (modo administrador ficaria inacessível).",
                id="liturgy.E001",
            )
        )

    ttl = _get_setting("ADMIN_SESSION_TTL_MINUTES", 720)
    if not isinstance(ttl, int) or ttl < 1:
        errors.append(
            Error(
                "ADMIN_SESSION_TTL_MINUTES deve ser um inteiro >= 1.",
                id="liturgy.E002",
            )
        )

    errors += _validate_time_string(
        _get_setting("ICS_EVENT_TIME", "10:00"),
        "ICS_EVENT_TIME",
        "liturgy.E003",
    )

    if not _get_setting("DEBUG", False) and password == "liturgia":
        errors.append(
            Warning(
                "ADMIN_PASSWORD está com o valor padrão em produção.",
                id="liturgy.W001",
            )
        )

    return errors

# =========================
# AppConfig
# =========================

class LiturgyConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'liturgy'
    verbose_name = "Escala Litúrgica"

    def ready(self):
        """Conecta os signals de auditoria do domínio."""
        from .domain import signals  # noqa: F401
