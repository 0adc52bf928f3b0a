from typing import Tuple, Any
from datetime import date
import json

from django.http import HttpRequest
from django.utils import timezone
from django.conf import settings

MIN_YEAR, MAX_YEAR = 1, 9999

# =========================
# Helpers
# =========================

def _get_ym_from_request(request: HttpRequest, default_today: bool = True) -> Tuple[int, int, str | None]:
    """Extrai ano e mês da query string (ou do corpo JSON)."""
    if hasattr(request, "query_params"):
        qp = request.query_params
        dp = getattr(request, "data", {}) or {}
    else:
        qp = getattr(request, "GET", {}) or {}
        dp = {}
        if request.META.get("CONTENT_TYPE", "").startswith("application/json"):
            try:
                dp = json.loads((request.body or b"{}").decode("utf-8")) or {}
            except ValueError:
                dp = {}
    y = qp.get("year") or qp.get("ano") or dp.get("year") or dp.get("ano")
    m = qp.get("month") or qp.get("mes") or dp.get("month") or dp.get("mes")

    if y is None or m is None:
        if not default_today:
            return None, None, "Parâmetros 'year/ano' e 'month/mes' são obrigatórios."
        today = timezone.localdate()
        y = y or today.year
        m = m or today.month
    try:
        y = int(y)
        m = int(m)
    except (TypeError, ValueError):
        return None, None, "Parâmetros 'year' e 'month' devem ser números inteiros."
    if not (MIN_YEAR <= y <= MAX_YEAR):
        return None, None, f"Parâmetro 'year' deve estar entre {MIN_YEAR} e {MAX_YEAR}."
    if not (1 <= m <= 12):
        return None, None, "Parâmetro 'month' deve estar entre 1 e 12."
    return y, m, None

def _get_setting(name: str, default: Any = None) -> Any:
    """Obtém uma configuração do Django settings com um valor padrão."""
    return getattr(settings, name, default)

def month_key(year: int, month: int) -> str:
    """Chave 'yyyy-MM' usada para registros mensais."""
    return f"{int(year):04d}-{int(month):02d}"

def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Desloca (ano, mês) por delta meses."""
    idx = year * 12 + (month - 1) + delta
    return idx // 12, idx % 12 + 1

def parse_date_string(value: str | date) -> date:
    """Converte 'yyyy-MM-dd' em date.

    Raises:
        ValueError: Se o formato for inválido.
    """
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())
