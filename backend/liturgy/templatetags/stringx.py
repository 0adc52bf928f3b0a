from __future__ import annotations

from typing import Iterable, Optional

from django import template
from django.utils.html import format_html, format_html_join
from django.utils.safestring import SafeString

from liturgy.domain.roles import RoleSlot

register = template.Library()

@register.filter(name="trim")
def trim(value: Optional[str]) -> str:
    """
    Remove espaços em branco no início e no fim.
    Uso: {{ texto|trim }}
    """
    if value is None:
        return ""
    return str(value).strip()

@register.filter(name="role_label")
def role_label(value) -> str:
    """
    Rótulo em português da função.
    Uso: {{ slot|role_label }} -> "1ª Leitura"
    """
    try:
        return RoleSlot(value).label
    except ValueError:
        return str(value or "")

@register.filter(name="names")
def names(volunteers: Optional[Iterable]) -> str:
    """Junta os nomes com vírgula; lista vazia vira travessão curto."""
    out = [getattr(v, "name", str(v)) for v in (volunteers or [])]
    return ", ".join(out) if out else "-"

@register.filter(name="get_item")
def get_item(mapping, key):
    """Uso: {{ row.by_slot|get_item:slot }}"""
    if not mapping:
        return None
    return mapping.get(key)

@register.filter(name="truncate_middle")
def truncate_middle(value: Optional[str], max_len: int = 20) -> str:
    """
    Corta mantendo início e fim: "abcdefghij" -> "abc…hij".
    Uso: {{ texto|truncate_middle:30 }}
    """
    if not value:
        return ""
    s = str(value)
    if len(s) <= max_len or max_len < 5:
        return s
    half = (max_len - 1) // 2
    return s[:half] + "…" + s[-half:]

@register.simple_tag
def paragraphs(text: Optional[str]) -> SafeString:
    """
    Quebra o aviso do mês em parágrafos (uma linha em branco separa).
    Uso: {% paragraphs announcement %}
    """
    blocks = [b.strip() for b in str(text or "").split("\n\n") if b.strip()]
    return format_html_join("\n", "<p>{}</p>", ((b,) for b in blocks))

@register.simple_tag
def strong(text: str) -> str:
    text = "" if text is None else text
    return format_html("<strong>{}</strong>", text)
