from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, MutableMapping, Optional

from django.utils import timezone

from liturgy.utils import _get_setting

log = logging.getLogger(__name__)

SESSION_KEY = "liturgy_admin_until"

def _ttl() -> timedelta:
    return timedelta(minutes=int(_get_setting("ADMIN_SESSION_TTL_MINUTES", 720)))

def check_password(candidate: Optional[str]) -> bool:
    """Compara com a senha compartilhada de administração."""
    expected = str(_get_setting("ADMIN_PASSWORD", "") or "")
    if not expected or candidate is None:
        return False
    return hmac.compare_digest(str(candidate).encode("utf-8"), expected.encode("utf-8"))

@dataclass
class AdminSession:
    """Contexto de sessão do modo administrador, anexado a cada request.

    Guardado na sessão do Django como um instante de expiração; expira sozinho
    após ADMIN_SESSION_TTL_MINUTES.
    """
    store: MutableMapping[str, Any]
    expires_at: Optional[datetime] = None

    @classmethod
    def from_store(cls, store: MutableMapping[str, Any]) -> AdminSession:
        raw = store.get(SESSION_KEY)
        expires_at = None
        if raw:
            try:
                expires_at = datetime.fromisoformat(raw)
            except (TypeError, ValueError):
                log.warning("Valor de sessão administrativa inválido; descartando.")
                store.pop(SESSION_KEY, None)
        return cls(store=store, expires_at=expires_at)

    @property
    def is_admin(self) -> bool:
        if self.expires_at is None:
            return False
        if timezone.now() >= self.expires_at:
            self.logout()
            return False
        return True

    def login(self, password: Optional[str]) -> bool:
        if not check_password(password):
            log.warning("Tentativa de login administrativo com senha incorreta.")
            return False
        # nova chave de sessão ao elevar o privilégio (como django.contrib.auth.login)
        cycle_key = getattr(self.store, "cycle_key", None)
        if callable(cycle_key):
            cycle_key()
        self.expires_at = timezone.now() + _ttl()
        self.store[SESSION_KEY] = self.expires_at.isoformat()
        return True

    def logout(self) -> None:
        self.expires_at = None
        self.store.pop(SESSION_KEY, None)

    @property
    def actor(self) -> str:
        return "admin" if self.is_admin else "volunteer"
