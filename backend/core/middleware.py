from __future__ import annotations
import threading
from typing import Optional
import json
import logging
import uuid

_local = threading.local()

SENSITIVE = {"password", "passwd", "senha", "token", "authorization", "csrfmiddlewaretoken"}

def get_current_actor() -> Optional[str]:
    """Retorna quem está agindo no request atual ("admin"/"volunteer"), ou None fora de request."""
    return getattr(_local, "actor", None)

def _client_ip(request):
    xff = request.META.get("HTTP_X_FORWARDED_FOR")
    if xff:
        return xff.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")

def _redact_mapping(data):
    out = {}
    try:
        items = (data or {}).items()
    except AttributeError:
        return {}
    for k, v in items:
        key = str(k).lower()
        if key in SENSITIVE:
            out[k] = "***redacted***"
        else:
            # evita objetos não serializáveis
            out[k] = v if isinstance(v, (str, int, float, bool, type(None))) else str(v)
    return out

def _redact_json_excerpt(raw: bytes) -> str:
    text = raw[:2048].decode("utf-8", errors="replace")
    try:
        data = json.loads(text)
    except ValueError:
        return text
    if isinstance(data, dict):
        return json.dumps(_redact_mapping(data), ensure_ascii=False)
    return text


class AdminSessionMiddleware:
    """Anexa request.admin_session e guarda o ator num thread-local para a auditoria."""
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        from liturgy.services.session import AdminSession

        request.admin_session = AdminSession.from_store(request.session)
        _local.actor = request.admin_session.actor
        try:
            return self.get_response(request)
        finally:
            _local.actor = None

class ErrorLoggingMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response
        self.logger = logging.getLogger("django.request")

    def __call__(self, request):
        req_id = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())
        request._request_id = req_id
        try:
            response = self.get_response(request)
        except Exception:
            self._log_exception(request)
            raise
        if getattr(response, "status_code", 200) >= 500:
            self._log_5xx(request, response)
        return response

    def _build_context(self, request):
        content_type = request.META.get("CONTENT_TYPE", "")
        body_excerpt = None

        if "application/json" in content_type:
            try:
                body_excerpt = _redact_json_excerpt(request.body or b"")
            except Exception:
                body_excerpt = "<unavailable>"

        session = getattr(request, "admin_session", None)
        actor = session.actor if session is not None else "anonymous"

        return {
            "id": getattr(request, "_request_id", None),
            "method": request.method,
            "path": request.get_full_path(),
            "ip": _client_ip(request),
            "actor": actor,
            "ua": request.META.get("HTTP_USER_AGENT", ""),
            "referer": request.META.get("HTTP_REFERER", ""),
            "get": _redact_mapping(getattr(request, "GET", {})),
            "post": _redact_mapping(getattr(request, "POST", {})),
            "json_body_excerpt": body_excerpt,
        }

    def _log_exception(self, request):
        ctx = self._build_context(request)
        self.logger.error(
            "Unhandled exception | ctx=%s",
            json.dumps(ctx, ensure_ascii=False),
            exc_info=True,
        )

    def _log_5xx(self, request, response):
        ctx = self._build_context(request)
        ctx["status_code"] = getattr(response, "status_code", None)
        self.logger.error(
            "5xx response | ctx=%s",
            json.dumps(ctx, ensure_ascii=False),
        )
