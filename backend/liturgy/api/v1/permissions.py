from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, CSRFCheck
from rest_framework.permissions import SAFE_METHODS, BasePermission


class AdminSessionAuthentication(BaseAuthentication):
    """Não identifica usuários; só exige CSRF nas escritas do modo administrador.

    O modo administrador vive na sessão do Django (cookie), então as escritas
    precisam da mesma proteção CSRF que as views HTML.
    """

    def authenticate(self, request):
        session = getattr(request._request, "admin_session", None)
        if session is not None and session.is_admin and request.method not in SAFE_METHODS:
            self.enforce_csrf(request)
        return None

    def enforce_csrf(self, request):
        def dummy_get_response(request):  # pragma: no cover
            return None

        check = CSRFCheck(dummy_get_response)
        check.process_request(request)
        reason = check.process_view(request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f"CSRF Failed: {reason}")


class IsAdminSession(BasePermission):
    """Libera apenas requests com sessão de administrador válida."""
    message = "Acesso restrito ao modo administrador."

    def has_permission(self, request, view):
        session = getattr(request, "admin_session", None)
        return bool(session and session.is_admin)


class IsAdminSessionOrReadOnly(IsAdminSession):
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().has_permission(request, view)
