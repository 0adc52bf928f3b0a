from __future__ import annotations

from datetime import date
from functools import wraps

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_http_methods

from liturgy.domain.exceptions import LiturgyError
from liturgy.domain.repositories import PublicationRepository
from liturgy.domain.roles import SLOTS
from liturgy.forms import AdminLoginForm
from liturgy.services.assignment import AssignmentService
from liturgy.services.availability import AvailabilityService
from liturgy.services.calendar import MONTH_NAMES, day_info
from liturgy.utils import _get_ym_from_request, shift_month

# =========================
# Helpers
# =========================

def admin_required(view):
    """Redireciona para o login quando não há sessão de administrador válida."""
    @wraps(view)
    def _wrapped(request: HttpRequest, *args, **kwargs):
        session = getattr(request, "admin_session", None)
        if session is None or not session.is_admin:
            return redirect(reverse("login") + f"?next={request.get_full_path()}")
        return view(request, *args, **kwargs)
    return _wrapped

def _month_context(year: int, month: int) -> dict:
    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    today = timezone.localdate()
    return {
        "year": year,
        "month": month,
        "month_name": MONTH_NAMES[month],
        "prev_year": prev_year,
        "prev_month": prev_month,
        "next_year": next_year,
        "next_month": next_month,
        "today_year": today.year,
        "today_month": today.month,
    }

def _safe_next(request: HttpRequest) -> str:
    target = request.POST.get("next") or request.GET.get("next") or ""
    return target if target.startswith("/") and not target.startswith("//") else reverse("index")

# =========================
# Views
# =========================

def month_view(request: HttpRequest) -> HttpResponse:
    """Aviso do mês e tabela da escala publicada."""
    year, month, err = _get_ym_from_request(request)
    if err:
        messages.error(request, err)
        return redirect(reverse("index"))
    context = _month_context(year, month)
    try:
        context.update({
            "announcement": PublicationRepository.get_announcement(year, month),
            "is_open": PublicationRepository.get_month_open(year, month),
            "rows": AssignmentService.month_schedule(year, month),
        })
    except LiturgyError as exc:
        messages.error(request, str(exc))
        context.update({"announcement": "", "is_open": False, "rows": []})
    context["slots"] = SLOTS
    return render(request, "index.html", context)

@admin_required
def status_view(request: HttpRequest) -> HttpResponse:
    """Inscritos por data habilitada do mês (modo administrador)."""
    year, month, err = _get_ym_from_request(request)
    if err:
        messages.error(request, err)
        return redirect(reverse("status"))
    context = _month_context(year, month)
    try:
        by_date = AvailabilityService.status_for_month(year, month)
    except LiturgyError as exc:
        messages.error(request, str(exc))
        by_date = {}
    context["days"] = [(day_info(date.fromisoformat(ds)), vs) for ds, vs in by_date.items()]
    return render(request, "status.html", context)

@require_http_methods(["GET", "POST"])
def login_view(request: HttpRequest) -> HttpResponse:
    session = request.admin_session
    if request.method == "POST":
        form = AdminLoginForm(request.POST)
        if form.is_valid():
            if session.login(form.cleaned_data["password"]):
                messages.success(request, "Modo administrador ativado.")
                return redirect(_safe_next(request))
            form.add_error("password", "Senha incorreta.")
    else:
        form = AdminLoginForm()
    return render(request, "login.html", {"form": form, "next": request.GET.get("next", "")})

@require_http_methods(["POST"])
def logout_view(request: HttpRequest) -> HttpResponse:
    request.admin_session.logout()
    messages.info(request, "Você saiu do modo administrador.")
    return redirect(reverse("index"))
