from __future__ import annotations

import logging
from datetime import date

from django.http import HttpResponse
from django_filters import rest_framework as filters
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from liturgy.domain.exceptions import (
    DateNotEnabledError,
    DuplicateNameError,
    LiturgyError,
    MonthClosedError,
    MonthOpenError,
    NotFoundError,
    RoleAssignmentError,
    StaleAssignmentError,
    StoreError,
)
from liturgy.domain.repositories import (
    AvailabilityRepository,
    PublicationRepository,
    VolunteerRepository,
)
from liturgy.domain.roles import RoleSelections
from liturgy.services.assignment import AssignmentService
from liturgy.services.availability import AvailabilityService
from liturgy.services.exporters.export_ics import export_schedule_ics
from liturgy.services.exporters.export_xlsx import export_schedule_xlsx
from liturgy.services.publication import PrayerCard, month_overview, prayer_cards
from liturgy.utils import MAX_YEAR, MIN_YEAR, _get_ym_from_request, parse_date_string

from .permissions import IsAdminSession, IsAdminSessionOrReadOnly
from .serializers import (
    AnnouncementSerializer,
    AssignmentSaveSerializer,
    AssignmentToggleSerializer,
    AvailabilityToggleSerializer,
    EnabledDatesSerializer,
    IdentifySerializer,
    MonthOpenSerializer,
    PrayerTextSerializer,
    VolunteerSerializer,
    prayer_slot_or_error,
)

log = logging.getLogger(__name__)

GENERIC_FAILURE = "Não foi possível concluir a operação. Tente novamente."

# =========================
# Helpers
# =========================

def _error_response(exc: Exception) -> Response:
    """Converte erros de domínio em respostas HTTP; o estado anterior permanece."""
    if isinstance(exc, StoreError):
        return Response({"detail": GENERIC_FAILURE}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    if isinstance(exc, NotFoundError):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, StaleAssignmentError):
        return Response(
            {"detail": str(exc), "current_version": exc.current},
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, RoleAssignmentError):
        body = {"detail": str(exc), "code": type(exc).__name__}
        slot = getattr(exc, "slot", None)
        if slot:
            body["slot"] = slot
        return Response(body, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, (MonthClosedError, MonthOpenError, DateNotEnabledError)):
        return Response({"detail": str(exc), "code": type(exc).__name__}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, (DuplicateNameError, ValueError)):
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    log.error("Erro de domínio sem mapeamento: %r", exc)
    return Response({"detail": GENERIC_FAILURE}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

def _check_year(year: int) -> Response | None:
    if not (MIN_YEAR <= year <= MAX_YEAR):
        return Response({"detail": "Ano inválido"}, status=status.HTTP_400_BAD_REQUEST)
    return None

def _check_month(year: int, month: int) -> Response | None:
    if (err := _check_year(year)):
        return err
    if not (1 <= month <= 12):
        return Response({"detail": "Mês inválido"}, status=status.HTTP_400_BAD_REQUEST)
    return None

def _parse_date_or_400(date_string: str):
    try:
        return parse_date_string(date_string), None
    except ValueError:
        return None, Response({"detail": "Data inválida (use AAAA-MM-DD)."}, status=status.HTTP_400_BAD_REQUEST)

class VolunteerFilter(filters.FilterSet):
    name = filters.CharFilter(field_name="name", lookup_expr="icontains")

# =========================
# Voluntários
# =========================

@api_view(["GET", "POST"])
@permission_classes([IsAdminSessionOrReadOnly])
def volunteers(request):
    if request.method == "GET":
        qs = VolunteerFilter(request.query_params, queryset=VolunteerRepository.queryset()).qs
        return Response(VolunteerSerializer(qs, many=True).data)

    ser = VolunteerSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    name = ser.validated_data["name"]
    try:
        if VolunteerRepository.name_taken(name):
            raise DuplicateNameError(f"Já existe um voluntário chamado '{name}'.")
        volunteer = VolunteerRepository.add(name)
    except LiturgyError as exc:
        return _error_response(exc)
    return Response(VolunteerSerializer(volunteer).data, status=status.HTTP_201_CREATED)

@api_view(["PATCH", "DELETE"])
@permission_classes([IsAdminSession])
def volunteer_detail(request, volunteer_id: int):
    try:
        if request.method == "DELETE":
            removed = VolunteerRepository.remove(volunteer_id)
            return Response({"availability_removed": removed})
        ser = VolunteerSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        name = ser.validated_data.get("name")
        if not name:
            return Response({"detail": "Informe o nome."}, status=status.HTTP_400_BAD_REQUEST)
        if VolunteerRepository.name_taken(name, exclude_id=volunteer_id):
            raise DuplicateNameError(f"Já existe um voluntário chamado '{name}'.")
        volunteer = VolunteerRepository.rename(volunteer_id, name)
    except LiturgyError as exc:
        return _error_response(exc)
    return Response(VolunteerSerializer(volunteer).data)

@api_view(["POST"])
@permission_classes([AllowAny])
def identify_volunteer(request):
    """Tela do voluntário: encontra o id pelo nome digitado."""
    ser = IdentifySerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    try:
        volunteer_id = VolunteerRepository.find_id_by_name(ser.validated_data["name"])
    except LiturgyError as exc:
        return _error_response(exc)
    return Response({"id": volunteer_id, "name": ser.validated_data["name"]})

# =========================
# Mês: status, datas e aviso
# =========================

@api_view(["GET"])
@permission_classes([AllowAny])
def month_detail(request, year: int, month: int):
    if (err := _check_month(year, month)):
        return err
    try:
        return Response(month_overview(year, month))
    except LiturgyError as exc:
        return _error_response(exc)

@api_view(["PUT"])
@permission_classes([IsAdminSession])
def month_open(request, year: int, month: int):
    if (err := _check_month(year, month)):
        return err
    ser = MonthOpenSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    try:
        PublicationRepository.set_month_open(year, month, ser.validated_data["is_open"])
    except LiturgyError as exc:
        return _error_response(exc)
    return Response({"year": year, "month": month, "is_open": ser.validated_data["is_open"]})

@api_view(["PUT"])
@permission_classes([IsAdminSession])
def month_dates(request, year: int, month: int):
    if (err := _check_month(year, month)):
        return err
    ser = EnabledDatesSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    try:
        dates = PublicationRepository.set_enabled_dates(
            year, month, [d.isoformat() for d in ser.validated_data["dates"]]
        )
    except (LiturgyError, ValueError) as exc:
        return _error_response(exc)
    return Response({"year": year, "month": month, "enabled_dates": dates})

@api_view(["GET", "PUT"])
@permission_classes([IsAdminSessionOrReadOnly])
def announcement(request, year: int, month: int):
    if (err := _check_month(year, month)):
        return err
    try:
        if request.method == "PUT":
            ser = AnnouncementSerializer(data=request.data)
            ser.is_valid(raise_exception=True)
            PublicationRepository.set_announcement(year, month, ser.validated_data["content"])
        content = PublicationRepository.get_announcement(year, month)
    except LiturgyError as exc:
        return _error_response(exc)
    return Response({"year": year, "month": month, "content": content})

# =========================
# Inscrições
# =========================

@api_view(["GET", "PUT"])
@permission_classes([AllowAny])
def volunteer_availability(request, year: int, month: int, volunteer_id: int):
    """GET: mapa data -> disponível. PUT: o voluntário marca/desmarca uma data."""
    if (err := _check_month(year, month)):
        return err
    try:
        if request.method == "PUT":
            ser = AvailabilityToggleSerializer(data=request.data)
            ser.is_valid(raise_exception=True)
            d: date = ser.validated_data["date"]
            if (d.year, d.month) != (year, month):
                return Response({"detail": "A data não pertence ao mês."}, status=status.HTTP_400_BAD_REQUEST)
            session = getattr(request, "admin_session", None)
            if session is not None and session.is_admin:
                VolunteerRepository.get(volunteer_id)
                AvailabilityRepository.set_availability(volunteer_id, d.isoformat(), ser.validated_data["available"])
            else:
                AvailabilityService.toggle_for_volunteer(volunteer_id, d.isoformat(), ser.validated_data["available"])
        else:
            VolunteerRepository.get(volunteer_id)
        data = AvailabilityService.month_for_volunteer(volunteer_id, year, month)
    except LiturgyError as exc:
        return _error_response(exc)
    return Response({"volunteer_id": volunteer_id, "availability": data})

@api_view(["GET"])
@permission_classes([AllowAny])
def application_status(request, year: int, month: int):
    """Inscritos por data habilitada do mês."""
    if (err := _check_month(year, month)):
        return err
    try:
        by_date = AvailabilityService.status_for_month(year, month)
    except LiturgyError as exc:
        return _error_response(exc)
    return Response({
        ds: [{"id": v.id, "name": v.name} for v in vs]
        for ds, vs in by_date.items()
    })

# =========================
# Escala por data
# =========================

@api_view(["GET", "PUT"])
@permission_classes([IsAdminSession])
def assignment_detail(request, date_string: str):
    d, err = _parse_date_or_400(date_string)
    if err:
        return err
    try:
        if request.method == "PUT":
            ser = AssignmentSaveSerializer(data=request.data)
            ser.is_valid(raise_exception=True)
            selections = RoleSelections.from_dict(ser.validated_data["selections"])
            AssignmentService.save(d.isoformat(), selections, ser.validated_data.get("expected_version"))
        selections, version = AssignmentService.load_with_version(d.isoformat())
        available = AvailabilityService.available_sorted(d.isoformat())
        tallies = AssignmentService.tallies_for([v.id for v in available], d.year)
    except LiturgyError as exc:
        return _error_response(exc)
    return Response({
        "date": d.isoformat(),
        "version": version,
        "selections": selections.to_dict(),
        "available": [
            {"id": v.id, "name": v.name, "tally": tallies[v.id].to_dict()} for v in available
        ],
    })

@api_view(["POST"])
@permission_classes([IsAdminSession])
def assignment_toggle(request, date_string: str):
    """Aplica um toggle ao rascunho enviado pelo cliente (ou à escala salva) sem gravar.

    Um rascunho vazio (`{}`) é um estado válido e não cai na escala salva.
    """
    d, err = _parse_date_or_400(date_string)
    if err:
        return err
    ser = AssignmentToggleSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    try:
        if "selections" in ser.validated_data:
            draft = RoleSelections.from_dict(ser.validated_data["selections"])
        else:
            draft = AssignmentService.load(d.isoformat())
        slot, volunteer_id = ser.validated_data["slot"], ser.validated_data["volunteer_id"]
        result = AssignmentService.toggle(slot, volunteer_id, draft)
        if not draft.contains(slot, volunteer_id):
            AssignmentService.check_assignable(d.isoformat(), [volunteer_id])
    except LiturgyError as exc:
        return _error_response(exc)
    return Response({"date": d.isoformat(), "selections": result.to_dict()})

@api_view(["GET"])
@permission_classes([IsAdminSession])
def tallies(request, year: int):
    if (err := _check_year(year)):
        return err
    raw = request.query_params.get("ids", "")
    try:
        ids = [int(x) for x in raw.split(",") if x.strip()]
    except ValueError:
        return Response({"detail": "Parâmetro 'ids' deve ser uma lista de inteiros."}, status=status.HTTP_400_BAD_REQUEST)
    try:
        result = AssignmentService.tallies_for(ids, year)
    except LiturgyError as exc:
        return _error_response(exc)
    return Response({str(vid): t.to_dict() for vid, t in result.items()})

@api_view(["GET"])
@permission_classes([AllowAny])
def schedule_month(request, year: int, month: int):
    if (err := _check_month(year, month)):
        return err
    try:
        rows = AssignmentService.month_schedule(year, month)
    except LiturgyError as exc:
        return _error_response(exc)
    return Response([row.to_dict() for row in rows])

# =========================
# Preces
# =========================

@api_view(["GET"])
@permission_classes([AllowAny])
def prayers(request, date_string: str):
    d, err = _parse_date_or_400(date_string)
    if err:
        return err
    try:
        cards = prayer_cards(d.isoformat())
        published = AssignmentService.selections_with_names(d.isoformat())
    except LiturgyError as exc:
        return _error_response(exc)
    return Response({
        "date": d.isoformat(),
        "prayers": [
            {**card.to_dict(), "volunteers": [v.name for v in published.by_slot[f"prayer_{card.slot}"]]}
            for card in cards
        ],
    })

@api_view(["PUT"])
@permission_classes([IsAdminSession])
def prayer_detail(request, date_string: str, slot: int):
    d, err = _parse_date_or_400(date_string)
    if err:
        return err
    prayer_slot = prayer_slot_or_error(slot)
    ser = PrayerTextSerializer(data=request.data)
    ser.is_valid(raise_exception=True)
    try:
        card = PrayerCard.load(d.isoformat(), prayer_slot)
        card.start_editing()
        card.save(ser.validated_data["content"])
    except LiturgyError as exc:
        return _error_response(exc)
    return Response(card.to_dict())

# =========================
# Exportações
# =========================

@api_view(["GET"])
@permission_classes([AllowAny])
def export_xlsx(request):
    year, month, err = _get_ym_from_request(request)
    if err:
        return Response({"detail": err}, status=status.HTTP_400_BAD_REQUEST)
    try:
        content = export_schedule_xlsx(year, month)
    except LiturgyError as exc:
        return _error_response(exc)
    resp = HttpResponse(content, content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
    resp["Content-Disposition"] = f'attachment; filename="escala-{year}-{month:02d}.xlsx"'
    return resp

@api_view(["GET"])
@permission_classes([AllowAny])
def export_ics(request):
    year, month, err = _get_ym_from_request(request)
    if err:
        return Response({"detail": err}, status=status.HTTP_400_BAD_REQUEST)
    try:
        content = export_schedule_ics(year, month)
    except LiturgyError as exc:
        return _error_response(exc)
    resp = HttpResponse(content, content_type="text/calendar")
    resp["Content-Disposition"] = f'attachment; filename="escala-{year}-{month:02d}.ics"'
    return resp
