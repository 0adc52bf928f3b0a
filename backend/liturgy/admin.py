from __future__ import annotations

from django.contrib import admin
from django.db.models import Count

from liturgy.domain.models import (
    Announcement,
    AuditLog,
    Availability,
    EnabledDates,
    MonthOpenStatus,
    PrayerText,
    RoleAssignment,
    Volunteer,
)
from liturgy.domain.roles import RoleSelections, is_complete

# =========================
# Filtros utilitários
# =========================

class DateMonthFilter(admin.SimpleListFilter):
    title = "Mês/Ano"
    parameter_name = "ym"

    def lookups(self, request, model_admin):
        pairs = (
            model_admin.model.objects
            .values_list("date__year", "date__month")
            .distinct()
            .order_by("date__year", "date__month")
        )
        return [(f"{y}-{m}", f"{m:02d}/{y}") for (y, m) in pairs]

    def queryset(self, request, qs):
        val = self.value()
        if not val:
            return qs
        y, m = val.split("-")
        return qs.filter(date__year=int(y), date__month=int(m))

# =========================
# Inlines
# =========================

class AvailabilityInline(admin.TabularInline):
    model = Availability
    extra = 0
    fields = ("date", "timestamp")
    readonly_fields = ("timestamp",)
    classes = ("collapse",)

# =========================
# Volunteer
# =========================

@admin.register(Volunteer)
class VolunteerAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at", "updated_at", "availability_count")
    search_fields = ("name",)
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [AvailabilityInline]
    list_per_page = 50

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(_availability_count=Count("availabilities"))

    @admin.display(description="Inscrições", ordering="_availability_count")
    def availability_count(self, obj):
        return obj._availability_count

# =========================
# Availability
# =========================

@admin.register(Availability)
class AvailabilityAdmin(admin.ModelAdmin):
    list_display = ("date", "volunteer", "timestamp")
    list_filter = (DateMonthFilter,)
    search_fields = ("volunteer__name",)
    autocomplete_fields = ("volunteer",)
    date_hierarchy = "date"
    ordering = ("date", "volunteer__name")
    list_per_page = 100

# =========================
# Registros mensais
# =========================

@admin.register(EnabledDates)
class EnabledDatesAdmin(admin.ModelAdmin):
    list_display = ("year", "month", "dates", "updated_at")
    list_filter = ("year",)
    ordering = ("-year", "-month")

@admin.register(MonthOpenStatus)
class MonthOpenStatusAdmin(admin.ModelAdmin):
    list_display = ("year", "month", "is_open", "updated_at")
    list_filter = ("year", "is_open")
    ordering = ("-year", "-month")
    actions = ["open_months", "close_months"]

    @admin.action(description="Abrir inscrições")
    def open_months(self, request, qs):
        for status in qs:
            status.is_open = True
            status.save(update_fields=["is_open", "updated_at"])

    @admin.action(description="Fechar inscrições")
    def close_months(self, request, qs):
        for status in qs:
            status.is_open = False
            status.save(update_fields=["is_open", "updated_at"])

@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ("year", "month", "updated_at")
    list_filter = ("year",)
    search_fields = ("content",)
    ordering = ("-year", "-month")

# =========================
# Escala e preces
# =========================

@admin.register(RoleAssignment)
class RoleAssignmentAdmin(admin.ModelAdmin):
    list_display = ("date", "version", "complete", "updated_at")
    list_filter = (DateMonthFilter,)
    date_hierarchy = "date"
    readonly_fields = ("version", "updated_at")
    ordering = ("-date",)

    @admin.display(boolean=True, description="Completa")
    def complete(self, obj):
        return is_complete(RoleSelections.from_dict(obj.selections))

@admin.register(PrayerText)
class PrayerTextAdmin(admin.ModelAdmin):
    list_display = ("date", "slot", "updated_at")
    list_filter = (DateMonthFilter, "slot")
    search_fields = ("content",)
    ordering = ("-date", "slot")

# =========================
# AuditLog
# =========================

@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("action", "table", "record_id", "created_at", "actor")
    list_filter = ("table", "action", "actor")
    search_fields = ("table", "record_id")
    readonly_fields = ("action", "table", "record_id", "before", "after", "actor", "created_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
    list_per_page = 50
