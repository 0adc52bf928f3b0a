from django.urls import path
from . import views

urlpatterns = [
    # Voluntários
    path("volunteers", views.volunteers, name="api_volunteers"),
    path("volunteers/identify", views.identify_volunteer, name="api_volunteer_identify"),
    path("volunteers/<int:volunteer_id>", views.volunteer_detail, name="api_volunteer_detail"),

    # Mês
    path("months/<int:year>/<int:month>", views.month_detail, name="api_month_detail"),
    path("months/<int:year>/<int:month>/open", views.month_open, name="api_month_open"),
    path("months/<int:year>/<int:month>/dates", views.month_dates, name="api_month_dates"),
    path("announcements/<int:year>/<int:month>", views.announcement, name="api_announcement"),

    # Inscrições
    path("availability/<int:year>/<int:month>/<int:volunteer_id>", views.volunteer_availability, name="api_availability"),
    path("status/<int:year>/<int:month>", views.application_status, name="api_status"),

    # Escala
    path("assignments/<str:date_string>", views.assignment_detail, name="api_assignment"),
    path("assignments/<str:date_string>/toggle", views.assignment_toggle, name="api_assignment_toggle"),
    path("tallies/<int:year>", views.tallies, name="api_tallies"),
    path("schedule/<int:year>/<int:month>", views.schedule_month, name="api_month"),

    # Preces
    path("prayers/<str:date_string>", views.prayers, name="api_prayers"),
    path("prayers/<str:date_string>/<int:slot>", views.prayer_detail, name="api_prayer_detail"),

    # Exportações
    path("export/xlsx", views.export_xlsx, name="api_export_xlsx"),
    path("export/ics", views.export_ics, name="api_export_ics"),
]
