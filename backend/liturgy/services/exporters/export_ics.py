from __future__ import annotations

from datetime import datetime, time, timedelta

from django.utils.timezone import (
    get_current_timezone,
    get_current_timezone_name,
    make_aware,
    now as tz_now,
)
from icalendar import Calendar, Event

from liturgy.domain.repositories import AssignmentRepository, VolunteerRepository
from liturgy.domain.roles import SLOTS
from liturgy.services.assignment import AssignmentService
from liturgy.services.calendar import effective_enabled_dates
from liturgy.utils import _get_setting

def _parse_time(s: str | time) -> time:
    if isinstance(s, time):
        return s
    hh, mm = str(s).split(":")
    return time(int(hh), int(mm))

def export_schedule_ics(year: int, month: int) -> bytes:
    """Exporta a escala do mês para ICS: um evento por data habilitada com escala salva.

    Args:
        year (int): O ano da escala.
        month (int): O mês da escala.

    Returns:
        bytes: O conteúdo do arquivo ICS gerado.
    """
    cal = Calendar()
    cal.add("prodid", "-//Escala Litúrgica//")
    cal.add("version", "2.0")
    cal.add("X-WR-CALNAME", f"Escala Litúrgica {year}-{month:02d}")
    cal.add("X-WR-TIMEZONE", get_current_timezone_name())

    tz = get_current_timezone()
    start_time = _parse_time(_get_setting("ICS_EVENT_TIME", "10:00"))
    duration_min = int(_get_setting("ICS_EVENT_DURATION_MINUTES", 90))
    loc = _get_setting("CALENDAR_LOCATION", None)
    now = tz_now()

    days = effective_enabled_dates(year, month)
    saved = AssignmentRepository.for_dates(d.date_string for d in days)
    ids = set()
    for selections in saved.values():
        ids |= selections.volunteer_ids()
    volunteers = VolunteerRepository.by_ids(ids)

    for day in days:
        selections = saved.get(day.date_string)
        if selections is None:
            continue
        published = AssignmentService.published_day(day, selections, volunteers)

        ev = Event()
        dtstart = make_aware(datetime.combine(day.date, start_time), tz)
        ev.add("uid", f"escala-{day.date_string}@liturgy.local")
        ev.add("dtstamp", now)
        ev.add("dtstart", dtstart)
        ev.add("dtend", dtstart + timedelta(minutes=duration_min))
        ev.add("summary", f"Escala litúrgica: {day.display}")

        desc_lines = []
        for slot in SLOTS:
            names = ", ".join(v.name for v in published.by_slot[slot.value])
            desc_lines.append(f"{slot.label}: {names or '-'}")
        ev.add("description", "\n".join(desc_lines))

        if loc:
            ev.add("location", loc)
        cal.add_component(ev)

    return cal.to_ical()
