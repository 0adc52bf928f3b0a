from liturgy.domain.models import (  # noqa: F401
    Announcement,
    AuditLog,
    Availability,
    EnabledDates,
    MonthOpenStatus,
    PrayerSlot,
    PrayerText,
    RoleAssignment,
    Volunteer,
)
