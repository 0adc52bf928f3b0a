from __future__ import annotations

from django.db.models.signals import post_save, post_delete, pre_save

from .models import (
    Announcement,
    Availability,
    EnabledDates,
    MonthOpenStatus,
    PrayerText,
    RoleAssignment,
    Volunteer,
)
from liturgy.services.audit import audit, snapshot_instance

AUDITED_MODELS = (
    Volunteer,
    Availability,
    EnabledDates,
    MonthOpenStatus,
    RoleAssignment,
    Announcement,
    PrayerText,
)

# ========= Auditoria genérica =========

def _capture_before(sender, instance, **kwargs) -> None:
    """Captura o estado anterior ao salvar (None na criação)."""
    instance._before_snapshot = None
    if not instance.pk:
        return
    old = sender.objects.filter(pk=instance.pk).first()
    if old is not None:
        instance._before_snapshot = snapshot_instance(old)

def _audit_save(sender, instance, created: bool, **kwargs) -> None:
    action = "create" if created else "update"
    audit(action, instance, before=getattr(instance, "_before_snapshot", None), after=snapshot_instance(instance))

def _audit_delete(sender, instance, **kwargs) -> None:
    audit("delete", instance, before=snapshot_instance(instance), after=None)

for _model in AUDITED_MODELS:
    pre_save.connect(_capture_before, sender=_model, dispatch_uid=f"audit_pre_save_{_model.__name__}")
    post_save.connect(_audit_save, sender=_model, dispatch_uid=f"audit_post_save_{_model.__name__}")
    post_delete.connect(_audit_delete, sender=_model, dispatch_uid=f"audit_post_delete_{_model.__name__}")
