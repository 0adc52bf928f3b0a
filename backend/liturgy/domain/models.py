from __future__ import annotations

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

# =========================
# Choices canônicos
# =========================

class PrayerSlot(models.IntegerChoices):
    PRAYER_1 = 1, "Prece 1"
    PRAYER_2 = 2, "Prece 2"
    PRAYER_3 = 3, "Prece 3"
    PRAYER_4 = 4, "Prece 4"

# =========================
# Modelos
# =========================

class Volunteer(models.Model):
    """Representa um voluntário da pastoral litúrgica."""
    name = models.CharField(max_length=120, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        verbose_name = "Voluntário"
        verbose_name_plural = "Voluntários"
        ordering = ["name"]

    def __str__(self):
        return self.name

class Availability(models.Model):
    """Presença de um voluntário em uma data: existir = disponível."""
    volunteer = models.ForeignKey(Volunteer, on_delete=models.CASCADE, related_name="availabilities")
    date = models.DateField(db_index=True)
    timestamp = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Disponibilidade"
        verbose_name_plural = "Disponibilidades"
        constraints = [
            models.UniqueConstraint(fields=("date", "volunteer"), name="uniq_availability_date_volunteer"),
        ]
        indexes = [
            models.Index(fields=["volunteer", "date"], name="availability_volunteer_idx"),
        ]

    def __str__(self):
        return f"{self.date:%Y-%m-%d} {self.volunteer_id}"

class EnabledDates(models.Model):
    """Datas que o coordenador abriu para inscrição em um mês.

    Ausência de registro significa "todos os domingos"; lista vazia significa nenhuma data.
    """
    year = models.PositiveIntegerField(db_index=True)
    month = models.PositiveIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    dates = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Datas habilitadas"
        verbose_name_plural = "Datas habilitadas"
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(fields=("year", "month"), name="uniq_enabled_dates_month"),
        ]

    def __str__(self):
        return f"{self.year}-{self.month:02d}"

class MonthOpenStatus(models.Model):
    """Indica se as inscrições de um mês estão abertas."""
    year = models.PositiveIntegerField(db_index=True)
    month = models.PositiveIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    is_open = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Status do mês"
        verbose_name_plural = "Status dos meses"
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(fields=("year", "month"), name="uniq_month_open_status"),
        ]

    def __str__(self):
        return f"{self.year}-{self.month:02d} ({'aberto' if self.is_open else 'fechado'})"

class RoleAssignment(models.Model):
    """Escala de um dia: cada função mapeada para a lista de ids de voluntários.

    Os ids ficam em JSON (sem FK): excluir um voluntário não altera escalas já salvas.
    """
    date = models.DateField(unique=True)
    selections = models.JSONField(default=dict)
    version = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Escala do dia"
        verbose_name_plural = "Escalas dos dias"
        ordering = ["date"]

    def __str__(self):
        return f"{self.date:%Y-%m-%d} (v{self.version})"

class Announcement(models.Model):
    """Aviso livre publicado para um mês."""
    year = models.PositiveIntegerField(db_index=True)
    month = models.PositiveIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])
    content = models.TextField(blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Aviso"
        verbose_name_plural = "Avisos"
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(fields=("year", "month"), name="uniq_announcement_month"),
        ]

    def __str__(self):
        return f"{self.year}-{self.month:02d}"

class PrayerText(models.Model):
    """Texto de uma prece da oração universal para uma data."""
    date = models.DateField(db_index=True)
    slot = models.PositiveSmallIntegerField(choices=PrayerSlot.choices)
    content = models.TextField(blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Prece"
        verbose_name_plural = "Preces"
        ordering = ["date", "slot"]
        constraints = [
            models.UniqueConstraint(fields=("date", "slot"), name="uniq_prayer_date_slot"),
        ]

    def __str__(self):
        return f"{self.date:%Y-%m-%d} #{self.slot}"

class AuditLog(models.Model):
    """Registra ações de criação, atualização e exclusão em outros modelos."""
    action = models.CharField(max_length=50, db_index=True)
    table = models.CharField(max_length=50, db_index=True)
    record_id = models.CharField(max_length=50)
    before = models.JSONField(blank=True, null=True)
    after = models.JSONField(blank=True, null=True)
    actor = models.CharField(max_length=30, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = "Auditoria"
        verbose_name_plural = "Auditorias"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["table", "created_at"], name="audit_table_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.created_at:%Y-%m-%d %H:%M:%S} | {self.table}:{self.record_id} | {self.action}"
