from rest_framework import serializers

from liturgy.domain.models import PrayerSlot, Volunteer
from liturgy.domain.roles import RoleSlot

class VolunteerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Volunteer
        fields = ["id", "name", "created_at", "updated_at"]
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_name(self, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Informe o nome.")
        return value

class IdentifySerializer(serializers.Serializer):
    name = serializers.CharField(trim_whitespace=True)

class AvailabilityToggleSerializer(serializers.Serializer):
    date = serializers.DateField()
    available = serializers.BooleanField()

class MonthOpenSerializer(serializers.Serializer):
    is_open = serializers.BooleanField()

class EnabledDatesSerializer(serializers.Serializer):
    dates = serializers.ListField(child=serializers.DateField(), allow_empty=True)

class AnnouncementSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)

class PrayerTextSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)

class SelectionsField(serializers.DictField):
    """Mapa função -> lista de ids; chaves desconhecidas são rejeitadas."""
    child = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=True)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        unknown = sorted(set(value) - set(RoleSlot.values))
        if unknown:
            raise serializers.ValidationError(f"Funções desconhecidas: {', '.join(unknown)}")
        return value

class AssignmentSaveSerializer(serializers.Serializer):
    selections = SelectionsField()
    expected_version = serializers.IntegerField(required=False, allow_null=True, min_value=0)

class AssignmentToggleSerializer(serializers.Serializer):
    slot = serializers.ChoiceField(choices=RoleSlot.choices)
    volunteer_id = serializers.IntegerField(min_value=1)
    selections = SelectionsField(required=False)

def prayer_slot_or_error(slot: int) -> PrayerSlot:
    try:
        return PrayerSlot(int(slot))
    except ValueError:
        raise serializers.ValidationError({"slot": "A prece deve estar entre 1 e 4."}) from None
