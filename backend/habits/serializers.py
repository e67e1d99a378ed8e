# habits/serializers.py

from rest_framework import serializers

from lifeboard.dates import canonical_today

from .models import Habit, RecurrenceType, Routine


class WeekdaysField(serializers.ListField):
    """Sunday-based weekday indices; always rendered in ascending order."""

    def __init__(self, **kwargs):
        kwargs.setdefault('child', serializers.IntegerField(min_value=0, max_value=6))
        super().__init__(**kwargs)

    def to_representation(self, data):
        return sorted(super().to_representation(data))


class RecurringItemSerializer(serializers.ModelSerializer):
    """Common handling of the recurrence columns for habits and routines."""

    # Maps onto the model's ``weekdays`` property, which owns the JSON text
    recurrence_days = WeekdaysField(source='weekdays', required=False, allow_null=True, allow_empty=False)
    is_checked_today = serializers.SerializerMethodField()

    def get_is_checked_today(self, obj):
        return obj.checks.filter(date=canonical_today()).exists()

    def validate(self, attrs):
        recurrence_type = attrs.get(
            'recurrence_type',
            self.instance.recurrence_type if self.instance else RecurrenceType.DAILY,
        )
        weekdays = attrs.get('weekdays', self.instance.weekdays if self.instance else None)

        if recurrence_type == RecurrenceType.WEEKLY and not weekdays:
            raise serializers.ValidationError(
                {'recurrence_days': "Weekly recurrence needs at least one weekday."}
            )
        return attrs

    # The owner always comes from the request, never from the payload.
    def create(self, validated_data):
        user = self.context['request'].user
        if not user.is_authenticated:
            raise serializers.ValidationError("Authentication required.")

        validated_data['user'] = user
        return super().create(validated_data)


class HabitSerializer(RecurringItemSerializer):
    class Meta:
        model = Habit
        fields = (
            'id', 'title', 'description', 'icon', 'recurrence_type', 'recurrence_days',
            'active', 'order', 'is_checked_today', 'created_at', 'updated_at'
        )
        read_only_fields = ('id', 'created_at', 'updated_at')


class RoutineSerializer(RecurringItemSerializer):
    class Meta:
        model = Routine
        fields = (
            'id', 'title', 'description', 'priority', 'recurrence_type', 'recurrence_days',
            'time_of_day', 'active', 'is_checked_today', 'created_at', 'updated_at'
        )
        read_only_fields = ('id', 'created_at', 'updated_at')


class GenerateRoutineTasksSerializer(serializers.Serializer):
    """Window of days to expand routines into tasks; starts today by default."""
    start_date = serializers.DateField(required=False)
    days = serializers.IntegerField(required=False, default=7, min_value=1, max_value=31)
