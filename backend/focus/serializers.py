# focus/serializers.py

from django.utils import timezone
from rest_framework import serializers

from .models import FocusSession


class FocusSessionSerializer(serializers.ModelSerializer):
    task_title = serializers.ReadOnlyField(source='task.title')
    habit_title = serializers.ReadOnlyField(source='habit.title')

    class Meta:
        model = FocusSession
        fields = [
            'id', 'task', 'task_title', 'habit', 'habit_title', 'duration', 'actual_time',
            'completed', 'interrupted', 'started_at', 'ended_at', 'created_at'
        ]
        read_only_fields = ['id', 'started_at', 'ended_at', 'created_at']
        extra_kwargs = {
            'duration': {'min_value': 1},
        }

    def _check_owner(self, obj, label):
        if obj is not None and obj.user_id != self.context['request'].user.id:
            raise serializers.ValidationError(f"{label} not found.")
        return obj

    def validate_task(self, task):
        return self._check_owner(task, "Task")

    def validate_habit(self, habit):
        return self._check_owner(habit, "Habit")

    def create(self, validated_data):
        validated_data['user'] = self.context['request'].user
        return super().create(validated_data)

    def update(self, instance, validated_data):
        # Completing or interrupting a session closes it
        if validated_data.get('completed') or validated_data.get('interrupted'):
            validated_data['ended_at'] = timezone.now()
        return super().update(instance, validated_data)
