# tasks/serializers.py

from rest_framework import serializers
from .models import Task


class TaskSerializer(serializers.ModelSerializer):
    goal_title = serializers.ReadOnlyField(source='goal.title')

    class Meta:
        model = Task
        fields = [
            'id', 'title', 'description', 'goal', 'goal_title', 'priority', 'status',
            'scheduled_date', 'scheduled_time', 'completed_at', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'completed_at', 'created_at', 'updated_at']

    def validate_goal(self, goal):
        # A task may only point at one of the requester's own goals
        if goal is not None and goal.user_id != self.context['request'].user.id:
            raise serializers.ValidationError("Goal not found.")
        return goal

    def create(self, validated_data):
        user = self.context['request'].user
        if not user or not user.is_authenticated:
            raise serializers.ValidationError("Authentication required to create a task.")

        validated_data['user'] = user
        return super().create(validated_data)


class RecommendNextSerializer(serializers.Serializer):
    task_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        min_length=2,
        max_length=100,
    )


class DecisionFeedbackSerializer(serializers.Serializer):
    decision_log_id = serializers.IntegerField(min_value=1)
    user_choice = serializers.IntegerField(min_value=1)
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)


class ParseNaturalLanguageSerializer(serializers.Serializer):
    input = serializers.CharField(max_length=500, trim_whitespace=True)
