# goals/serializers.py

from rest_framework import serializers
from .models import Goal


class GoalSerializer(serializers.ModelSerializer):
    user_email = serializers.ReadOnlyField(source='user.email')
    task_count = serializers.SerializerMethodField()

    class Meta:
        model = Goal
        fields = (
            'id', 'user', 'user_email', 'title', 'description', 'target_date',
            'task_count', 'created_at', 'updated_at', 'is_archived'
        )
        read_only_fields = ('id', 'user', 'created_at', 'updated_at')

    def get_task_count(self, obj):
        return obj.tasks.count()

    # The owner always comes from the request, never from the payload.
    def create(self, validated_data):
        user = self.context['request'].user
        if not user.is_authenticated:
            raise serializers.ValidationError("Authentication required to create a goal.")

        validated_data['user'] = user
        return super().create(validated_data)
