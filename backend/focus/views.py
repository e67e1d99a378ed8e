# focus/views.py

import logging

from rest_framework import generics, permissions
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from .models import FocusSession
from .serializers import FocusSessionSerializer

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 200


def _list_limit(request):
    raw = request.query_params.get('limit')
    if raw is None:
        return DEFAULT_LIST_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        raise ValidationError({'limit': "Expected a positive integer."})
    if limit < 1:
        raise ValidationError({'limit': "Expected a positive integer."})
    return min(limit, MAX_LIST_LIMIT)


class FocusSessionListCreateView(generics.ListCreateAPIView):
    """
    GET: the caller's most recent sessions (?task=<id>, ?limit=<n>) with
    totals over the returned sessions.
    POST: start a session, optionally for one of the caller's tasks or habits.
    """
    serializer_class = FocusSessionSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        sessions = FocusSession.objects.filter(user=self.request.user).select_related('task', 'habit')
        task_id = self.request.query_params.get('task')
        if task_id:
            if not task_id.isdigit():
                raise ValidationError({'task': "Expected a task id."})
            sessions = sessions.filter(task_id=task_id)
        return sessions

    def list(self, request, *args, **kwargs):
        sessions = list(self.get_queryset()[:_list_limit(request)])
        stats = {
            'total': len(sessions),
            'completed': sum(1 for s in sessions if s.completed),
            'interrupted': sum(1 for s in sessions if s.interrupted),
            'total_minutes': sum(s.actual_time for s in sessions),
        }
        return Response({
            'sessions': self.get_serializer(sessions, many=True).data,
            'stats': stats,
        })

    def perform_create(self, serializer):
        session = serializer.save()
        logger.info(f"User {self.request.user.id} started focus session {session.id}")

list_create_view = FocusSessionListCreateView.as_view()


class FocusSessionRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET, PATCH, DELETE a session. PATCH completed=true or interrupted=true
    stamps ``ended_at``.
    """
    serializer_class = FocusSessionSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return FocusSession.objects.filter(user=self.request.user).select_related('task', 'habit')

retrieve_update_destroy_view = FocusSessionRetrieveUpdateDestroyView.as_view()
