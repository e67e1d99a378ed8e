# goals/views.py

from rest_framework import generics, permissions
from .models import Goal
from .serializers import GoalSerializer


class GoalOwnerPermission(permissions.BasePermission):
    """
    Object-level guard: only the owner may read or modify a goal.
    """
    def has_object_permission(self, request, view, obj):
        return obj.user == request.user


class GoalListCreateView(generics.ListCreateAPIView):
    """
    GET: List active goals for the authenticated user.
    POST: Create a new goal for the authenticated user.
    """
    serializer_class = GoalSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return Goal.objects.filter(user=self.request.user, is_archived=False)

list_create_view = GoalListCreateView.as_view()


class GoalRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET, PUT, PATCH, DELETE for a specific goal instance.
    Archive a goal with PATCH is_archived=True.
    """
    serializer_class = GoalSerializer
    permission_classes = [permissions.IsAuthenticated, GoalOwnerPermission]

    # Other users' goals 404 instead of 403
    def get_queryset(self):
        return Goal.objects.filter(user=self.request.user)

retrieve_update_destroy_view = GoalRetrieveUpdateDestroyView.as_view()
