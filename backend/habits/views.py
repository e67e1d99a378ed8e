# habits/views.py

import datetime
import logging

from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from lifeboard.dates import canonical_today
from tasks.serializers import TaskSerializer

from .models import Habit, HabitCheck, Routine, RoutineCheck
from .serializers import GenerateRoutineTasksSerializer, HabitSerializer, RoutineSerializer
from .services import generate_routine_tasks
from .stats import HabitRecord, compute_rates, compute_streaks, habits_overview, summarize_focus

logger = logging.getLogger(__name__)


class OwnerPermission(permissions.BasePermission):
    """
    Object-level guard: only the owner may read or modify a habit or routine.
    """
    def has_object_permission(self, request, view, obj):
        return obj.user == request.user


def _active_only(request):
    return request.query_params.get('active') == 'true'


def _requested_day(request):
    """The ``?date=YYYY-MM-DD`` parameter, defaulting to today's canonical day."""
    raw = request.query_params.get('date')
    if not raw:
        return canonical_today()
    try:
        return datetime.date.fromisoformat(raw)
    except ValueError:
        raise ValidationError({'date': "Expected a date in YYYY-MM-DD format."})


class HabitListCreateView(generics.ListCreateAPIView):
    """
    GET: List the authenticated user's habits (?active=true for active only).
    POST: Create a new habit.
    """
    serializer_class = HabitSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        habits = Habit.objects.filter(user=self.request.user)
        if _active_only(self.request):
            habits = habits.filter(active=True)
        return habits

habit_list_create_view = HabitListCreateView.as_view()


class HabitRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    serializer_class = HabitSerializer
    permission_classes = [permissions.IsAuthenticated, OwnerPermission]

    def get_queryset(self):
        return Habit.objects.filter(user=self.request.user)

habit_detail_view = HabitRetrieveUpdateDestroyView.as_view()


class RoutineListCreateView(generics.ListCreateAPIView):
    serializer_class = RoutineSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        routines = Routine.objects.filter(user=self.request.user)
        if _active_only(self.request):
            routines = routines.filter(active=True)
        return routines

routine_list_create_view = RoutineListCreateView.as_view()


class RoutineRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    serializer_class = RoutineSerializer
    permission_classes = [permissions.IsAuthenticated, OwnerPermission]

    def get_queryset(self):
        return Routine.objects.filter(user=self.request.user)

routine_detail_view = RoutineRetrieveUpdateDestroyView.as_view()


class GenerateRoutineTasksView(APIView):
    """
    POST {"start_date"?, "days"?}: schedule the caller's active routines as
    tasks over the coming days (default: a week starting today).
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = GenerateRoutineTasksSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        start = serializer.validated_data.get('start_date') or canonical_today()

        created = generate_routine_tasks(request.user, start, serializer.validated_data['days'])

        return Response(
            {
                'tasks_created': len(created),
                'tasks': TaskSerializer(created, many=True, context={'request': request}).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

generate_routine_tasks_view = GenerateRoutineTasksView.as_view()


class DailyCheckView(APIView):
    """
    POST: mark the owner done for ``?date=`` (default today).
    DELETE: remove that mark.

    At most one check exists per owner, user and day.
    """
    permission_classes = [permissions.IsAuthenticated]
    owner_model = None
    check_model = None
    owner_field = None

    def get_owner(self, request, pk):
        return get_object_or_404(self.owner_model, pk=pk, user=request.user)

    def post(self, request, pk):
        owner = self.get_owner(request, pk)
        day = _requested_day(request)

        _, created = self.check_model.objects.get_or_create(
            **{self.owner_field: owner}, user=request.user, date=day
        )
        if not created:
            raise ValidationError({'date': "Already checked for this date."})

        logger.info(f"User {request.user.id} checked {self.owner_field} {owner.pk} for {day}")
        return Response(
            {self.owner_field: owner.pk, 'date': day.isoformat()},
            status=status.HTTP_201_CREATED,
        )

    def delete(self, request, pk):
        owner = self.get_owner(request, pk)
        day = _requested_day(request)

        deleted, _ = self.check_model.objects.filter(
            **{self.owner_field: owner}, user=request.user, date=day
        ).delete()
        if not deleted:
            raise NotFound("Check not found.")

        logger.info(f"User {request.user.id} unchecked {self.owner_field} {owner.pk} for {day}")
        return Response(status=status.HTTP_204_NO_CONTENT)


class HabitCheckView(DailyCheckView):
    owner_model = Habit
    check_model = HabitCheck
    owner_field = 'habit'

habit_check_view = HabitCheckView.as_view()


class RoutineCheckView(DailyCheckView):
    owner_model = Routine
    check_model = RoutineCheck
    owner_field = 'routine'

routine_check_view = RoutineCheckView.as_view()


class HabitStatsView(APIView):
    """GET: streaks, completion rates and focus time of one habit as of today."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        habit = get_object_or_404(Habit, pk=pk, user=request.user)
        today = canonical_today()
        check_dates = list(habit.checks.values_list('date', flat=True))
        rule = habit.recurrence_rule

        streaks = compute_streaks(check_dates, rule, habit.created_at, today)
        rates = compute_rates(check_dates, rule, habit.created_at, today)
        focus = summarize_focus(habit.focus_sessions.values_list('actual_time', flat=True))

        return Response({
            'habit_id': habit.pk,
            'as_of': today.isoformat(),
            'streaks': streaks.to_dict(),
            'rates': rates.to_dict(),
            'focus': focus.to_dict(),
        })

habit_stats_view = HabitStatsView.as_view()


class HabitsOverviewView(APIView):
    """GET: dashboard summary across the user's active habits."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        today = canonical_today()
        habits = (
            Habit.objects
            .filter(user=request.user, active=True)
            .annotate(focus_minutes=Coalesce(Sum('focus_sessions__actual_time'), 0))
            .prefetch_related('checks')
        )

        records = [
            HabitRecord(
                id=habit.pk,
                title=habit.title,
                rule=habit.recurrence_rule,
                created_at=habit.created_at,
                check_dates=[check.date for check in habit.checks.all()],
                icon=habit.icon or None,
                focus_minutes=habit.focus_minutes,
            )
            for habit in habits
        ]
        overview = habits_overview(records, today)
        return Response({'as_of': today.isoformat(), **overview.to_dict()})

habits_overview_view = HabitsOverviewView.as_view()
