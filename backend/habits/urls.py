# habits/urls.py

from django.urls import path
from .views import (
    generate_routine_tasks_view,
    habit_check_view,
    habit_detail_view,
    habit_list_create_view,
    habit_stats_view,
    habits_overview_view,
    routine_check_view,
    routine_detail_view,
    routine_list_create_view,
)

urlpatterns = [
    # GET and POST (List and Create)
    path('', habit_list_create_view, name='habit-list-create'),
    path('stats/', habits_overview_view, name='habit-overview'),

    path('routines/', routine_list_create_view, name='routine-list-create'),
    path('routines/generate-tasks/', generate_routine_tasks_view, name='routine-generate-tasks'),
    path('routines/<int:pk>/', routine_detail_view, name='routine-detail'),
    path('routines/<int:pk>/check/', routine_check_view, name='routine-check'),

    # GET, PUT, PATCH, DELETE (Detail and Manipulation)
    path('<int:pk>/', habit_detail_view, name='habit-detail'),
    path('<int:pk>/check/', habit_check_view, name='habit-check'),
    path('<int:pk>/stats/', habit_stats_view, name='habit-stats'),
]
