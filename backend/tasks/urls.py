# tasks/urls.py

from django.urls import path
from .views import (
    decision_feedback_view,
    list_create_view,
    parse_natural_language_view,
    recommend_next_view,
    retrieve_update_destroy_view,
)

urlpatterns = [
    # GET and POST (List tasks and Create new task)
    path('', list_create_view, name='task-list-create'),

    path('recommend-next/', recommend_next_view, name='task-recommend-next'),
    path('decision-feedback/', decision_feedback_view, name='task-decision-feedback'),
    path('parse-nl/', parse_natural_language_view, name='task-parse-nl'),

    # GET, PUT, PATCH, DELETE (Detail and Manipulation)
    path('<int:pk>/', retrieve_update_destroy_view, name='task-detail'),
]
