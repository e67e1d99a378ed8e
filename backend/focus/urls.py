# focus/urls.py

from django.urls import path
from .views import list_create_view, retrieve_update_destroy_view

urlpatterns = [
    # GET and POST (List and Create)
    path('', list_create_view, name='focus-session-list-create'),

    # GET, PUT, PATCH, DELETE (Detail and Manipulation)
    path('<int:pk>/', retrieve_update_destroy_view, name='focus-session-detail'),
]
