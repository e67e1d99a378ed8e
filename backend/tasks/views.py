# tasks/views.py

import logging

from rest_framework import generics, permissions, status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from lifeboard.dates import canonical_today

from .ai_engine.cache import ParseCache
from .ai_engine.exceptions import InvalidInputError, NotFoundError
from .ai_engine.nl_parser import ExternalTaskParser
from .models import Task
from .serializers import (
    DecisionFeedbackSerializer,
    ParseNaturalLanguageSerializer,
    RecommendNextSerializer,
    TaskSerializer,
)
from .services import get_decision_engine, get_feedback_recorder

logger = logging.getLogger(__name__)

# HTTP status for each parser error code; anything unlisted is a 502
PARSER_ERROR_STATUS = {
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "PARSE_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "RATE_LIMIT": status.HTTP_429_TOO_MANY_REQUESTS,
    "PARSER_NOT_CONFIGURED": status.HTTP_503_SERVICE_UNAVAILABLE,
    "QUOTA_EXCEEDED": status.HTTP_503_SERVICE_UNAVAILABLE,
    "TIMEOUT": status.HTTP_504_GATEWAY_TIMEOUT,
}


class TaskOwnerPermission(permissions.BasePermission):
    """
    Custom permission to only allow owners of a Task to view, edit, or delete it.
    """
    def has_object_permission(self, request, view, obj):
        return obj.user == request.user


class TaskListCreateView(generics.ListCreateAPIView):
    """
    GET: List the authenticated user's tasks, optionally filtered by ?status=.
    POST: Create a new task.
    """
    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        tasks = Task.objects.filter(user=self.request.user).select_related('goal')
        wanted = self.request.query_params.get('status')
        if wanted:
            tasks = tasks.filter(status=wanted)
        return tasks

list_create_view = TaskListCreateView.as_view()


class TaskRetrieveUpdateDestroyView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET, PUT, PATCH, DELETE for a specific task instance.
    Mark a task done with PATCH status=completed.
    """
    serializer_class = TaskSerializer
    permission_classes = [permissions.IsAuthenticated, TaskOwnerPermission]

    # Other users' tasks 404 instead of 403
    def get_queryset(self):
        return Task.objects.filter(user=self.request.user).select_related('goal')

retrieve_update_destroy_view = TaskRetrieveUpdateDestroyView.as_view()


class RecommendNextView(APIView):
    """
    POST {"task_ids": [...]}: pick which of the given tasks to do next.

    Responds 404 when fewer than two of the ids are pending tasks owned by
    the caller.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = RecommendNextSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            decision = get_decision_engine().recommend_next(
                serializer.validated_data['task_ids'], request.user.id
            )
        except InvalidInputError as e:
            raise ValidationError({'task_ids': [str(e)]})

        if decision is None:
            raise NotFound("At least two of the given tasks must be pending tasks you own.")

        logger.info(
            f"User {request.user.id} recommended task {decision.recommended_id} "
            f"(log {decision.decision_log_id})"
        )
        return Response(decision.to_dict(), status=status.HTTP_200_OK)

recommend_next_view = RecommendNextView.as_view()


class DecisionFeedbackView(APIView):
    """POST {"decision_log_id", "user_choice", "feedback"?}: report what the user actually did."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = DecisionFeedbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            get_feedback_recorder().save_user_feedback(
                data['decision_log_id'],
                data['user_choice'],
                feedback=data.get('feedback'),
                user_id=request.user.id,
            )
        except NotFoundError as e:
            raise NotFound(str(e))
        except InvalidInputError as e:
            raise ValidationError({'user_choice': [str(e)]})

        return Response({'detail': "Feedback recorded."}, status=status.HTTP_200_OK)

decision_feedback_view = DecisionFeedbackView.as_view()


class ParseNaturalLanguageView(APIView):
    """
    POST {"input": "..."}: turn free text into a task draft.

    The draft is not saved; the client confirms it through the task
    create endpoint.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = ParseNaturalLanguageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        text = serializer.validated_data['input']

        parser = ExternalTaskParser()
        result = ParseCache().get_or_parse(
            text,
            canonical_today(),
            lambda: parser.parse(text),
        )

        error_code = result.get('error_code')
        if error_code:
            logger.warning(f"NL parse failed for user {request.user.id}: {error_code}")
            return Response(
                {'error_code': error_code, 'detail': result.get('error_message')},
                status=PARSER_ERROR_STATUS.get(error_code, status.HTTP_502_BAD_GATEWAY),
            )

        return Response(result, status=status.HTTP_200_OK)

parse_natural_language_view = ParseNaturalLanguageView.as_view()
