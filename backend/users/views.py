import logging

from rest_framework import generics, permissions
from .serializers import UserDetailsSerializer, UserRegistrationSerializer

logger = logging.getLogger(__name__)


class RegisterAPIView(generics.CreateAPIView):
    """POST: create an account. Open to anonymous clients."""
    serializer_class = UserRegistrationSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info(f"Registered user {user.id}")

register_api_view = RegisterAPIView.as_view()


class UserDetailView(generics.RetrieveAPIView):
    """GET: the authenticated user's profile."""
    serializer_class = UserDetailsSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user

user_detail_view = UserDetailView.as_view()
