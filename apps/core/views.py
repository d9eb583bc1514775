"""
Core views for the point-of-sale back end.
"""

import logging

from django.contrib.auth import get_user_model
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from rest_framework import generics, permissions
from rest_framework_simplejwt.views import TokenObtainPairView

from .permissions import IsAdmin
from .serializers import (
    CustomTokenObtainPairSerializer,
    UserRegistrationSerializer,
    UserRoleSerializer,
    UserSerializer,
)

User = get_user_model()

logger = logging.getLogger(__name__)


@require_http_methods(["GET"])
def health_check(request):
    """
    Health check endpoint for Docker and Kubernetes.
    Returns 200 OK if the application is running.
    """
    return JsonResponse({"status": "healthy", "service": "pos-backend"})


# Authentication Views


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Custom JWT token view that includes additional user information.
    """

    serializer_class = CustomTokenObtainPairSerializer


class UserRegistrationView(generics.CreateAPIView):
    """
    API endpoint for user registration.
    """

    queryset = User.objects.all()
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    serializer_class = UserRegistrationSerializer


class UserProfileView(generics.RetrieveAPIView):
    """
    API endpoint for viewing the current user's profile.
    """

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user


# User Management Views


class UserListView(generics.ListAPIView):
    """
    API endpoint for listing store users. Administrators only.
    """

    queryset = User.objects.all().order_by("username")
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdmin]


class UserRoleUpdateView(generics.UpdateAPIView):
    """
    API endpoint for promoting or demoting a user. Administrators only.
    """

    queryset = User.objects.all()
    serializer_class = UserRoleSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdmin]
    lookup_field = "id"
    http_method_names = ["patch", "put"]

    def perform_update(self, serializer):
        user = serializer.save()
        logger.info(f"Role of user {user.username} set to {user.role} by {self.request.user.username}")
