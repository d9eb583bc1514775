"""
Serializers for authentication and user management.
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction

from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Custom JWT token serializer that includes the user's role.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)

        # Add custom claims
        token["username"] = user.username
        token["role"] = user.role

        return token

    def validate(self, attrs):
        data = super().validate(attrs)

        # Add user information to response
        data["user"] = {
            "id": self.user.id,
            "username": self.user.username,
            "full_name": self.user.full_name,
            "email": self.user.email,
            "role": self.user.role,
        }

        return data


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for User model.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "full_name",
            "role",
            "is_active",
            "date_joined",
            "last_login",
        ]
        read_only_fields = ["id", "role", "date_joined", "last_login"]


class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for user registration.

    The very first account becomes the store administrator; every later
    account starts as a cashier and can be promoted by an administrator.
    """

    password = serializers.CharField(write_only=True, required=True, validators=[validate_password])
    role = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "password",
            "full_name",
            "role",
        ]
        read_only_fields = ["id", "role"]

    @transaction.atomic
    def create(self, validated_data):
        role = User.CASHIER if User.objects.exists() else User.ADMIN
        return User.objects.create_user(role=role, **validated_data)


class UserRoleSerializer(serializers.ModelSerializer):
    """Serializer for changing a user's role."""

    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)

    class Meta:
        model = User
        fields = ["id", "username", "role"]
        read_only_fields = ["id", "username"]

    def validate_role(self, value):
        """An administrator cannot demote their own account."""
        request = self.context.get("request")
        if (
            request is not None
            and self.instance is not None
            and self.instance.pk == request.user.pk
            and value != User.ADMIN
        ):
            raise serializers.ValidationError("You cannot remove your own administrator role.")
        return value
