"""
User Serializers

Provides serializers for:
- User login (JWT pair + user info)
- User profile (read)
"""

from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from django.contrib.auth import authenticate
from .models import User, UserStatus


# =============================================================================
# AUTHENTICATION SERIALIZERS
# =============================================================================

class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT login serializer keyed on email.

    The access token carries the caller's role so API guards can be
    evaluated without another lookup on the client side.
    """
    username_field = 'email'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['email'] = serializers.EmailField(required=True)
        self.fields['password'] = serializers.CharField(
            write_only=True,
            required=True,
            style={'input_type': 'password'}
        )
        if 'username' in self.fields:
            del self.fields['username']

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['role'] = user.role
        return token

    def validate(self, attrs):
        email = attrs.get('email')
        password = attrs.get('password')

        try:
            user = User.objects.get(email=email)
        except User.DoesNotExist:
            raise serializers.ValidationError({
                'detail': 'Invalid email or password.'
            })

        if user.status == UserStatus.SUSPENDED:
            raise serializers.ValidationError({
                'detail': 'This account has been suspended.'
            })

        if user.status == UserStatus.PENDING:
            raise serializers.ValidationError({
                'detail': 'This account is awaiting approval.'
            })

        authenticated_user = authenticate(
            request=self.context.get('request'),
            email=email,
            password=password
        )

        if authenticated_user is None:
            raise serializers.ValidationError({
                'detail': 'Invalid email or password.'
            })

        refresh = self.get_token(authenticated_user)

        return {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
            'type': 'Bearer',
            'user': {
                'id': str(authenticated_user.id),
                'email': authenticated_user.email,
                'name': authenticated_user.name,
                'role': authenticated_user.role,
                'status': authenticated_user.status,
            },
            'message': 'Login successful.',
        }


# =============================================================================
# PROFILE SERIALIZERS
# =============================================================================

class UserProfileSerializer(serializers.ModelSerializer):
    """Serializer for the current user's profile."""

    display_name = serializers.ReadOnlyField()

    class Meta:
        model = User
        fields = [
            'id', 'email', 'name', 'display_name',
            'role', 'status', 'date_joined', 'last_login',
        ]
        read_only_fields = fields
