"""
User Views

Provides endpoints for:
- Authentication (login, token refresh)
- Current user profile
- Account approvals (admin)
"""

import logging

from rest_framework import generics, mixins, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView
from drf_spectacular.utils import extend_schema, extend_schema_view

from academics.permissions import IsAdmin
from .models import User, UserStatus
from .serializers import CustomTokenObtainPairSerializer, UserProfileSerializer

logger = logging.getLogger(__name__)


# =============================================================================
# AUTHENTICATION VIEWS
# =============================================================================

class LoginView(TokenObtainPairView):
    """
    POST /api/auth/login/

    Login with email and password.
    Returns JWT tokens and user info.
    """
    permission_classes = [AllowAny]
    serializer_class = CustomTokenObtainPairSerializer


class ProfileView(generics.RetrieveAPIView):
    """
    GET /api/auth/me/

    Current user's profile.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = UserProfileSerializer

    def get_object(self):
        return self.request.user


# =============================================================================
# ACCOUNT APPROVALS
# =============================================================================

@extend_schema_view(
    list=extend_schema(summary='List accounts awaiting approval'),
)
class AccountApprovalViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Admin review of accounts created with PENDING status.

    GET  /api/auth/approvals/               - Pending accounts
    POST /api/auth/approvals/{id}/approve/  - Activate the account
    POST /api/auth/approvals/{id}/reject/   - Suspend the account
    """
    queryset = User.objects.filter(status=UserStatus.PENDING).order_by('date_joined')
    serializer_class = UserProfileSerializer
    permission_classes = [IsAuthenticated, IsAdmin]

    @extend_schema(summary='Approve a pending account', request=None)
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        user = self.get_object()
        user.activate()
        logger.info(f'Account {user.email} approved by {request.user.email}')
        return Response(UserProfileSerializer(user).data)

    @extend_schema(summary='Reject a pending account', request=None)
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        user = self.get_object()
        user.suspend()
        logger.info(f'Account {user.email} rejected by {request.user.email}')
        return Response(UserProfileSerializer(user).data)
