"""
User URL Configuration

Authentication endpoints (prefix: /api/auth/):
    login/          - JWT login
    token/refresh/  - Refresh JWT token
    token/verify/   - Verify JWT token
    me/             - Current user profile
    approvals/      - Pending accounts (admin)
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import (
    TokenRefreshView,
    TokenVerifyView,
)

from .views import AccountApprovalViewSet, LoginView, ProfileView

app_name = 'users'

router = DefaultRouter()
router.register(r'approvals', AccountApprovalViewSet, basename='approval')

urlpatterns = [
    path('login/', LoginView.as_view(), name='login'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('token/verify/', TokenVerifyView.as_view(), name='token-verify'),
    path('me/', ProfileView.as_view(), name='profile'),
    path('', include(router.urls)),
]
