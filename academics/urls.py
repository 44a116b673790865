"""
Academics URL configuration.

All endpoints are prefixed with /api/ (set in root urls.py).
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from academics import views

router = DefaultRouter()
router.register(r'enrollments', views.EnrollmentViewSet, basename='enrollment')
router.register(r'teachers', views.TeacherViewSet, basename='teacher')
router.register(r'students', views.StudentViewSet, basename='student')
router.register(r'courses', views.CourseViewSet, basename='course')
router.register(r'departments', views.DepartmentViewSet, basename='department')

urlpatterns = [
    path('', include(router.urls)),
    path('debug/database-stats/', views.DatabaseStatsView.as_view(), name='database-stats'),
    path('debug/tables-info/', views.TablesInfoView.as_view(), name='tables-info'),
]
