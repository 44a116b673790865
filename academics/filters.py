"""
Academics Filters — django-filter filtersets for enrollments and teachers.
"""

import django_filters

from academics.models import Enrollment, Teacher


class EnrollmentFilter(django_filters.FilterSet):
    status = django_filters.CharFilter()
    academicYear = django_filters.CharFilter(field_name='academic_year')
    semester = django_filters.NumberFilter()

    class Meta:
        model = Enrollment
        fields = ['status', 'academicYear', 'semester']


class TeacherFilter(django_filters.FilterSet):
    department = django_filters.NumberFilter(field_name='department_id')

    class Meta:
        model = Teacher
        fields = ['department']
