"""
Academics Views — DRF ViewSets for enrollments, teachers and records.
"""

import logging

from django.apps import apps
from django.db import connection
from django.db.models import Q
from django.http import HttpResponse
from django.utils.text import slugify
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view

from academics.filters import EnrollmentFilter, TeacherFilter
from academics.models import Course, Department, Enrollment, Student, Teacher
from academics.permissions import (
    IsAdmin, IsStudentOwnerTeacherOrAdmin, IsStudentTeacherOrAdmin, IsTeacherOrAdmin,
)
from academics.serializers import (
    CourseSerializer, DepartmentSerializer,
    EnrollmentCreateSerializer, EnrollmentSerializer, GradeUpdateSerializer,
    StudentSerializer, StudentUpdateSerializer, TeacherSerializer,
)
from academics.services.enrollment_service import (
    AlreadyEnrolled, EnrollmentService, InvalidEnrollmentRequest, RecordNotFound,
)
from academics.services.payloads import EnrollmentRequest, GradeUpdateRequest
from academics.services.transcript_service import (
    generate_transcript_pdf, student_transcript_enrollments,
)

logger = logging.getLogger(__name__)


def _detail(exc, status_code):
    return Response({'detail': str(exc)}, status=status_code)


# ─── Enrollment ──────────────────────────────────────────────────────────────

@extend_schema_view(
    list=extend_schema(summary='List all enrollments'),
    retrieve=extend_schema(summary='Retrieve an enrollment'),
    destroy=extend_schema(summary='Drop an enrollment'),
)
class EnrollmentViewSet(viewsets.GenericViewSet):
    """
    Enrollment API.

    List:   GET /api/enrollments/
    By student: GET /api/enrollments/student/<student-id>/
    By course:  GET /api/enrollments/course/<course-id>/
    By course and year: GET /api/enrollments/course/<course-id>/year/<academic-year>/
    Grade:  PUT/PATCH /api/enrollments/<id>/grade/
    """
    serializer_class = EnrollmentSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = EnrollmentFilter
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action in ('update_grade', 'destroy'):
            return [IsAuthenticated(), IsTeacherOrAdmin()]
        return [IsAuthenticated(), IsStudentTeacherOrAdmin()]

    def get_service(self):
        return EnrollmentService()

    def get_queryset(self):
        return self.get_service().get_all_enrollments()

    def get_serializer_class(self):
        if self.action == 'create':
            return EnrollmentCreateSerializer
        if self.action == 'update_grade':
            return GradeUpdateSerializer
        return EnrollmentSerializer

    def _listing(self, queryset):
        return Response(EnrollmentSerializer(queryset, many=True).data)

    def list(self, request, *args, **kwargs):
        return self._listing(self.filter_queryset(self.get_queryset()))

    def retrieve(self, request, pk=None):
        try:
            enrollment = self.get_service().get_enrollment_by_id(int(pk))
        except RecordNotFound as e:
            return _detail(e, status.HTTP_404_NOT_FOUND)
        return Response(EnrollmentSerializer(enrollment).data)

    @extend_schema(summary='Enroll a student in a course',
                   request=EnrollmentCreateSerializer, responses={201: EnrollmentSerializer})
    def create(self, request, *args, **kwargs):
        ser = EnrollmentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        try:
            enrollment = self.get_service().enroll_student(EnrollmentRequest(
                student_id=data['studentId'],
                course_id=data['courseId'],
                academic_year=data['academicYear'],
                semester=data.get('semester'),
            ))
        except InvalidEnrollmentRequest as e:
            return _detail(e, status.HTTP_400_BAD_REQUEST)
        except RecordNotFound as e:
            return _detail(e, status.HTTP_404_NOT_FOUND)
        except AlreadyEnrolled as e:
            return _detail(e, status.HTTP_409_CONFLICT)

        return Response(
            EnrollmentSerializer(enrollment).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(summary='Update grade for an enrollment',
                   request=GradeUpdateSerializer, responses=EnrollmentSerializer)
    @action(detail=True, methods=['put', 'patch'], url_path='grade')
    def update_grade(self, request, pk=None):
        ser = GradeUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            enrollment = self.get_service().update_grade(
                int(pk), GradeUpdateRequest.from_data(ser.validated_data),
            )
        except InvalidEnrollmentRequest as e:
            return _detail(e, status.HTTP_400_BAD_REQUEST)
        except RecordNotFound as e:
            return _detail(e, status.HTTP_404_NOT_FOUND)
        except AlreadyEnrolled as e:
            return _detail(e, status.HTTP_409_CONFLICT)

        return Response(EnrollmentSerializer(enrollment).data)

    def destroy(self, request, pk=None):
        try:
            self.get_service().delete_enrollment(int(pk))
        except RecordNotFound as e:
            return _detail(e, status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(summary='Get enrollments by student')
    @action(detail=False, methods=['get'], url_path=r'student/(?P<student_id>\d+)')
    def by_student(self, request, student_id=None):
        return self._listing(self.get_service().get_enrollments_by_student(int(student_id)))

    @extend_schema(summary='Get enrollments by course')
    @action(detail=False, methods=['get'], url_path=r'course/(?P<course_id>\d+)')
    def by_course(self, request, course_id=None):
        return self._listing(self.get_service().get_enrollments_by_course(int(course_id)))

    @extend_schema(summary='Get enrollments by course and academic year')
    @action(detail=False, methods=['get'],
            url_path=r'course/(?P<course_id>\d+)/year/(?P<academic_year>[^/]+)')
    def by_course_and_year(self, request, course_id=None, academic_year=None):
        return self._listing(
            self.get_service().get_enrollments_by_course_and_year(int(course_id), academic_year)
        )


# ─── Teacher ─────────────────────────────────────────────────────────────────

@extend_schema_view(
    list=extend_schema(summary='Get all teachers'),
    retrieve=extend_schema(summary='Get teacher by ID'),
    update=extend_schema(summary='Update teacher profile (teachers and admins)'),
    partial_update=extend_schema(summary='Update teacher profile (teachers and admins)'),
    destroy=extend_schema(summary='Delete teacher (teachers and admins)'),
)
class TeacherViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = TeacherSerializer
    queryset = Teacher.objects.select_related('department')
    filter_backends = [DjangoFilterBackend]
    filterset_class = TeacherFilter
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action in ('update', 'partial_update', 'destroy'):
            return [IsAuthenticated(), IsTeacherOrAdmin()]
        return [IsAuthenticated(), IsStudentTeacherOrAdmin()]

    @extend_schema(summary='Get teachers by department')
    @action(detail=False, methods=['get'], url_path=r'department/(?P<department_id>\d+)')
    def by_department(self, request, department_id=None):
        teachers = self.get_queryset().filter(department_id=int(department_id))
        return Response(TeacherSerializer(teachers, many=True).data)

    @extend_schema(
        summary='Search teachers by name or employee ID',
        parameters=[OpenApiParameter('keyword', OpenApiTypes.STR, required=True)],
    )
    @action(detail=False, methods=['get'], url_path='search')
    def search(self, request):
        keyword = request.query_params.get('keyword', '').strip()
        if not keyword:
            return Response(
                {'detail': 'keyword query parameter is required.'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        teachers = self.get_queryset().filter(
            Q(name__icontains=keyword) | Q(employee_id__icontains=keyword)
        )
        return Response(TeacherSerializer(teachers, many=True).data)


# ─── Student / Course / Department ────────────────────────────────────────────

@extend_schema_view(
    partial_update=extend_schema(
        summary='Update a student profile (owner, teachers and admins)',
        request=StudentUpdateSerializer, responses=StudentSerializer,
    ),
)
class StudentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Students are read-only apart from the profile update.

    PATCH /api/students/<id>/
    """
    serializer_class = StudentSerializer
    queryset = Student.objects.select_related('department')
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action == 'partial_update':
            return [IsAuthenticated(), IsStudentOwnerTeacherOrAdmin()]
        return [IsAuthenticated(), IsStudentTeacherOrAdmin()]

    def partial_update(self, request, pk=None):
        student = self.get_object()
        ser = StudentUpdateSerializer(student, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        logger.info(f'Student {student.pk} profile updated by {request.user.pk}: {sorted(ser.validated_data)}')
        return Response(StudentSerializer(student).data)

    @extend_schema(summary='Download a student transcript (PDF)',
                   responses={(200, 'application/pdf'): OpenApiTypes.BINARY})
    @action(detail=True, methods=['get'], url_path='transcript',
            permission_classes=[IsStudentOwnerTeacherOrAdmin])
    def transcript(self, request, pk=None):
        student = self.get_object()
        pdf_bytes = generate_transcript_pdf(
            student, student_transcript_enrollments(student),
        )
        response = HttpResponse(pdf_bytes, content_type='application/pdf')
        filename = f'transcript-{slugify(student.roll_number) or student.pk}.pdf'
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response


class CourseViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = CourseSerializer
    queryset = Course.objects.select_related('department', 'teacher')
    permission_classes = [IsAuthenticated, IsStudentTeacherOrAdmin]
    lookup_value_regex = r'\d+'


class DepartmentViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = DepartmentSerializer
    queryset = Department.objects.all()
    permission_classes = [IsAuthenticated, IsStudentTeacherOrAdmin]
    lookup_value_regex = r'\d+'


# ─── Debug ───────────────────────────────────────────────────────────────────

class DatabaseStatsView(APIView):
    """
    GET /api/debug/database-stats/

    Row counts per entity plus the student, teacher, course and
    department listings.
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @extend_schema(summary='Database statistics', responses=OpenApiTypes.OBJECT)
    def get(self, request):
        return Response({
            'total_students': Student.objects.count(),
            'total_teachers': Teacher.objects.count(),
            'total_courses': Course.objects.count(),
            'total_departments': Department.objects.count(),
            'total_enrollments': Enrollment.objects.count(),
            'students': StudentSerializer(Student.objects.select_related('department'), many=True).data,
            'teachers': TeacherSerializer(Teacher.objects.select_related('department'), many=True).data,
            'courses': CourseSerializer(Course.objects.select_related('department', 'teacher'), many=True).data,
            'departments': DepartmentSerializer(Department.objects.all(), many=True).data,
        })


class TablesInfoView(APIView):
    """
    GET /api/debug/tables-info/

    Connection check listing the record tables present in the database.
    """
    permission_classes = [IsAuthenticated, IsAdmin]
    app_labels = ('academics', 'users')

    @extend_schema(summary='Database tables information', responses=OpenApiTypes.OBJECT)
    def get(self, request):
        existing = set(connection.introspection.table_names())
        expected = sorted(
            model._meta.db_table
            for label in self.app_labels
            for model in apps.get_app_config(label).get_models()
        )
        missing = [table for table in expected if table not in existing]

        return Response({
            'message': 'Database is connected and working!',
            'database': str(connection.settings_dict['NAME']),
            'vendor': connection.vendor,
            'tables_created': [table for table in expected if table in existing],
            'missing_tables': missing,
            'status': (
                'All tables are active and accessible' if not missing
                else 'Some tables are missing; run migrations'
            ),
        })
