"""
Academics Tests — enrollment lifecycle, grading and the REST surface.

Tests cover:
1. Enrollment service (uniqueness, validation order, partial grade updates, drops)
2. Transcript generation
3. Permissions
4. Enrollment API
5. Teacher, student profile and debug API
"""

from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from users.models import User, UserRole
from academics.models import (
    Course, Department, Enrollment, EnrollmentStatus, Student, Teacher,
)
from academics.permissions import has_any_role
from academics.repositories import EnrollmentRepository
from academics.services.enrollment_service import (
    AlreadyEnrolled, CourseNotFound, EnrollmentNotFound, EnrollmentService,
    InvalidEnrollmentRequest, StudentNotFound,
)
from academics.services.payloads import UNSET, EnrollmentRequest, GradeUpdateRequest
from academics.services.transcript_service import (
    generate_transcript_pdf, student_transcript_enrollments,
)


class AcademicsTestBase(TestCase):
    """Shared records: one department, two students, two courses."""

    def setUp(self):
        self.department = Department.objects.create(name='Computer Science', code='CS')
        self.teacher = Teacher.objects.create(
            name='Ada Lovelace', email='ada@uni.test', employee_id='T-001',
            department=self.department,
        )
        self.student = Student.objects.create(
            name='Alan Turing', email='alan@uni.test', roll_number='R-001',
            department=self.department,
        )
        self.other_student = Student.objects.create(
            name='Grace Hopper', email='grace@uni.test', roll_number='R-002',
            department=self.department,
        )
        self.course = Course.objects.create(
            code='CS101', name='Programming Fundamentals',
            department=self.department, teacher=self.teacher,
        )
        self.other_course = Course.objects.create(
            code='CS201', name='Data Structures',
            department=self.department, teacher=self.teacher,
        )
        self.service = EnrollmentService()

    def enroll(self, student=None, course=None, academic_year='2024-2025', semester=None):
        return self.service.enroll_student(EnrollmentRequest(
            student_id=(student or self.student).pk,
            course_id=(course or self.course).pk,
            academic_year=academic_year,
            semester=semester,
        ))


# ═════════════════════════════════════════════════════════════════════════════
# 1. ENROLLMENT SERVICE TESTS
# ═════════════════════════════════════════════════════════════════════════════

class EnrollStudentTests(AcademicsTestBase):

    def test_enroll_creates_enrolled_record(self):
        enrollment = self.enroll(semester=1)
        self.assertEqual(enrollment.status, EnrollmentStatus.ENROLLED)
        self.assertEqual(enrollment.student_id, self.student.pk)
        self.assertEqual(enrollment.course_id, self.course.pk)
        self.assertEqual(enrollment.academic_year, '2024-2025')
        self.assertEqual(enrollment.semester, 1)
        self.assertIsNone(enrollment.grade)
        self.assertIsNone(enrollment.marks)
        self.assertIsNotNone(enrollment.created_at)

    def test_duplicate_enrollment_raises(self):
        self.enroll()
        with self.assertRaises(AlreadyEnrolled):
            self.enroll()
        self.assertEqual(Enrollment.objects.count(), 1)

    def test_same_course_different_year_allowed(self):
        self.enroll(academic_year='2024-2025')
        second = self.enroll(academic_year='2025-2026')
        self.assertEqual(second.academic_year, '2025-2026')

    def test_blank_academic_year_rejected(self):
        for year in ('', '   ', None):
            with self.assertRaises(InvalidEnrollmentRequest):
                self.enroll(academic_year=year)
        self.assertFalse(Enrollment.objects.exists())

    def test_invalid_semester_rejected(self):
        for semester in (0, -1, True, '2'):
            with self.assertRaises(InvalidEnrollmentRequest):
                self.enroll(semester=semester)

    def test_unknown_student(self):
        with self.assertRaises(StudentNotFound):
            self.service.enroll_student(EnrollmentRequest(
                student_id=999999, course_id=self.course.pk, academic_year='2024-2025',
            ))
        self.assertFalse(Enrollment.objects.exists())

    def test_missing_student_id(self):
        with self.assertRaises(StudentNotFound):
            self.service.enroll_student(EnrollmentRequest(
                student_id=None, course_id=self.course.pk, academic_year='2024-2025',
            ))

    def test_unknown_course(self):
        with self.assertRaises(CourseNotFound):
            self.service.enroll_student(EnrollmentRequest(
                student_id=self.student.pk, course_id=999999, academic_year='2024-2025',
            ))
        self.assertFalse(Enrollment.objects.exists())

    def test_academic_year_checked_before_existence(self):
        with self.assertRaises(InvalidEnrollmentRequest):
            self.service.enroll_student(EnrollmentRequest(
                student_id=999999, course_id=999999, academic_year='',
            ))

    def test_student_checked_before_course(self):
        with self.assertRaises(StudentNotFound):
            self.service.enroll_student(EnrollmentRequest(
                student_id=999999, course_id=999999, academic_year='2024-2025',
            ))

    def test_re_enroll_after_drop(self):
        first = self.enroll()
        self.service.delete_enrollment(first.pk)
        second = self.enroll()
        self.assertNotEqual(first.pk, second.pk)
        self.assertEqual(second.status, EnrollmentStatus.ENROLLED)

    def test_re_enroll_after_status_set_to_dropped(self):
        first = self.enroll()
        self.service.update_grade(first.pk, GradeUpdateRequest(status='DROPPED'))
        second = self.enroll()
        self.assertEqual(second.status, EnrollmentStatus.ENROLLED)

    def test_database_constraint_reported_as_already_enrolled(self):
        self.enroll()
        with mock.patch.object(EnrollmentRepository, 'has_active_enrollment', return_value=False):
            with self.assertRaises(AlreadyEnrolled):
                self.enroll()
        self.assertEqual(Enrollment.objects.count(), 1)

    def test_store_failure_propagates(self):
        class FailingRepository(EnrollmentRepository):
            def find_student(self, student_id):
                raise DatabaseError('connection lost')

        service = EnrollmentService(repository=FailingRepository())
        with self.assertRaises(DatabaseError):
            service.enroll_student(EnrollmentRequest(
                student_id=self.student.pk, course_id=self.course.pk,
                academic_year='2024-2025',
            ))


class EnrollmentQueryTests(AcademicsTestBase):

    def setUp(self):
        super().setUp()
        self.e1 = self.enroll(academic_year='2024-2025')
        self.e2 = self.enroll(course=self.other_course, academic_year='2024-2025')
        self.e3 = self.enroll(student=self.other_student, academic_year='2025-2026')

    def test_get_by_id(self):
        self.assertEqual(self.service.get_enrollment_by_id(self.e1.pk), self.e1)

    def test_get_unknown_id(self):
        with self.assertRaises(EnrollmentNotFound):
            self.service.get_enrollment_by_id(999999)

    def test_get_all(self):
        self.assertEqual(
            list(self.service.get_all_enrollments()), [self.e1, self.e2, self.e3],
        )

    def test_by_student(self):
        self.assertEqual(
            list(self.service.get_enrollments_by_student(self.student.pk)), [self.e1, self.e2],
        )

    def test_by_course(self):
        self.assertEqual(
            list(self.service.get_enrollments_by_course(self.course.pk)), [self.e1, self.e3],
        )

    def test_by_course_and_year(self):
        result = self.service.get_enrollments_by_course_and_year(self.course.pk, '2025-2026')
        self.assertEqual(list(result), [self.e3])

    def test_unknown_references_return_empty(self):
        self.assertEqual(list(self.service.get_enrollments_by_student(999999)), [])
        self.assertEqual(list(self.service.get_enrollments_by_course(999999)), [])

    def test_dropped_hidden_from_queries(self):
        self.service.delete_enrollment(self.e1.pk)
        self.assertNotIn(self.e1, list(self.service.get_all_enrollments()))
        self.assertEqual(list(self.service.get_enrollments_by_student(self.student.pk)), [self.e2])
        self.assertEqual(list(self.service.get_enrollments_by_course(self.course.pk)), [self.e3])


class UpdateGradeTests(AcademicsTestBase):

    def setUp(self):
        super().setUp()
        self.enrollment = self.enroll()

    def test_full_update(self):
        updated = self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(
            grade='B+', marks=85, status='COMPLETED',
        ))
        self.assertEqual(updated.grade, 'B+')
        self.assertEqual(updated.marks, Decimal('85'))
        self.assertEqual(updated.status, EnrollmentStatus.COMPLETED)

        stored = Enrollment.objects.get(pk=self.enrollment.pk)
        self.assertEqual(stored.grade, 'B+')
        self.assertEqual(stored.marks, Decimal('85.00'))
        self.assertEqual(stored.student_id, self.student.pk)
        self.assertEqual(stored.course_id, self.course.pk)
        self.assertEqual(stored.academic_year, '2024-2025')

    def test_partial_update_keeps_other_fields(self):
        self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(
            grade='A', marks=Decimal('91.5'), remarks='Excellent',
        ))
        self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(grade='A-'))

        stored = Enrollment.objects.get(pk=self.enrollment.pk)
        self.assertEqual(stored.grade, 'A-')
        self.assertEqual(stored.marks, Decimal('91.50'))
        self.assertEqual(stored.remarks, 'Excellent')
        self.assertEqual(stored.status, EnrollmentStatus.ENROLLED)

    def test_explicit_none_clears(self):
        self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(grade='C', marks=60))
        self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(grade=None, marks=None))

        stored = Enrollment.objects.get(pk=self.enrollment.pk)
        self.assertIsNone(stored.grade)
        self.assertIsNone(stored.marks)

    def test_empty_update_is_noop(self):
        before = Enrollment.objects.get(pk=self.enrollment.pk).updated_at
        result = self.service.update_grade(self.enrollment.pk, GradeUpdateRequest())
        self.assertEqual(result.pk, self.enrollment.pk)
        self.assertEqual(Enrollment.objects.get(pk=self.enrollment.pk).updated_at, before)

    def test_invalid_status_rejected(self):
        for value in ('PASSED', 'completed', None):
            with self.assertRaises(InvalidEnrollmentRequest):
                self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(status=value))

    def test_invalid_marks_rejected(self):
        for value in ('eighty', 'NaN', True):
            with self.assertRaises(InvalidEnrollmentRequest):
                self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(marks=value))

    def test_marks_beyond_storage_precision_rejected(self):
        for value in (123456789, Decimal('100000'), Decimal('-100000'), Decimal('99999.999')):
            with self.assertRaises(InvalidEnrollmentRequest):
                self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(marks=value))
        stored = Enrollment.objects.get(pk=self.enrollment.pk)
        self.assertIsNone(stored.marks)

    def test_marks_rounded_to_two_places(self):
        updated = self.service.update_grade(
            self.enrollment.pk, GradeUpdateRequest(marks=Decimal('99999.994')),
        )
        self.assertEqual(updated.marks, Decimal('99999.99'))
        self.assertEqual(Enrollment.objects.get(pk=self.enrollment.pk).marks, Decimal('99999.99'))

    def test_grade_longer_than_column_rejected(self):
        with self.assertRaises(InvalidEnrollmentRequest):
            self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(grade='A' * 11))
        updated = self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(grade='A' * 10))
        self.assertEqual(updated.grade, 'A' * 10)

    def test_invalid_update_leaves_record_untouched(self):
        with self.assertRaises(InvalidEnrollmentRequest):
            self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(
                grade='A', status='UNKNOWN',
            ))
        self.assertIsNone(Enrollment.objects.get(pk=self.enrollment.pk).grade)

    def test_unknown_enrollment(self):
        with self.assertRaises(EnrollmentNotFound):
            self.service.update_grade(999999, GradeUpdateRequest(grade='A'))

    def test_status_dropped_stays_visible(self):
        self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(status='DROPPED'))
        stored = self.service.get_enrollment_by_id(self.enrollment.pk)
        self.assertEqual(stored.status, EnrollmentStatus.DROPPED)
        self.assertIsNone(stored.dropped_at)

    def test_reactivation_conflict(self):
        self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(status='DROPPED'))
        self.enroll()
        with self.assertRaises(AlreadyEnrolled):
            self.service.update_grade(self.enrollment.pk, GradeUpdateRequest(status='ENROLLED'))
        stored = Enrollment.objects.get(pk=self.enrollment.pk)
        self.assertEqual(stored.status, EnrollmentStatus.DROPPED)


class DeleteEnrollmentTests(AcademicsTestBase):

    def test_delete_then_get_not_found(self):
        enrollment = self.enroll()
        self.service.delete_enrollment(enrollment.pk)
        with self.assertRaises(EnrollmentNotFound):
            self.service.get_enrollment_by_id(enrollment.pk)

    def test_row_kept_as_dropped(self):
        enrollment = self.enroll()
        self.service.delete_enrollment(enrollment.pk)
        stored = Enrollment.objects.get(pk=enrollment.pk)
        self.assertEqual(stored.status, EnrollmentStatus.DROPPED)
        self.assertIsNotNone(stored.dropped_at)
        self.assertTrue(stored.is_dropped)

    def test_second_delete_not_found(self):
        enrollment = self.enroll()
        self.service.delete_enrollment(enrollment.pk)
        with self.assertRaises(EnrollmentNotFound):
            self.service.delete_enrollment(enrollment.pk)

    def test_dropped_record_cannot_be_graded(self):
        enrollment = self.enroll()
        self.service.delete_enrollment(enrollment.pk)
        with self.assertRaises(EnrollmentNotFound):
            self.service.update_grade(enrollment.pk, GradeUpdateRequest(grade='A'))


class EnrollmentLifecycleTests(AcademicsTestBase):

    def test_enroll_grade_drop(self):
        enrollment = self.enroll()
        self.assertEqual(enrollment.status, EnrollmentStatus.ENROLLED)
        self.assertIsNone(enrollment.grade)

        with self.assertRaises(AlreadyEnrolled):
            self.enroll()

        graded = self.service.update_grade(enrollment.pk, GradeUpdateRequest(
            grade='B+', marks=85, status='COMPLETED',
        ))
        self.assertEqual(graded.grade, 'B+')
        self.assertEqual(graded.status, EnrollmentStatus.COMPLETED)
        self.assertEqual(graded.student_id, self.student.pk)
        self.assertEqual(graded.academic_year, '2024-2025')

        self.service.delete_enrollment(enrollment.pk)
        with self.assertRaises(EnrollmentNotFound):
            self.service.get_enrollment_by_id(enrollment.pk)


class GradeUpdateRequestTests(TestCase):

    def test_omitted_fields_are_unset(self):
        request = GradeUpdateRequest.from_data({'grade': 'A'})
        self.assertIs(request.marks, UNSET)
        self.assertEqual(request.changes(), {'grade': 'A'})

    def test_explicit_none_is_a_change(self):
        request = GradeUpdateRequest.from_data({'marks': None, 'unknown': 1})
        self.assertEqual(request.changes(), {'marks': None})


# ═════════════════════════════════════════════════════════════════════════════
# 2. TRANSCRIPT TESTS
# ═════════════════════════════════════════════════════════════════════════════

class TranscriptTests(AcademicsTestBase):

    def test_transcript_includes_dropped(self):
        kept = self.enroll()
        dropped = self.enroll(course=self.other_course)
        self.service.delete_enrollment(dropped.pk)
        rows = list(student_transcript_enrollments(self.student))
        self.assertEqual(rows, [kept, Enrollment.objects.get(pk=dropped.pk)])

    def test_pdf_generated(self):
        self.enroll()
        pdf = generate_transcript_pdf(self.student, student_transcript_enrollments(self.student))
        self.assertTrue(pdf.startswith(b'%PDF'))

    def test_pdf_without_enrollments(self):
        pdf = generate_transcript_pdf(self.other_student, [])
        self.assertTrue(pdf.startswith(b'%PDF'))


# ═════════════════════════════════════════════════════════════════════════════
# 3. PERMISSION TESTS
# ═════════════════════════════════════════════════════════════════════════════

class HasAnyRoleTests(TestCase):

    def test_matching_role(self):
        self.assertTrue(has_any_role(UserRole.TEACHER, UserRole.TEACHER, UserRole.ADMIN))

    def test_other_role(self):
        self.assertFalse(has_any_role(UserRole.STUDENT, UserRole.TEACHER, UserRole.ADMIN))

    def test_missing_role(self):
        self.assertFalse(has_any_role(None, UserRole.ADMIN))


# ═════════════════════════════════════════════════════════════════════════════
# 4. ENROLLMENT API TESTS
# ═════════════════════════════════════════════════════════════════════════════

class ApiTestBase(AcademicsTestBase):

    def setUp(self):
        super().setUp()
        self.student_user = User.objects.create_user(
            email='alan@uni.test', password='testpass123', role=UserRole.STUDENT,
        )
        self.student.user = self.student_user
        self.student.save()
        self.teacher_user = User.objects.create_user(
            email='ada@uni.test', password='testpass123', role=UserRole.TEACHER,
        )
        self.admin_user = User.objects.create_user(
            email='admin@uni.test', password='testpass123',
            role=UserRole.ADMIN, is_staff=True,
        )
        self.client = APIClient()

    def login_as(self, user):
        self.client.force_authenticate(user=user)

    def enroll_payload(self, **overrides):
        payload = {
            'studentId': self.student.pk,
            'courseId': self.course.pk,
            'academicYear': '2024-2025',
        }
        payload.update(overrides)
        return payload


class EnrollmentApiTests(ApiTestBase):

    def test_anonymous_rejected(self):
        response = self.client.get('/api/enrollments/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_enroll_created(self):
        self.login_as(self.student_user)
        response = self.client.post('/api/enrollments/', self.enroll_payload(semester=1), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['studentId'], self.student.pk)
        self.assertEqual(response.data['courseCode'], 'CS101')
        self.assertEqual(response.data['academicYear'], '2024-2025')
        self.assertEqual(response.data['status'], 'ENROLLED')
        self.assertIsNone(response.data['grade'])

    def test_enroll_duplicate_conflict(self):
        self.login_as(self.teacher_user)
        self.client.post('/api/enrollments/', self.enroll_payload(), format='json')
        response = self.client.post('/api/enrollments/', self.enroll_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('already enrolled', response.data['detail'])

    def test_enroll_blank_year_bad_request(self):
        self.login_as(self.admin_user)
        response = self.client.post(
            '/api/enrollments/', self.enroll_payload(academicYear=''), format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_enroll_unknown_course_not_found(self):
        self.login_as(self.admin_user)
        response = self.client.post(
            '/api/enrollments/', self.enroll_payload(courseId=999999), format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertIn('Course not found', response.data['detail'])

    def test_list_and_filter(self):
        self.enroll()
        self.enroll(course=self.other_course, academic_year='2025-2026')
        self.login_as(self.student_user)

        response = self.client.get('/api/enrollments/')
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/enrollments/', {'academicYear': '2025-2026'})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['courseCode'], 'CS201')

    def test_retrieve(self):
        enrollment = self.enroll()
        self.login_as(self.student_user)
        response = self.client.get(f'/api/enrollments/{enrollment.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], enrollment.pk)

    def test_retrieve_unknown(self):
        self.login_as(self.student_user)
        response = self.client.get('/api/enrollments/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_by_student_course_and_year(self):
        e1 = self.enroll()
        self.enroll(student=self.other_student, academic_year='2025-2026')
        self.login_as(self.teacher_user)

        response = self.client.get(f'/api/enrollments/student/{self.student.pk}/')
        self.assertEqual([row['id'] for row in response.data], [e1.pk])

        response = self.client.get(f'/api/enrollments/course/{self.course.pk}/')
        self.assertEqual(len(response.data), 2)

        response = self.client.get(f'/api/enrollments/course/{self.course.pk}/year/2024-2025/')
        self.assertEqual([row['id'] for row in response.data], [e1.pk])

    def test_update_grade_as_teacher(self):
        enrollment = self.enroll()
        self.login_as(self.teacher_user)
        response = self.client.put(
            f'/api/enrollments/{enrollment.pk}/grade/',
            {'grade': 'B+', 'marks': 85, 'status': 'COMPLETED'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['grade'], 'B+')
        self.assertEqual(response.data['marks'], Decimal('85.00'))
        self.assertEqual(response.data['status'], 'COMPLETED')

    def test_patch_grade_partial(self):
        enrollment = self.enroll()
        self.service.update_grade(enrollment.pk, GradeUpdateRequest(grade='C', remarks='Late work'))
        self.login_as(self.teacher_user)
        response = self.client.patch(
            f'/api/enrollments/{enrollment.pk}/grade/', {'marks': 72.5}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['grade'], 'C')
        self.assertEqual(response.data['remarks'], 'Late work')

    def test_update_grade_invalid_status(self):
        enrollment = self.enroll()
        self.login_as(self.admin_user)
        response = self.client.put(
            f'/api/enrollments/{enrollment.pk}/grade/', {'status': 'PASSED'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_grade_unknown(self):
        self.login_as(self.admin_user)
        response = self.client.put('/api/enrollments/999999/grade/', {'grade': 'A'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_student_cannot_grade(self):
        enrollment = self.enroll()
        self.login_as(self.student_user)
        response = self.client.put(
            f'/api/enrollments/{enrollment.pk}/grade/', {'grade': 'A'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIsNone(Enrollment.objects.get(pk=enrollment.pk).grade)

    def test_delete(self):
        enrollment = self.enroll()
        self.login_as(self.teacher_user)
        response = self.client.delete(f'/api/enrollments/{enrollment.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.get(f'/api/enrollments/{enrollment.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.delete(f'/api/enrollments/{enrollment.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_student_cannot_delete(self):
        enrollment = self.enroll()
        self.login_as(self.student_user)
        response = self.client.delete(f'/api/enrollments/{enrollment.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Enrollment.objects.get(pk=enrollment.pk).is_dropped)


# ═════════════════════════════════════════════════════════════════════════════
# 5. TEACHER / RECORD API TESTS
# ═════════════════════════════════════════════════════════════════════════════

class TeacherApiTests(ApiTestBase):

    def setUp(self):
        super().setUp()
        self.physics = Department.objects.create(name='Physics', code='PHY')
        self.other_teacher = Teacher.objects.create(
            name='Richard Feynman', email='rf@uni.test', employee_id='T-002',
            department=self.physics,
        )

    def test_list(self):
        self.login_as(self.student_user)
        response = self.client.get('/api/teachers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_by_department(self):
        self.login_as(self.student_user)
        response = self.client.get(f'/api/teachers/department/{self.physics.pk}/')
        self.assertEqual([row['employee_id'] for row in response.data], ['T-002'])
        self.assertEqual(response.data[0]['department_name'], 'Physics')

    def test_search(self):
        self.login_as(self.student_user)
        response = self.client.get('/api/teachers/search/', {'keyword': 'feyn'})
        self.assertEqual([row['name'] for row in response.data], ['Richard Feynman'])

        response = self.client.get('/api/teachers/search/', {'keyword': 'T-001'})
        self.assertEqual([row['name'] for row in response.data], ['Ada Lovelace'])

    def test_search_requires_keyword(self):
        self.login_as(self.student_user)
        response = self.client.get('/api/teachers/search/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_as_teacher(self):
        self.login_as(self.teacher_user)
        response = self.client.patch(
            f'/api/teachers/{self.teacher.pk}/', {'phone': '555-0100'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.teacher.refresh_from_db()
        self.assertEqual(self.teacher.phone, '555-0100')

    def test_student_cannot_update_or_delete(self):
        self.login_as(self.student_user)
        response = self.client.patch(
            f'/api/teachers/{self.teacher.pk}/', {'phone': '555-0100'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.delete(f'/api/teachers/{self.teacher.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_as_admin(self):
        self.login_as(self.admin_user)
        response = self.client.delete(f'/api/teachers/{self.other_teacher.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Teacher.objects.filter(pk=self.other_teacher.pk).exists())


class RecordApiTests(ApiTestBase):

    def test_read_only_listings(self):
        self.login_as(self.student_user)
        self.assertEqual(len(self.client.get('/api/students/').data), 2)
        self.assertEqual(len(self.client.get('/api/courses/').data), 2)
        self.assertEqual(len(self.client.get('/api/departments/').data), 1)

    def test_course_shows_teacher(self):
        self.login_as(self.student_user)
        response = self.client.get(f'/api/courses/{self.course.pk}/')
        self.assertEqual(response.data['teacher_name'], 'Ada Lovelace')

    def test_students_are_read_only(self):
        self.login_as(self.admin_user)
        response = self.client.delete(f'/api/students/{self.student.pk}/')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_own_transcript(self):
        enrollment = self.enroll()
        self.service.delete_enrollment(enrollment.pk)
        self.login_as(self.student_user)
        response = self.client.get(f'/api/students/{self.student.pk}/transcript/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn('transcript-r-001.pdf', response['Content-Disposition'])
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_other_students_transcript_forbidden(self):
        self.login_as(self.student_user)
        response = self.client.get(f'/api/students/{self.other_student.pk}/transcript/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_teacher_reads_any_transcript(self):
        self.login_as(self.teacher_user)
        response = self.client.get(f'/api/students/{self.other_student.pk}/transcript/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_database_stats_admin_only(self):
        self.enroll()
        self.login_as(self.teacher_user)
        response = self.client.get('/api/debug/database-stats/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.login_as(self.admin_user)
        response = self.client.get('/api/debug/database-stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_students'], 2)
        self.assertEqual(response.data['total_enrollments'], 1)
        self.assertEqual(len(response.data['departments']), 1)

    def test_tables_info_admin_only(self):
        self.login_as(self.teacher_user)
        response = self.client.get('/api/debug/tables-info/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.login_as(self.admin_user)
        response = self.client.get('/api/debug/tables-info/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('academics_enrollment', response.data['tables_created'])
        self.assertIn('users_user', response.data['tables_created'])
        self.assertEqual(response.data['missing_tables'], [])


class StudentProfileApiTests(ApiTestBase):

    def test_owner_updates_own_profile(self):
        physics = Department.objects.create(name='Physics', code='PHY')
        self.login_as(self.student_user)
        response = self.client.patch(f'/api/students/{self.student.pk}/', {
            'phone': '555-0199',
            'dateOfBirth': '2001-06-23',
            'guardianName': 'Ethel Turing',
            'semester': 3,
            'departmentId': physics.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['department_name'], 'Physics')

        self.student.refresh_from_db()
        self.assertEqual(self.student.phone, '555-0199')
        self.assertEqual(str(self.student.date_of_birth), '2001-06-23')
        self.assertEqual(self.student.guardian_name, 'Ethel Turing')
        self.assertEqual(self.student.semester, 3)
        self.assertEqual(self.student.department, physics)
        self.assertEqual(self.student.name, 'Alan Turing')

    def test_student_cannot_edit_other_profile(self):
        self.login_as(self.student_user)
        response = self.client.patch(
            f'/api/students/{self.other_student.pk}/', {'phone': '555-0100'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.other_student.refresh_from_db()
        self.assertEqual(self.other_student.phone, '')

    def test_teacher_and_admin_can_edit(self):
        for user, address in ((self.teacher_user, 'Teacher street'), (self.admin_user, 'Admin street')):
            self.login_as(user)
            response = self.client.patch(
                f'/api/students/{self.other_student.pk}/', {'address': address}, format='json',
            )
            self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.other_student.refresh_from_db()
        self.assertEqual(self.other_student.address, 'Admin street')

    def test_identity_fields_not_editable(self):
        self.login_as(self.admin_user)
        self.client.patch(f'/api/students/{self.student.pk}/', {
            'roll_number': 'R-999', 'email': 'x@uni.test',
        }, format='json')
        self.student.refresh_from_db()
        self.assertEqual(self.student.roll_number, 'R-001')
        self.assertEqual(self.student.email, 'alan@uni.test')

    def test_invalid_values_rejected(self):
        self.login_as(self.admin_user)
        for payload in ({'semester': 0}, {'departmentId': 999999}, {'gender': 'UNKNOWN'}):
            response = self.client.patch(
                f'/api/students/{self.student.pk}/', payload, format='json',
            )
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_put_not_allowed(self):
        self.login_as(self.admin_user)
        response = self.client.put(
            f'/api/students/{self.student.pk}/', {'name': 'X'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
