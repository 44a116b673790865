"""
Enrollment Service — enrollment uniqueness, grade updates and drops.

The service is stateless: all durable state lives behind the repository
handed to it at construction. The uniqueness check in ``enroll_student`` is
not atomic against concurrent callers; the ``unique_active_enrollment``
database constraint is the authoritative guard and a violation of it is
reported as ``AlreadyEnrolled`` too.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone

from academics.models import Enrollment, EnrollmentStatus
from academics.repositories import EnrollmentRepository
from academics.services.payloads import EnrollmentRequest, GradeUpdateRequest

logger = logging.getLogger(__name__)


class EnrollmentError(Exception):
    pass


class InvalidEnrollmentRequest(EnrollmentError):
    pass


class RecordNotFound(EnrollmentError):
    pass


class EnrollmentNotFound(RecordNotFound):
    pass


class StudentNotFound(RecordNotFound):
    pass


class CourseNotFound(RecordNotFound):
    pass


class AlreadyEnrolled(EnrollmentError):
    pass


def _already_enrolled(student_id, course_id, academic_year) -> AlreadyEnrolled:
    return AlreadyEnrolled(
        f'Student {student_id} is already enrolled in course {course_id} '
        f'for academic year {academic_year}.'
    )


class EnrollmentService:

    def __init__(self, repository: EnrollmentRepository | None = None):
        self.repository = repository or EnrollmentRepository()

    # ─── Queries ─────────────────────────────────────────────────────────────

    def get_all_enrollments(self):
        return self.repository.all()

    def get_enrollment_by_id(self, enrollment_id) -> Enrollment:
        enrollment = self.repository.find(enrollment_id)
        if enrollment is None:
            raise EnrollmentNotFound(f'Enrollment not found with id: {enrollment_id}')
        return enrollment

    def get_enrollments_by_student(self, student_id):
        return self.repository.for_student(student_id)

    def get_enrollments_by_course(self, course_id):
        return self.repository.for_course(course_id)

    def get_enrollments_by_course_and_year(self, course_id, academic_year: str):
        return self.repository.for_course_and_year(course_id, academic_year)

    # ─── Commands ────────────────────────────────────────────────────────────

    def enroll_student(self, request: EnrollmentRequest) -> Enrollment:
        """
        Enrol a student in a course for an academic year.

        Validation order: academic year and semester, then student and
        course existence, then uniqueness.

        Raises:
            InvalidEnrollmentRequest: blank academic year or bad semester.
            StudentNotFound / CourseNotFound: unknown references.
            AlreadyEnrolled: a non-DROPPED enrollment exists for the triple.
        """
        academic_year = request.academic_year
        if not isinstance(academic_year, str) or not academic_year.strip():
            raise InvalidEnrollmentRequest('Academic year is required.')

        semester = request.semester
        if semester is not None and (
            isinstance(semester, bool) or not isinstance(semester, int) or semester < 1
        ):
            raise InvalidEnrollmentRequest('Semester must be a positive integer.')

        student = self.repository.find_student(request.student_id)
        if student is None:
            raise StudentNotFound(f'Student not found with id: {request.student_id}')

        course = self.repository.find_course(request.course_id)
        if course is None:
            raise CourseNotFound(f'Course not found with id: {request.course_id}')

        if self.repository.has_active_enrollment(student.pk, course.pk, academic_year):
            raise _already_enrolled(student.pk, course.pk, academic_year)

        try:
            with transaction.atomic():
                enrollment = self.repository.create(
                    student=student,
                    course=course,
                    academic_year=academic_year,
                    semester=semester,
                    status=EnrollmentStatus.ENROLLED,
                )
        except IntegrityError:
            logger.warning(
                f'Concurrent enrollment rejected by constraint: student={student.pk} '
                f'course={course.pk} year={academic_year}'
            )
            raise _already_enrolled(student.pk, course.pk, academic_year) from None

        logger.info(
            f'Enrolled student {student.pk} in course {course.pk} '
            f'for {academic_year} (enrollment {enrollment.pk})'
        )
        return enrollment

    def update_grade(self, enrollment_id, request: GradeUpdateRequest) -> Enrollment:
        """
        Apply a partial grade update.

        Only the fields present in ``request`` change; a field set to
        ``None`` is cleared. Everything is validated before the record is
        touched.
        """
        enrollment = self.get_enrollment_by_id(enrollment_id)
        changes = _clean_grade_changes(request.changes())

        if not changes:
            return enrollment

        previous_status = enrollment.status
        for field, value in changes.items():
            setattr(enrollment, field, value)

        try:
            with transaction.atomic():
                self.repository.save(enrollment, update_fields=list(changes))
        except IntegrityError:
            enrollment.refresh_from_db()
            raise _already_enrolled(
                enrollment.student_id, enrollment.course_id, enrollment.academic_year,
            ) from None

        logger.info(
            f'Updated enrollment {enrollment.pk}: fields={sorted(changes)} '
            f'status {previous_status} -> {enrollment.status}'
        )
        return enrollment

    def delete_enrollment(self, enrollment_id) -> None:
        """Drop an enrollment. The row is kept with status DROPPED."""
        enrollment = self.get_enrollment_by_id(enrollment_id)
        enrollment.status = EnrollmentStatus.DROPPED
        enrollment.dropped_at = timezone.now()
        self.repository.save(enrollment, update_fields=['status', 'dropped_at'])
        logger.info(f'Dropped enrollment {enrollment.pk}')


def _clean_grade_changes(changes: dict) -> dict:
    """Validate and normalise grade-update fields, raising on bad input."""
    cleaned = {}

    if 'grade' in changes:
        grade = changes['grade']
        if grade is not None and not isinstance(grade, str):
            raise InvalidEnrollmentRequest('Grade must be a string.')
        max_length = Enrollment._meta.get_field('grade').max_length
        if grade is not None and len(grade) > max_length:
            raise InvalidEnrollmentRequest(
                f'Grade must be at most {max_length} characters.'
            )
        cleaned['grade'] = grade

    if 'marks' in changes:
        cleaned['marks'] = _to_marks(changes['marks'])

    if 'status' in changes:
        status = changes['status']
        if status not in EnrollmentStatus.values:
            allowed = ', '.join(EnrollmentStatus.values)
            raise InvalidEnrollmentRequest(
                f'Invalid status {status!r}. Expected one of: {allowed}.'
            )
        cleaned['status'] = EnrollmentStatus(status)

    if 'remarks' in changes:
        remarks = changes['remarks']
        if remarks is not None and not isinstance(remarks, str):
            raise InvalidEnrollmentRequest('Remarks must be a string.')
        cleaned['remarks'] = remarks or ''

    return cleaned


def _to_marks(value):
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidEnrollmentRequest('Marks must be numeric.')
    try:
        marks = Decimal(str(value))
    except InvalidOperation:
        raise InvalidEnrollmentRequest('Marks must be numeric.') from None
    if not marks.is_finite():
        raise InvalidEnrollmentRequest('Marks must be numeric.')

    # Stored as DecimalField(max_digits=7, decimal_places=2).
    field = Enrollment._meta.get_field('marks')
    limit = Decimal(10) ** (field.max_digits - field.decimal_places)
    if abs(marks) < limit:
        marks = marks.quantize(Decimal(1).scaleb(-field.decimal_places))
    if abs(marks) >= limit:
        raise InvalidEnrollmentRequest(f'Marks must be less than {limit} in magnitude.')
    return marks
