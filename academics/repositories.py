"""
Enrollment Repository — the narrow query contract the enrollment service
depends on, backed by the Django ORM.

Only enrollments that have not been dropped through deletion are visible.
"""

from academics.models import Course, Enrollment, EnrollmentStatus, Student


class EnrollmentRepository:

    def _visible(self):
        return Enrollment.objects.current().select_related('student', 'course')

    # ─── Queries ─────────────────────────────────────────────────────────────

    def all(self):
        return self._visible()

    def find(self, enrollment_id) -> Enrollment | None:
        return self._visible().filter(pk=enrollment_id).first()

    def for_student(self, student_id):
        return self._visible().filter(student_id=student_id)

    def for_course(self, course_id):
        return self._visible().filter(course_id=course_id)

    def for_course_and_year(self, course_id, academic_year: str):
        return self._visible().filter(course_id=course_id, academic_year=academic_year)

    def has_active_enrollment(self, student_id, course_id, academic_year: str) -> bool:
        """True if a non-DROPPED enrollment exists for the triple."""
        return (
            Enrollment.objects.for_term(student_id, course_id, academic_year)
            .exclude(status=EnrollmentStatus.DROPPED)
            .exists()
        )

    # ─── Entity store lookups ────────────────────────────────────────────────

    def find_student(self, student_id) -> Student | None:
        if student_id is None:
            return None
        return Student.objects.filter(pk=student_id).first()

    def find_course(self, course_id) -> Course | None:
        if course_id is None:
            return None
        return Course.objects.filter(pk=course_id).first()

    # ─── Writes ──────────────────────────────────────────────────────────────

    def create(self, **fields) -> Enrollment:
        return Enrollment.objects.create(**fields)

    def save(self, enrollment: Enrollment, update_fields: list[str]) -> Enrollment:
        enrollment.save(update_fields=update_fields + ['updated_at'])
        return enrollment
