"""
Academics Models for the Student Records backend

Covers: Departments, Teachers, Students, Courses and Enrollments.

Enrollment is the join record between a Student and a Course for one
academic year and carries the grading state. Dropping an enrollment is a
soft delete: the row keeps status DROPPED and a ``dropped_at`` timestamp so
transcripts can still show it, while the enrollment API no longer sees it.
"""

from django.conf import settings
from django.db import models


# =============================================================================
# DEPARTMENT
# =============================================================================

class Department(models.Model):
    """Academic department."""

    name = models.CharField('Name', max_length=150, unique=True)
    code = models.CharField('Code', max_length=20, unique=True)
    description = models.TextField('Description', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Department'
        verbose_name_plural = 'Departments'
        ordering = ['name']

    def __str__(self):
        return f'{self.code} — {self.name}'


# =============================================================================
# TEACHER
# =============================================================================

class Teacher(models.Model):
    """Faculty member, optionally linked to a login account."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='teacher_profile',
    )
    name = models.CharField('Name', max_length=150)
    email = models.EmailField('Email', unique=True)
    employee_id = models.CharField('Employee ID', max_length=30, unique=True)
    phone = models.CharField('Phone', max_length=20, blank=True)
    qualification = models.CharField('Qualification', max_length=150, blank=True)
    specialization = models.CharField('Specialization', max_length=150, blank=True)
    department = models.ForeignKey(
        Department, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='teachers',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Teacher'
        verbose_name_plural = 'Teachers'
        ordering = ['name']

    def __str__(self):
        return f'{self.name} ({self.employee_id})'


# =============================================================================
# STUDENT
# =============================================================================

class Gender(models.TextChoices):
    MALE = 'MALE', 'Male'
    FEMALE = 'FEMALE', 'Female'
    OTHER = 'OTHER', 'Other'


class Student(models.Model):
    """Registered student, optionally linked to a login account."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='student_profile',
    )
    name = models.CharField('Name', max_length=150)
    email = models.EmailField('Email', unique=True)
    roll_number = models.CharField('Roll number', max_length=30, unique=True)
    phone = models.CharField('Phone', max_length=20, blank=True)
    address = models.TextField('Address', blank=True)
    date_of_birth = models.DateField('Date of birth', null=True, blank=True)
    gender = models.CharField(
        max_length=10, choices=Gender.choices, blank=True,
    )
    semester = models.PositiveSmallIntegerField(null=True, blank=True)
    guardian_name = models.CharField('Guardian name', max_length=150, blank=True)
    guardian_contact = models.CharField('Guardian contact', max_length=20, blank=True)
    department = models.ForeignKey(
        Department, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='students',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        ordering = ['name']

    def __str__(self):
        return f'{self.name} ({self.roll_number})'


# =============================================================================
# COURSE
# =============================================================================

class Course(models.Model):
    """A course offered by a department."""

    code = models.CharField('Code', max_length=20, unique=True)
    name = models.CharField('Name', max_length=200)
    description = models.TextField('Description', blank=True)
    credits = models.PositiveSmallIntegerField(default=3)
    semester = models.PositiveSmallIntegerField(null=True, blank=True)
    department = models.ForeignKey(
        Department, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='courses',
    )
    teacher = models.ForeignKey(
        Teacher, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='courses',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Course'
        verbose_name_plural = 'Courses'
        ordering = ['code']

    def __str__(self):
        return f'{self.code} — {self.name}'


# =============================================================================
# ENROLLMENT
# =============================================================================

class EnrollmentStatus(models.TextChoices):
    ENROLLED = 'ENROLLED', 'Enrolled'
    COMPLETED = 'COMPLETED', 'Completed'
    DROPPED = 'DROPPED', 'Dropped'


class EnrollmentQuerySet(models.QuerySet):

    def current(self):
        """Enrollments that have not been dropped through deletion."""
        return self.filter(dropped_at__isnull=True)

    def for_term(self, student_id, course_id, academic_year):
        return self.filter(
            student_id=student_id, course_id=course_id,
            academic_year=academic_year,
        )


class Enrollment(models.Model):
    """One student's registration in one course for one academic year."""

    student = models.ForeignKey(
        Student, on_delete=models.CASCADE, related_name='enrollments',
    )
    course = models.ForeignKey(
        Course, on_delete=models.CASCADE, related_name='enrollments',
    )
    academic_year = models.CharField(
        'Academic year', max_length=20,
        help_text='Teaching period token, e.g. 2024-2025',
    )
    semester = models.PositiveSmallIntegerField(null=True, blank=True)
    grade = models.CharField(max_length=10, null=True, blank=True)
    marks = models.DecimalField(
        max_digits=7, decimal_places=2, null=True, blank=True,
    )
    status = models.CharField(
        max_length=20, choices=EnrollmentStatus.choices,
        default=EnrollmentStatus.ENROLLED, db_index=True,
    )
    remarks = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    dropped_at = models.DateTimeField(null=True, blank=True)

    objects = EnrollmentQuerySet.as_manager()

    class Meta:
        verbose_name = 'Enrollment'
        verbose_name_plural = 'Enrollments'
        ordering = ['id']
        constraints = [
            # Authoritative guard for the check-then-create race in
            # EnrollmentService.enroll_student.
            models.UniqueConstraint(
                fields=['student', 'course', 'academic_year'],
                condition=~models.Q(status='DROPPED'),
                name='unique_active_enrollment',
            ),
        ]
        indexes = [
            models.Index(fields=['course', 'academic_year'], name='enrollment_course_year_idx'),
            models.Index(fields=['student', 'status'], name='enrollment_student_status_idx'),
        ]

    def __str__(self):
        return f'{self.student} — {self.course} [{self.academic_year}]'

    @property
    def is_dropped(self):
        return self.dropped_at is not None
