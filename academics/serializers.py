"""
Academics Serializers.

Enrollment payloads use the camelCase keys the API clients send:
{studentId, courseId, academicYear, semester} and
{grade, marks, status, remarks}.
"""

from rest_framework import serializers

from academics.models import Course, Department, Enrollment, EnrollmentStatus, Student, Teacher


# ─── Department ──────────────────────────────────────────────────────────────

class DepartmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ['id', 'name', 'code', 'description']


# ─── Teacher ─────────────────────────────────────────────────────────────────

class TeacherSerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(source='department.name', read_only=True, allow_null=True)

    class Meta:
        model = Teacher
        fields = [
            'id', 'name', 'email', 'employee_id', 'phone',
            'qualification', 'specialization',
            'department', 'department_name',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


# ─── Student ─────────────────────────────────────────────────────────────────

class StudentSerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(source='department.name', read_only=True, allow_null=True)

    class Meta:
        model = Student
        fields = [
            'id', 'name', 'email', 'roll_number', 'phone', 'address',
            'date_of_birth', 'gender', 'semester',
            'guardian_name', 'guardian_contact',
            'department', 'department_name',
        ]


class StudentUpdateSerializer(serializers.ModelSerializer):
    """
    Partial profile update. Identity fields (email, roll number, linked
    account) are not editable here.
    """
    dateOfBirth = serializers.DateField(source='date_of_birth', required=False, allow_null=True)
    guardianName = serializers.CharField(
        source='guardian_name', max_length=150, required=False, allow_blank=True,
    )
    guardianContact = serializers.CharField(
        source='guardian_contact', max_length=20, required=False, allow_blank=True,
    )
    semester = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    departmentId = serializers.PrimaryKeyRelatedField(
        source='department', queryset=Department.objects.all(),
        required=False, allow_null=True,
    )

    class Meta:
        model = Student
        fields = [
            'name', 'phone', 'address', 'dateOfBirth', 'gender', 'semester',
            'guardianName', 'guardianContact', 'departmentId',
        ]
        extra_kwargs = {
            'name': {'required': False},
        }


# ─── Course ──────────────────────────────────────────────────────────────────

class CourseSerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(source='department.name', read_only=True, allow_null=True)
    teacher_name = serializers.CharField(source='teacher.name', read_only=True, allow_null=True)

    class Meta:
        model = Course
        fields = [
            'id', 'code', 'name', 'description', 'credits', 'semester',
            'department', 'department_name', 'teacher', 'teacher_name',
        ]


# ─── Enrollment ──────────────────────────────────────────────────────────────

class EnrollmentSerializer(serializers.ModelSerializer):
    studentId = serializers.IntegerField(source='student_id', read_only=True)
    studentName = serializers.CharField(source='student.name', read_only=True)
    courseId = serializers.IntegerField(source='course_id', read_only=True)
    courseCode = serializers.CharField(source='course.code', read_only=True)
    courseName = serializers.CharField(source='course.name', read_only=True)
    academicYear = serializers.CharField(source='academic_year', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Enrollment
        fields = [
            'id', 'studentId', 'studentName', 'courseId', 'courseCode', 'courseName',
            'academicYear', 'semester', 'grade', 'marks', 'status', 'remarks',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class EnrollmentCreateSerializer(serializers.Serializer):
    """Input for enrolling a student."""
    studentId = serializers.IntegerField()
    courseId = serializers.IntegerField()
    academicYear = serializers.CharField(max_length=20)
    semester = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class GradeUpdateSerializer(serializers.Serializer):
    """
    Input for a grade update. Every field is optional; keys missing from
    the payload are missing from ``validated_data`` too.
    """
    grade = serializers.CharField(max_length=10, required=False, allow_null=True, allow_blank=True)
    marks = serializers.DecimalField(
        max_digits=7, decimal_places=2, required=False, allow_null=True,
    )
    status = serializers.ChoiceField(choices=EnrollmentStatus.choices, required=False)
    remarks = serializers.CharField(required=False, allow_null=True, allow_blank=True)
