"""
Academics Admin — register records with read-only enrollment identity fields.

Enrollments are created and graded through the API; the admin shows every
row, including those dropped through deletion.
"""

from django.contrib import admin
from academics.models import Course, Department, Enrollment, Student, Teacher


# ─── Inlines ─────────────────────────────────────────────────────────────────

class EnrollmentInline(admin.TabularInline):
    model = Enrollment
    extra = 0
    fields = ['course', 'academic_year', 'semester', 'grade', 'marks', 'status', 'dropped_at']
    readonly_fields = ['course', 'academic_year', 'dropped_at']
    can_delete = False
    ordering = ['academic_year']


# ─── Model Admins ────────────────────────────────────────────────────────────

@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ['code', 'name']
    search_fields = ['code', 'name']


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = ['name', 'employee_id', 'email', 'department']
    list_filter = ['department']
    search_fields = ['name', 'employee_id', 'email']
    raw_id_fields = ['user', 'department']


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['name', 'roll_number', 'email', 'department', 'semester']
    list_filter = ['department', 'semester']
    search_fields = ['name', 'roll_number', 'email']
    raw_id_fields = ['user', 'department']
    inlines = [EnrollmentInline]


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'credits', 'department', 'teacher']
    list_filter = ['department']
    search_fields = ['code', 'name']
    raw_id_fields = ['department', 'teacher']


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ['student', 'course', 'academic_year', 'status', 'grade', 'marks', 'created_at', 'dropped_at']
    list_filter = ['status', 'academic_year']
    raw_id_fields = ['student', 'course']
    search_fields = ['student__name', 'student__roll_number', 'course__code']
    readonly_fields = ['created_at', 'updated_at', 'dropped_at']

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ['student', 'course', *self.readonly_fields]
        return self.readonly_fields
