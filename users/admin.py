"""
User Admin Configuration
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, UserStatus


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Custom admin for the email-based User model."""

    list_display = ['email', 'name', 'role', 'status', 'is_staff', 'date_joined']
    list_filter = ['role', 'status', 'is_staff', 'is_active']
    search_fields = ['email', 'name']
    ordering = ['-date_joined']
    readonly_fields = ['id', 'date_joined', 'last_login', 'updated_at']

    fieldsets = (
        (None, {
            'fields': ('id', 'email', 'password')
        }),
        ('Profile', {
            'fields': ('name',)
        }),
        ('Role and status', {
            'fields': ('role', 'status')
        }),
        ('Django permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Dates', {
            'fields': ('date_joined', 'last_login', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2', 'name', 'role'),
        }),
    )

    actions = ['approve_users', 'suspend_users']

    @admin.action(description='Approve selected accounts')
    def approve_users(self, request, queryset):
        count = queryset.update(status=UserStatus.ACTIVE, is_active=True)
        self.message_user(request, f'{count} account(s) approved.')

    @admin.action(description='Suspend selected accounts')
    def suspend_users(self, request, queryset):
        count = queryset.update(status=UserStatus.SUSPENDED, is_active=False)
        self.message_user(request, f'{count} account(s) suspended.')
