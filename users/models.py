"""
User Model for the Student Records backend

Accounts authenticate with email + password and carry a role:
- UserRole: STUDENT, TEACHER, ADMIN
- UserStatus: PENDING, ACTIVE, SUSPENDED

Academic records (Student, Teacher) link back to an account through an
optional one-to-one field on the ``academics`` side.
"""

import uuid
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone


# =============================================================================
# ENUMERATIONS
# =============================================================================

class UserRole(models.TextChoices):
    """Roles checked by the API permission guards."""
    STUDENT = 'STUDENT', 'Student'
    TEACHER = 'TEACHER', 'Teacher'
    ADMIN = 'ADMIN', 'Administrator'


class UserStatus(models.TextChoices):
    """User account status."""
    PENDING = 'PENDING', 'Pending approval'
    ACTIVE = 'ACTIVE', 'Active'
    SUSPENDED = 'SUSPENDED', 'Suspended'


# =============================================================================
# USER MANAGER
# =============================================================================

class UserManager(BaseUserManager):
    """
    Custom user manager using email as the login identifier.
    """

    def create_user(self, email, password=None, **extra_fields):
        """Create and save a regular user."""
        if not email:
            raise ValueError('Email address is required')

        email = self.normalize_email(email)
        extra_fields.setdefault('role', UserRole.STUDENT)
        extra_fields.setdefault('status', UserStatus.ACTIVE)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Create and save a superuser."""
        extra_fields.setdefault('role', UserRole.ADMIN)
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


# =============================================================================
# USER MODEL
# =============================================================================

class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model.

    Uses UUID as primary key and the email address as username.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    email = models.EmailField(
        'Email address',
        unique=True,
        db_index=True
    )
    name = models.CharField(
        'Full name',
        max_length=150,
        blank=True
    )

    role = models.CharField(
        'Role',
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.STUDENT,
        db_index=True
    )
    status = models.CharField(
        'Status',
        max_length=20,
        choices=UserStatus.choices,
        default=UserStatus.ACTIVE,
        db_index=True
    )

    # Django admin permissions
    is_staff = models.BooleanField(
        'Staff status',
        default=False,
        help_text='Designates whether the user can log into the admin site.'
    )
    is_active = models.BooleanField(
        'Active',
        default=True,
        help_text='Designates whether this user can log in.'
    )

    date_joined = models.DateTimeField(
        'Date joined',
        default=timezone.now
    )
    updated_at = models.DateTimeField(
        'Last modified',
        auto_now=True
    )

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['-date_joined']
        indexes = [
            models.Index(fields=['role', 'status'], name='users_role_status_idx'),
        ]

    def __str__(self):
        return self.email

    # ==========================================================================
    # PROPERTIES
    # ==========================================================================

    @property
    def display_name(self):
        """Return display name for UI."""
        return self.name or self.email.split('@')[0]

    @property
    def is_admin(self):
        """Check if user has admin privileges."""
        return self.role == UserRole.ADMIN or self.is_superuser

    @property
    def is_teacher(self):
        return self.role == UserRole.TEACHER

    @property
    def is_student(self):
        return self.role == UserRole.STUDENT

    # ==========================================================================
    # METHODS
    # ==========================================================================

    def get_short_name(self):
        return self.display_name

    def activate(self):
        """Activate user account."""
        self.status = UserStatus.ACTIVE
        self.is_active = True
        self.save(update_fields=['status', 'is_active', 'updated_at'])

    def suspend(self):
        """Suspend user account."""
        self.status = UserStatus.SUSPENDED
        self.is_active = False
        self.save(update_fields=['status', 'is_active', 'updated_at'])
