"""
Management command for creating login accounts.

Usage:
    # Create an administrator
    python manage.py create_user --email admin@example.com --password MyPass123! --role ADMIN

    # Create a teacher account and link it to an existing Teacher record
    python manage.py create_user --email t@example.com --password MyPass123! --role TEACHER --employee-id T-001

    # Create a student account and link it to an existing Student record
    python manage.py create_user --email s@example.com --password MyPass123! --role STUDENT --roll-number R-001

    # Create a student account awaiting approval
    python manage.py create_user --email s2@example.com --password MyPass123! --pending
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from academics.models import Student, Teacher
from users.models import User, UserRole, UserStatus


class Command(BaseCommand):
    help = 'Create a login account, optionally linked to a student or teacher record'

    def add_arguments(self, parser):
        parser.add_argument('--email', type=str, required=True, help='User email')
        parser.add_argument('--password', type=str, required=True, help='User password')
        parser.add_argument('--name', type=str, default='', help='Full name')
        parser.add_argument(
            '--role',
            type=str,
            default=UserRole.STUDENT,
            choices=UserRole.values,
            help='User role'
        )
        parser.add_argument('--roll-number', type=str, help='Link to the student with this roll number')
        parser.add_argument('--employee-id', type=str, help='Link to the teacher with this employee ID')
        parser.add_argument(
            '--pending',
            action='store_true',
            help='Create the account awaiting admin approval'
        )

    def handle(self, *args, **options):
        email = options['email']
        role = options['role']
        roll_number = options.get('roll_number')
        employee_id = options.get('employee_id')

        if User.objects.filter(email=email).exists():
            raise CommandError(f'User with email {email} already exists.')

        if roll_number and employee_id:
            raise CommandError('Use either --roll-number or --employee-id, not both.')

        record = None
        if roll_number:
            record = Student.objects.filter(roll_number=roll_number).first()
            if record is None:
                raise CommandError(f'No student with roll number {roll_number}.')
        elif employee_id:
            record = Teacher.objects.filter(employee_id=employee_id).first()
            if record is None:
                raise CommandError(f'No teacher with employee ID {employee_id}.')

        if record is not None and record.user_id is not None:
            raise CommandError(f'{record} is already linked to an account.')

        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=options['password'],
                name=options['name'] or (record.name if record else ''),
                role=role,
                status=UserStatus.PENDING if options['pending'] else UserStatus.ACTIVE,
                is_staff=role == UserRole.ADMIN,
            )
            if record is not None:
                record.user = user
                record.save(update_fields=['user', 'updated_at'])

        self.stdout.write(self.style.SUCCESS(f'✓ Created {role} account: {user.email}'))
        if record is not None:
            self.stdout.write(self.style.SUCCESS(f'✓ Linked to {record}'))
