"""
Users Tests — login, profile, account approvals and account creation.
"""

from io import StringIO

from django.core.management import CommandError, call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from academics.models import Student, Teacher
from users.models import User, UserRole, UserStatus


class LoginTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email='teacher@test.com', password='testpass123',
            name='Ada Lovelace', role=UserRole.TEACHER,
        )

    def test_login_returns_tokens_and_role(self):
        response = self.client.post('/api/auth/login/', {
            'email': 'teacher@test.com', 'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['type'], 'Bearer')
        self.assertEqual(response.data['user']['role'], 'TEACHER')

        token = AccessToken(response.data['access'])
        self.assertEqual(token['role'], 'TEACHER')
        self.assertEqual(token['email'], 'teacher@test.com')

    def test_wrong_password(self):
        response = self.client.post('/api/auth/login/', {
            'email': 'teacher@test.com', 'password': 'nope',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_email(self):
        response = self.client.post('/api/auth/login/', {
            'email': 'ghost@test.com', 'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_suspended_account_rejected(self):
        self.user.suspend()
        response = self.client.post('/api/auth/login/', {
            'email': 'teacher@test.com', 'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pending_account_rejected(self):
        self.user.status = UserStatus.PENDING
        self.user.save()
        response = self.client.post('/api/auth/login/', {
            'email': 'teacher@test.com', 'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('awaiting approval', str(response.data))

    def test_bearer_token_grants_access(self):
        response = self.client.post('/api/auth/login/', {
            'email': 'teacher@test.com', 'password': 'testpass123',
        }, format='json')
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = self.client.get('/api/enrollments/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class ProfileTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email='student@test.com', password='testpass123', name='Alan Turing',
        )

    def test_me(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'student@test.com')
        self.assertEqual(response.data['role'], 'STUDENT')
        self.assertEqual(response.data['display_name'], 'Alan Turing')

    def test_me_requires_auth(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AccountApprovalTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email='admin@test.com', password='testpass123', role=UserRole.ADMIN,
        )
        self.pending = User.objects.create_user(
            email='pending@test.com', password='testpass123', status=UserStatus.PENDING,
        )
        self.active = User.objects.create_user(email='active@test.com', password='testpass123')

    def test_list_pending(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get('/api/auth/approvals/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['email'] for row in response.data], ['pending@test.com'])

    def test_approve_then_login(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(f'/api/auth/approvals/{self.pending.pk}/approve/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'ACTIVE')

        self.client.force_authenticate(user=None)
        response = self.client.post('/api/auth/login/', {
            'email': 'pending@test.com', 'password': 'testpass123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_reject_suspends(self):
        self.client.force_authenticate(user=self.admin)
        self.client.post(f'/api/auth/approvals/{self.pending.pk}/reject/')
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.status, UserStatus.SUSPENDED)
        self.assertFalse(self.pending.is_active)

    def test_active_account_not_in_queue(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(f'/api/auth/approvals/{self.active.pk}/approve/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_non_admin_forbidden(self):
        self.client.force_authenticate(user=self.active)
        response = self.client.post(f'/api/auth/approvals/{self.pending.pk}/approve/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.status, UserStatus.PENDING)


class UserModelTests(TestCase):

    def test_defaults(self):
        user = User.objects.create_user(email='x@test.com', password='testpass123')
        self.assertEqual(user.role, UserRole.STUDENT)
        self.assertEqual(user.status, UserStatus.ACTIVE)
        self.assertTrue(user.is_student)
        self.assertFalse(user.is_admin)

    def test_superuser_is_admin(self):
        user = User.objects.create_superuser(email='root@test.com', password='testpass123')
        self.assertEqual(user.role, UserRole.ADMIN)
        self.assertTrue(user.is_admin)

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='testpass123')


class CreateUserCommandTests(TestCase):

    def run_command(self, *args):
        out = StringIO()
        call_command('create_user', *args, stdout=out)
        return out.getvalue()

    def test_create_admin(self):
        output = self.run_command(
            '--email', 'admin@test.com', '--password', 'testpass123', '--role', 'ADMIN',
        )
        user = User.objects.get(email='admin@test.com')
        self.assertEqual(user.role, UserRole.ADMIN)
        self.assertTrue(user.is_staff)
        self.assertTrue(user.check_password('testpass123'))
        self.assertIn('admin@test.com', output)

    def test_link_student_record(self):
        student = Student.objects.create(name='Alan Turing', email='alan@uni.test', roll_number='R-001')
        self.run_command(
            '--email', 'alan@uni.test', '--password', 'testpass123', '--roll-number', 'R-001',
        )
        student.refresh_from_db()
        self.assertEqual(student.user.email, 'alan@uni.test')
        self.assertEqual(student.user.name, 'Alan Turing')
        self.assertEqual(student.user.role, UserRole.STUDENT)

    def test_link_teacher_record(self):
        teacher = Teacher.objects.create(name='Ada Lovelace', email='ada@uni.test', employee_id='T-001')
        self.run_command(
            '--email', 'ada@uni.test', '--password', 'testpass123',
            '--role', 'TEACHER', '--employee-id', 'T-001',
        )
        teacher.refresh_from_db()
        self.assertEqual(teacher.user.role, UserRole.TEACHER)

    def test_duplicate_email(self):
        User.objects.create_user(email='dup@test.com', password='testpass123')
        with self.assertRaises(CommandError):
            self.run_command('--email', 'dup@test.com', '--password', 'testpass123')

    def test_unknown_roll_number(self):
        with self.assertRaises(CommandError):
            self.run_command(
                '--email', 'new@test.com', '--password', 'testpass123', '--roll-number', 'R-404',
            )
        self.assertFalse(User.objects.filter(email='new@test.com').exists())

    def test_pending_flag(self):
        self.run_command('--email', 'wait@test.com', '--password', 'testpass123', '--pending')
        self.assertEqual(User.objects.get(email='wait@test.com').status, UserStatus.PENDING)
