# users/tests.py

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

User = get_user_model()


class AuthAPITest(APITestCase):

    def setUp(self):
        self.user = User.objects.create_user(
            username='testuser',
            email='test@example.com',
            password='testpass123',
            first_name='Min',
            last_name='Kim',
        )

    def test_login_returns_token_pair(self):
        response = self.client.post(
            '/api/v1/auth/login/',
            {'email': 'test@example.com', 'password': 'testpass123'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_login_with_wrong_password_fails(self):
        response = self.client.post(
            '/api/v1/auth/login/',
            {'email': 'test@example.com', 'password': 'wrong'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_user_detail_with_bearer_token(self):
        login = self.client.post(
            '/api/v1/auth/login/',
            {'email': 'test@example.com', 'password': 'testpass123'},
            format='json'
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")

        response = self.client.get('/api/v1/auth/user/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'test@example.com')
        self.assertEqual(set(response.data), {'id', 'email', 'username', 'first_name', 'last_name'})


class RegisterAPITest(APITestCase):
    url = '/api/v1/auth/register/'

    def payload(self, **overrides):
        data = {
            'email': 'new@example.com',
            'username': 'new_user',
            'password': 'str0ng-pass',
            'password2': 'str0ng-pass',
        }
        data.update(overrides)
        return data

    def test_register_then_login(self):
        response = self.client.post(self.url, self.payload(first_name='Ji'), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('password', response.data)
        user = User.objects.get(email='new@example.com')
        self.assertTrue(user.check_password('str0ng-pass'))
        self.assertEqual(user.first_name, 'Ji')

        login = self.client.post(
            '/api/v1/auth/login/',
            {'email': 'new@example.com', 'password': 'str0ng-pass'},
            format='json'
        )
        self.assertEqual(login.status_code, status.HTTP_200_OK)

    def test_password_mismatch(self):
        response = self.client.post(self.url, self.payload(password2='other-pass'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password2', response.data)
        self.assertFalse(User.objects.exists())

    def test_invalid_fields_are_rejected(self):
        cases = {
            'email': {'email': 'not-an-email'},
            'username': {'username': 'ab'},
            'password': {'password': 'short', 'password2': 'short'},
        }
        for field, overrides in cases.items():
            with self.subTest(field=field):
                response = self.client.post(self.url, self.payload(**overrides), format='json')

                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn(field, response.data)

    def test_duplicate_email_or_username(self):
        User.objects.create_user(email='taken@example.com', password='testpass123', username='taken')

        by_email = self.client.post(self.url, self.payload(email='taken@example.com'), format='json')
        by_username = self.client.post(self.url, self.payload(username='taken'), format='json')

        self.assertIn('email', by_email.data)
        self.assertIn('username', by_username.data)
        self.assertEqual(User.objects.count(), 1)
