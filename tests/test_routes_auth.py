"""
Tests for registration, login and bearer token handling.
"""
from datetime import datetime, timedelta, timezone

import pytest

from vidshare.services.tokens import issue_token
from vidshare.stores import get_store


class TestRegister:
    """Tests for POST /register."""

    def test_register_success(self, client, app):
        """Test registering a new user."""
        response = client.post('/register', json={
            'name': 'Alice',
            'email': 'Alice@Example.com',
            'password': 'Secret123!',
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['message'] == 'User registered'
        assert data['userId'] is not None

        with app.app_context():
            user = get_store().get_user(data['userId'])
            assert user.email == 'alice@example.com'
            assert user.password_hash != 'Secret123!'

    def test_register_form_encoded(self, client):
        """Test that form fields are accepted as well as JSON."""
        response = client.post('/register', data={
            'name': 'Form User',
            'email': 'form@example.com',
            'password': 'Secret123!',
        })
        assert response.status_code == 200

    @pytest.mark.parametrize('payload', [
        {},
        {'name': 'Alice', 'email': 'alice@example.com'},
        {'name': 'Alice', 'password': 'Secret123!'},
        {'email': 'alice@example.com', 'password': 'Secret123!'},
        {'name': '  ', 'email': 'alice@example.com', 'password': 'Secret123!'},
    ])
    def test_register_missing_fields(self, client, payload):
        """Test that every field is required."""
        response = client.post('/register', json=payload)

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Missing fields'}

    def test_register_invalid_email(self, client):
        """Test that malformed email addresses are rejected."""
        response = client.post('/register', json={
            'name': 'Alice', 'email': 'not-an-email', 'password': 'Secret123!',
        })
        assert response.status_code == 400

    def test_register_duplicate_email(self, client, sample_user):
        """Test that registering the same email twice is a conflict."""
        response = client.post('/register', json={
            'name': 'Someone Else',
            'email': sample_user['email'].upper(),
            'password': 'Another123!',
        })

        assert response.status_code == 409
        assert response.get_json() == {'error': 'Email already exists'}


class TestLogin:
    """Tests for POST /login."""

    def test_login_success(self, client, sample_user):
        """Test logging in returns a token and the public user."""
        response = client.post('/login', json={
            'email': sample_user['email'],
            'password': sample_user['password'],
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['token']
        assert data['user'] == {
            'id': sample_user['id'],
            'name': sample_user['name'],
            'email': sample_user['email'],
        }
        assert 'password' not in data['user']

    def test_login_email_is_case_insensitive(self, client, sample_user):
        """Test that the email is matched regardless of case."""
        response = client.post('/login', json={
            'email': sample_user['email'].upper(),
            'password': sample_user['password'],
        })
        assert response.status_code == 200

    def test_login_wrong_password_and_unknown_email_look_the_same(self, client, sample_user):
        """Test that a wrong password and an unknown email give identical responses."""
        wrong_password = client.post('/login', json={
            'email': sample_user['email'], 'password': 'WrongPassword1!',
        })
        unknown_email = client.post('/login', json={
            'email': 'nobody@example.com', 'password': sample_user['password'],
        })

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.get_json() == unknown_email.get_json()
        assert wrong_password.get_json() == {'error': 'Email or password is incorrect'}

    def test_login_rejects_single_character_changes(self, client, sample_user):
        """Test that any one-character change of the password fails."""
        password = sample_user['password']
        variants = {
            password[:-1],
            password + 'x',
            'x' + password[1:],
            password[:3] + password[3].swapcase() + password[4:],
            ' ' + password,
        }

        for variant in variants:
            response = client.post('/login', json={'email': sample_user['email'], 'password': variant})
            assert response.status_code == 401, variant

    def test_login_missing_fields(self, client):
        """Test that email and password are both required."""
        response = client.post('/login', json={'email': 'someone@example.com'})
        assert response.status_code == 400

    def test_login_failure_is_logged(self, client, sample_user, caplog):
        """Test that failed attempts are logged without the password."""
        with caplog.at_level('WARNING'):
            client.post('/login', json={'email': sample_user['email'], 'password': 'Nope123!'})

        assert "Failed login attempt for email 'testuser@example.com'" in caplog.text
        assert 'Nope123!' not in caplog.text


class TestBearerToken:
    """Tests for GET /me and token validation."""

    def test_me_with_valid_token(self, client, auth_headers, sample_user):
        """Test that a login token identifies its user."""
        response = client.get('/me', headers=auth_headers)

        assert response.status_code == 200
        assert response.get_json()['user']['email'] == sample_user['email']

    def test_me_without_token(self, client):
        """Test that anonymous requests are rejected."""
        response = client.get('/me')

        assert response.status_code == 401
        assert response.get_json() == {'error': 'Authentication required'}

    def test_me_with_garbage_token(self, client):
        """Test that a malformed token is treated as anonymous."""
        response = client.get('/me', headers={'Authorization': 'Bearer not.a.token'})
        assert response.status_code == 401

    def test_me_with_other_scheme(self, client, sample_user, app):
        """Test that only the Bearer scheme is accepted."""
        token = issue_token(sample_user['id'], app.config['SECRET_KEY'])
        response = client.get('/me', headers={'Authorization': f'Basic {token}'})
        assert response.status_code == 401

    def test_me_with_expired_token(self, client, sample_user, app):
        """Test that tokens stop working after seven days."""
        issued = datetime.now(timezone.utc) - timedelta(days=8)
        token = issue_token(sample_user['id'], app.config['SECRET_KEY'], now=issued)

        response = client.get('/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401

    def test_me_with_token_signed_by_other_key(self, client, sample_user):
        """Test that tokens signed with another secret are rejected."""
        token = issue_token(sample_user['id'], 'some-other-secret')

        response = client.get('/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401

    def test_me_for_unknown_user(self, client, app):
        """Test that a valid token for a missing user is anonymous."""
        token = issue_token('999999', app.config['SECRET_KEY'])

        response = client.get('/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 401
