"""
Tests for sign-in, sign-up, sessions and password resets
"""
import pytest

ADMIN_EMAIL = 'admin@homecarelicensing.com'
ADMIN_PASSWORD = 'admin123'


@pytest.mark.integration
class TestLogin:
    """Tests for /api/auth/login"""

    def test_seeded_admin_can_log_in(self, client):
        response = client.post('/api/auth/login', json={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
        data = response.get_json()
        assert response.status_code == 200
        assert data['user']['role'] == 'admin'
        assert data['redirect'] == '/admin'
        assert 'password_hash' not in data['user']

    def test_email_is_case_insensitive(self, client):
        response = client.post('/api/auth/login',
                               json={'email': ADMIN_EMAIL.upper(), 'password': ADMIN_PASSWORD})
        assert response.status_code == 200

    def test_wrong_password(self, client):
        response = client.post('/api/auth/login', json={'email': ADMIN_EMAIL, 'password': 'nope'})
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Invalid email or password'

    def test_missing_fields(self, client):
        response = client.post('/api/auth/login', json={'email': ADMIN_EMAIL})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Email and password required'

    def test_deactivated_account(self, client, make_user):
        user = make_user('gone@example.com', 'company_owner')
        from database import get_db_session
        from services.users_repository import UsersRepository
        with get_db_session() as db:
            UsersRepository(db).toggle_user_status(user['id'], False)

        response = client.post('/api/auth/login', json={'email': 'gone@example.com', 'password': 'password123'})
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Account is deactivated'


@pytest.mark.integration
class TestSignup:
    """Tests for /api/auth/signup"""

    def test_signup_creates_owner_and_client(self, client):
        response = client.post('/api/auth/signup', json={
            'email': 'new.owner@example.com', 'password': 'secret1', 'full_name': 'New Owner'
        })
        assert response.status_code == 201
        assert response.get_json()['redirect'] == '/dashboard'

        me = client.get('/api/clients/me')
        assert me.status_code == 200
        assert me.get_json()['client']['contact_email'] == 'new.owner@example.com'

    def test_signup_duplicate_email(self, client):
        response = client.post('/api/auth/signup', json={'email': ADMIN_EMAIL, 'password': 'secret1'})
        assert response.status_code == 400
        assert 'already exists' in response.get_json()['error']

    def test_signup_short_password(self, client):
        response = client.post('/api/auth/signup', json={'email': 'a@example.com', 'password': '123'})
        assert response.status_code == 400

    @pytest.mark.parametrize('role', ['admin', 'expert'])
    def test_signup_cannot_choose_privileged_role(self, client, role):
        response = client.post('/api/auth/signup', json={
            'email': 'climber@example.com', 'password': 'secret1', 'role': role
        })

        assert response.status_code == 400
        assert 'created by an administrator' in response.get_json()['error']
        assert client.get('/api/auth/current-user').status_code == 401

    def test_signup_as_staff_member(self, client):
        response = client.post('/api/auth/signup', json={
            'email': 'staff@example.com', 'password': 'secret1', 'role': 'staff_member'
        })

        assert response.status_code == 201
        assert response.get_json()['user']['role'] == 'staff_member'
        assert response.get_json()['redirect'] == '/staff-dashboard'


@pytest.mark.integration
class TestSession:
    """Tests for current user, logout and access control"""

    def test_current_user_requires_login(self, client):
        response = client.get('/api/auth/current-user')
        assert response.status_code == 401
        assert response.get_json()['redirect'] == '/login'

    def test_current_user(self, owner_client):
        response = owner_client.get('/api/auth/current-user')
        assert response.get_json()['user']['email'] == 'owner@example.com'

    def test_logout_clears_session(self, owner_client):
        assert owner_client.post('/api/auth/logout').status_code == 200
        assert owner_client.get('/api/auth/current-user').status_code == 401

    def test_owner_cannot_use_admin_api(self, owner_client):
        response = owner_client.get('/api/admin/users')
        assert response.status_code == 403
        assert response.get_json()['error'] == 'Admin access required'


@pytest.mark.integration
class TestPasswords:
    """Tests for password reset and change"""

    def test_reset_request_does_not_reveal_accounts(self, client):
        response = client.post('/api/auth/password-reset', json={'email': 'nobody@example.com'})
        assert response.status_code == 200
        assert response.get_json()['success'] is True

    def test_reset_request_requires_email(self, client):
        assert client.post('/api/auth/password-reset', json={}).status_code == 400

    def test_reset_with_token(self, app, client, owner_user):
        import auth
        with app.test_request_context():
            token = auth.generate_reset_token('owner@example.com')

        response = client.post('/api/auth/password-reset/confirm', json={'token': token, 'password': 'brand-new'})
        assert response.status_code == 200

        login = client.post('/api/auth/login', json={'email': 'owner@example.com', 'password': 'brand-new'})
        assert login.status_code == 200

    def test_reset_with_bad_token(self, client):
        response = client.post('/api/auth/password-reset/confirm',
                               json={'token': 'garbage', 'password': 'brand-new'})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid reset link'

    def test_change_password(self, owner_client):
        wrong = owner_client.put('/api/auth/password',
                                 json={'current_password': 'nope', 'new_password': 'another1'})
        assert wrong.status_code == 400
        assert wrong.get_json()['error'] == 'Current password is incorrect'

        ok = owner_client.put('/api/auth/password',
                              json={'current_password': 'password123', 'new_password': 'another1'})
        assert ok.status_code == 200
