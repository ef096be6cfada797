"""
Tests for user accounts
"""
import pytest

from services.users_repository import UsersRepository, normalize_email


@pytest.fixture
def users(db_session):
    return UsersRepository(db_session)


@pytest.mark.unit
class TestNormalizeEmail:

    def test_lowercases_and_strips(self):
        assert normalize_email('  Jane.Doe@Example.COM ') == 'jane.doe@example.com'

    def test_none(self):
        assert normalize_email(None) == ''


@pytest.mark.integration
class TestUserAccounts:
    """Tests for account creation and passwords"""

    def test_create_user_hashes_password(self, users):
        user = users.create_user('owner@example.com', 'password123', 'Olivia Owner')

        model = users.get_user_by_email('owner@example.com')
        assert user['role'] == 'company_owner'
        assert model.password_hash != 'password123'
        assert users.verify_password(model, 'password123') is True
        assert users.verify_password(model, 'wrong') is False

    def test_duplicate_email_rejected(self, users):
        users.create_user('owner@example.com', 'password123')

        with pytest.raises(ValueError):
            users.create_user('OWNER@example.com', 'password123')

    def test_create_user_account_links_existing(self, users):
        first = users.create_user_account('Staff@Example.com', 'password123', 'Sam Staff', 'staff_member')
        second = users.create_user_account('staff@example.com', 'other-pass', 'Sam Staff', 'staff_member')

        assert first['created'] is True
        assert second['created'] is False
        assert second['user_id'] == first['user_id']
        assert second['message'].startswith('User already exists.')

    def test_create_staff_user_account(self, users):
        result = users.create_staff_user_account('sam@example.com', 'password123', 'Sam', 'Staff')

        user = users.get_user(result['user_id'])
        assert user['role'] == 'staff_member'
        assert user['full_name'] == 'Sam Staff'

    def test_set_user_password(self, users):
        user = users.create_user('owner@example.com', 'password123')

        result = users.set_user_password(user['id'], 'new-password')

        assert result['success'] is True
        assert users.verify_password(users.get_user_by_email('owner@example.com'), 'new-password')

    def test_set_password_unknown_user(self, users):
        with pytest.raises(ValueError, match='User not found'):
            users.set_user_password('missing', 'new-password')

    def test_change_password_requires_current(self, users):
        user = users.create_user('owner@example.com', 'password123')

        assert users.change_password(user['id'], 'wrong', 'new-password') is False
        assert users.change_password(user['id'], 'password123', 'new-password') is True


@pytest.mark.integration
class TestUserStatus:

    def test_get_users_by_role_skips_inactive(self, users):
        active = users.create_user('a@example.com', 'password123', role='expert')
        inactive = users.create_user('b@example.com', 'password123', role='expert')
        users.create_user('c@example.com', 'password123', role='company_owner')

        users.toggle_user_status(inactive['id'], False)

        experts = users.get_users_by_role('expert')
        assert [u['id'] for u in experts] == [active['id']]

    def test_delete_is_soft(self, users):
        user = users.create_user('owner@example.com', 'password123')

        assert users.delete_user(user['id']) is True
        assert users.get_user(user['id'])['is_active'] is False

    def test_update_last_login(self, users):
        user = users.create_user('owner@example.com', 'password123')

        users.update_last_login(user['id'])

        assert users.get_user(user['id'])['last_login'] is not None

    def test_toggle_unknown_user(self, users):
        assert users.toggle_user_status('missing', True) is None
