"""
Pytest configuration and shared fixtures
"""
import os
import sys
import pytest
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault('FLASK_ENV', 'testing')


@pytest.fixture
def app_config():
    """Fixture providing test configuration"""
    from config import TestingConfig
    return TestingConfig


@pytest.fixture
def app(app_config):
    """Flask app bound to a fresh in-memory SQLite database"""
    from app_init import create_app
    return create_app(app_config)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session():
    """
    Session on a fresh in-memory database, without the Flask app.
    Tables are dropped again after each test.
    """
    from database import configure_database, init_db
    from database.connection import get_session_factory, drop_db

    configure_database('sqlite://')
    init_db()
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()
        drop_db()


def _create_user(email, role, full_name='Test User', password='password123'):
    from database import get_db_session
    from services.users_repository import UsersRepository

    with get_db_session() as db:
        return UsersRepository(db).create_user(email, password, full_name, role)


def _login_as(client, user):
    with client.session_transaction() as sess:
        sess['user_id'] = user['id']
        sess['user_email'] = user['email']
        sess['user_name'] = user.get('full_name')
        sess['user_role'] = user['role']
    return client


@pytest.fixture
def make_user(app):
    """Factory creating users in the app database"""
    return _create_user


@pytest.fixture
def admin_user(app):
    """The admin account seeded at startup"""
    from database import get_db_session
    from services.users_repository import UsersRepository

    with get_db_session() as db:
        return UsersRepository(db).get_user_by_email(app.config['DEFAULT_ADMIN_EMAIL']).to_dict()


@pytest.fixture
def admin_client(client, admin_user):
    return _login_as(client, admin_user)


@pytest.fixture
def owner_user(app):
    """Company owner with a client record"""
    from database import get_db_session
    from services.agencies_repository import AgenciesRepository

    user = _create_user('owner@example.com', 'company_owner', 'Olivia Owner')
    with get_db_session() as db:
        AgenciesRepository(db).create_client({
            'company_name': 'Sunrise Home Care',
            'contact_name': 'Olivia Owner',
            'contact_email': user['email'],
            'company_owner_id': user['id']
        })
    return user


@pytest.fixture
def owner_client(app, client, owner_user):
    return _login_as(client, owner_user)


@pytest.fixture
def expert_user(app):
    return _create_user('expert@example.com', 'expert', 'Evan Expert')


@pytest.fixture
def expert_client(app, client, expert_user):
    return _login_as(client, expert_user)


@pytest.fixture
def login_as():
    return _login_as


@pytest.fixture
def sample_certification_data():
    """Fixture providing a valid certification payload"""
    return {
        'type': 'CPR',
        'license_number': 'CPR-12345',
        'state': 'Texas',
        'issue_date': '2025-01-15',
        'expiration_date': '2027-01-15',
        'issuing_authority': 'American Heart Association',
        'status': 'Active'
    }


@pytest.fixture
def sample_staff_data():
    return {
        'first_name': 'Jane',
        'last_name': 'Doe',
        'email': 'jane.doe@example.com',
        'phone': '(512) 555-0100',
        'role': 'Caregiver',
        'job_title': 'Home Health Aide'
    }
