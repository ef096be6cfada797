"""
User Authentication and Authorization Module
Handles sign-in/sign-up, session management, password resets and role-based access.

Accounts live in the user_profiles table; the Flask session only carries the
user id, email, name and role of the signed-in user.
"""
import logging
from functools import wraps

from flask import session, redirect, jsonify, request, current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from constants import ROLES, SIGNUP_ROLES
from database import get_db_session
from services.agencies_repository import AgenciesRepository
from services.email_service import get_email_service
from services.event_logger import EventLogger
from services.users_repository import UsersRepository, normalize_email
from validators import validate_email, validate_password, validate_role

logger = logging.getLogger(__name__)

PASSWORD_RESET_SALT = 'password-reset'
LOGIN_PATH = '/login'


def get_dashboard_path(role):
    """Landing page for a role."""
    return ROLES.get(role, {}).get('dashboard', '/dashboard')


# ============================================================================
# SIGN IN / SIGN UP
# ============================================================================

def authenticate_user(email, password):
    """Check credentials. Returns (user dict, None) or (None, error message)."""
    with get_db_session() as db:
        users = UsersRepository(db)
        user = users.get_user_by_email(email)

        if not user or not users.verify_password(user, password or ''):
            return None, "Invalid email or password"

        if not user.is_active:
            return None, "Account is deactivated"

        users.update_last_login(user.id)
        EventLogger(db, user.id).log('user', user.id, 'USER_LOGIN')
        logger.info(f"User authenticated: {user.email}")
        return user.to_dict(), None


def sign_in(email, password):
    """Authenticate and start a session. Returns (user dict, error)."""
    user, error = authenticate_user(email, password)
    if error:
        return None, error
    login_user(user)
    return user, None


def sign_up(email, password, full_name=None, role='company_owner'):
    """
    Register an account and start a session. Returns (user dict, error).

    Company owners also get their client record so agencies, staff and
    reports have something to hang off.
    """
    is_valid, error = validate_email(email or '')
    if not is_valid:
        return None, error
    is_valid, error = validate_password(password)
    if not is_valid:
        return None, error
    is_valid, error = validate_role(role)
    if not is_valid:
        return None, error
    if role not in SIGNUP_ROLES:
        return None, f"Accounts with role {role} are created by an administrator"

    try:
        with get_db_session() as db:
            user = UsersRepository(db).create_user(email, password, full_name, role)
            if role == 'company_owner':
                AgenciesRepository(db, user['id']).create_client({
                    'company_name': '',
                    'contact_name': full_name,
                    'contact_email': user['email'],
                    'company_owner_id': user['id']
                })
    except ValueError as e:
        return None, str(e)

    login_user(user)
    logger.info(f"User signed up: {user['email']} ({role})")
    return user, None


# ============================================================================
# SESSION
# ============================================================================

def login_user(user):
    """Set user session"""
    session['user_id'] = user['id']
    session['user_email'] = user['email']
    session['user_name'] = user.get('full_name')
    session['user_role'] = user['role']
    session.permanent = True


def logout_user():
    """Clear user session"""
    user_id = session.get('user_id')
    if user_id:
        with get_db_session() as db:
            EventLogger(db, user_id).log('user', user_id, 'USER_LOGOUT')
    session.clear()


def get_current_user_id():
    return session.get('user_id')


def get_current_role():
    return session.get('user_role')


def get_current_user():
    """Get currently logged in user"""
    user_id = session.get('user_id')
    if not user_id:
        return None
    with get_db_session() as db:
        return UsersRepository(db).get_user(user_id)


def is_authenticated():
    """Check if user is logged in"""
    return 'user_id' in session


def has_role(*roles):
    return is_authenticated() and session.get('user_role') in roles


def is_admin():
    return has_role('admin')


# ============================================================================
# DECORATORS
# ============================================================================

def _wants_json():
    return request.is_json or request.path.startswith('/api/')


def _unauthenticated():
    if _wants_json():
        return jsonify({'success': False, 'error': 'Authentication required', 'redirect': LOGIN_PATH}), 401
    return redirect(LOGIN_PATH)


def _forbidden(message):
    if _wants_json():
        return jsonify({'success': False, 'error': message}), 403
    return redirect(get_dashboard_path(session.get('user_role')))


def login_required(f):
    """Decorator to require login for a route"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_authenticated():
            return _unauthenticated()
        return f(*args, **kwargs)
    return decorated_function


def role_required(*roles):
    """Decorator to require one of the given roles"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not is_authenticated():
                return _unauthenticated()
            if not has_role(*roles):
                return _forbidden('Permission denied')
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def admin_required(f):
    """Decorator to require the admin role"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_authenticated():
            return _unauthenticated()
        if not is_admin():
            return _forbidden('Admin access required')
        return f(*args, **kwargs)
    return decorated_function


# ============================================================================
# PASSWORDS
# ============================================================================

def _reset_serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=PASSWORD_RESET_SALT)


def generate_reset_token(email):
    return _reset_serializer().dumps(normalize_email(email))


def request_password_reset(email):
    """
    Email a reset link if the account exists.

    Returns the token (None for unknown emails) so callers never reveal
    whether an address is registered.
    """
    with get_db_session() as db:
        user = UsersRepository(db).get_user_by_email(email)
        if not user or not user.is_active:
            logger.info(f"Password reset requested for unknown email: {normalize_email(email)}")
            return None

    token = generate_reset_token(email)
    reset_url = f"{current_app.config.get('APP_URL', '').rstrip('/')}/reset-password?token={token}"
    result = get_email_service(current_app.config).send_password_reset(normalize_email(email), reset_url)
    if not result['success']:
        logger.warning(f"Password reset email not sent: {result.get('error')}")
    return token


def reset_password(token, new_password):
    """Set a new password from a reset token. Returns (ok, error)."""
    is_valid, error = validate_password(new_password)
    if not is_valid:
        return False, error

    max_age = current_app.config.get('PASSWORD_RESET_MAX_AGE', 3600)
    try:
        email = _reset_serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        return False, "Reset link has expired"
    except BadSignature:
        return False, "Invalid reset link"

    with get_db_session() as db:
        users = UsersRepository(db)
        user = users.get_user_by_email(email)
        if not user:
            return False, "User not found"
        users.set_user_password(user.id, new_password)

    logger.info(f"Password reset for {email}")
    return True, None


def update_password(user_id, current_password, new_password):
    """Self-service password change. Returns (ok, error)."""
    is_valid, error = validate_password(new_password)
    if not is_valid:
        return False, error

    with get_db_session() as db:
        if not UsersRepository(db, user_id).change_password(user_id, current_password, new_password):
            return False, "Current password is incorrect"
    return True, None
