"""
Users Repository - Database access layer for user accounts.
"""

import logging
from datetime import datetime
from typing import List, Optional, Dict
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from database.models import UserProfile
from services.event_logger import EventLogger

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return generate_password_hash(password, method='pbkdf2:sha256')


def normalize_email(email: str) -> str:
    return (email or '').lower().strip()


class UsersRepository:
    """Repository for user database operations."""

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.actor_id = actor_id
        self.events = EventLogger(session, actor_id)

    def _get(self, user_id: str) -> Optional[UserProfile]:
        return self.session.query(UserProfile).filter(UserProfile.id == user_id).first()

    def list_users(self, role: str = None, active_only: bool = False) -> List[Dict]:
        """List users, newest first."""
        query = self.session.query(UserProfile)
        if role:
            query = query.filter(UserProfile.role == role)
        if active_only:
            query = query.filter(UserProfile.is_active == True)  # noqa: E712
        users = query.order_by(UserProfile.created_at.desc()).all()
        return [u.to_dict() for u in users]

    def get_user(self, user_id: str) -> Optional[Dict]:
        user = self._get(user_id)
        return user.to_dict() if user else None

    def get_user_by_email(self, email: str) -> Optional[UserProfile]:
        """Get a user by email (returns model for auth)."""
        return self.session.query(UserProfile).filter(
            UserProfile.email == normalize_email(email)
        ).first()

    def create_user(self, email: str, password: str, full_name: str = None,
                    role: str = 'company_owner', is_active: bool = True) -> Dict:
        """Insert a user row. Raises ValueError when the email is taken."""
        normalized = normalize_email(email)
        if self.get_user_by_email(normalized):
            raise ValueError(f"A user with email {normalized} already exists")

        user = UserProfile(
            email=normalized,
            password_hash=hash_password(password),
            full_name=(full_name or '').strip() or None,
            role=role,
            is_active=is_active
        )
        self.session.add(user)
        self.session.flush()
        self.events.log_create('user', user.id, {'email': normalized, 'role': role})
        logger.info(f"Created user: {user.id} ({role})")
        return user.to_dict()

    def create_user_account(self, email: str, password: str, full_name: str, role: str) -> Dict:
        """
        Admin-side account creation.

        An existing account is not an error: its id is returned with a message
        so callers can link records to it.
        """
        normalized = normalize_email(email)
        existing = self.get_user_by_email(normalized)
        if existing:
            logger.info(f"User already exists: {existing.id}")
            return {
                'success': True,
                'user_id': existing.id,
                'created': False,
                'message': f"User already exists. Existing account {email} was linked."
            }

        user = self.create_user(normalized, password, full_name, role)
        return {
            'success': True,
            'user_id': user['id'],
            'created': True,
            'message': f"User created for {email}."
        }

    def create_staff_user_account(self, email: str, password: str,
                                  first_name: str, last_name: str) -> Dict:
        """Login account for a caregiver/staff member."""
        return self.create_user_account(email, password, f"{first_name} {last_name}", 'staff_member')

    def update_user(self, user_id: str, data: Dict) -> Optional[Dict]:
        user = self._get(user_id)
        if not user:
            return None

        changes = {}
        for key in ['full_name', 'role', 'is_active']:
            if key in data:
                setattr(user, key, data[key])
                changes[key] = data[key]

        if data.get('email'):
            user.email = normalize_email(data['email'])
            changes['email'] = user.email

        user.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_update('user', user_id, changes)
        logger.info(f"Updated user: {user_id}")
        return user.to_dict()

    def set_user_password(self, user_id: str, new_password: str) -> Dict:
        """Admin sets a user's password. Raises ValueError('User not found')."""
        user = self._get(user_id)
        if not user:
            raise ValueError('User not found')

        user.password_hash = hash_password(new_password)
        user.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log('user', user_id, 'PASSWORD_CHANGED')
        logger.info(f"Password set for user: {user_id}")
        return {
            'success': True,
            'message': f"Password has been set for {user.email}."
        }

    def toggle_user_status(self, user_id: str, is_active: bool) -> Optional[Dict]:
        user = self._get(user_id)
        if not user:
            return None

        old_status = 'active' if user.is_active else 'inactive'
        user.is_active = bool(is_active)
        user.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_status_change('user', user_id, old_status,
                                      'active' if user.is_active else 'inactive')
        logger.info(f"User {user_id} active={user.is_active}")
        return user.to_dict()

    def delete_user(self, user_id: str) -> bool:
        """Soft delete a user."""
        user = self._get(user_id)
        if not user:
            return False
        user.is_active = False
        user.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_delete('user', user_id)
        logger.info(f"Deleted (deactivated) user: {user_id}")
        return True

    def verify_password(self, user: UserProfile, password: str) -> bool:
        """Verify a user's password."""
        return check_password_hash(user.password_hash, password)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> bool:
        """Self-service password change; False when the current password is wrong."""
        user = self._get(user_id)
        if not user or not self.verify_password(user, current_password):
            return False
        user.password_hash = hash_password(new_password)
        user.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log('user', user_id, 'PASSWORD_CHANGED')
        return True

    def update_last_login(self, user_id: str) -> None:
        user = self._get(user_id)
        if user:
            user.last_login = datetime.utcnow()
            self.session.flush()

    def get_users_by_role(self, role: str) -> List[Dict]:
        """Get all active users with a specific role."""
        return self.list_users(role=role, active_only=True)
