"""
Database seeding for the Home Care Licensing Platform.
Creates the first admin account, the default pick lists and an initial
pricing row when they are missing.
"""

import logging
import os

from database.connection import get_db_session
from database.models import UserProfile, CertificationType, StaffRole, Pricing
from services.users_repository import hash_password, normalize_email

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@homecarelicensing.com"
DEFAULT_ADMIN_PASSWORD = "admin123"

DEFAULT_CERTIFICATION_TYPES = [
    'CPR',
    'First Aid',
    'Certified Nursing Assistant (CNA)',
    'Home Health Aide (HHA)',
    'Registered Nurse (RN)',
    'Licensed Practical Nurse (LPN)',
    'TB Test',
    'Background Check',
    "Driver's License",
]

DEFAULT_STAFF_ROLES = [
    'Administrator',
    'Director of Nursing',
    'Registered Nurse',
    'Licensed Practical Nurse',
    'Certified Nursing Assistant',
    'Home Health Aide',
    'Personal Care Aide',
    'Office Staff',
]

DEFAULT_OWNER_ADMIN_LICENSE = 50
DEFAULT_STAFF_LICENSE = 25


def seed_default_admin(session, email=None, password=None):
    """Create default admin user if none exists."""
    admin = session.query(UserProfile).filter_by(role='admin').first()
    if admin:
        logger.info(f"Admin user already exists: {admin.email}")
        return admin

    admin = UserProfile(
        email=normalize_email(email or os.environ.get('DEFAULT_ADMIN_EMAIL', DEFAULT_ADMIN_EMAIL)),
        password_hash=hash_password(password or os.environ.get('DEFAULT_ADMIN_PASSWORD', DEFAULT_ADMIN_PASSWORD)),
        full_name="Administrator",
        role='admin',
        is_active=True
    )
    session.add(admin)
    session.flush()
    logger.info(f"Created default admin user: {admin.email}")
    return admin


def seed_certification_types(session):
    if session.query(CertificationType).first():
        return 0
    for name in DEFAULT_CERTIFICATION_TYPES:
        session.add(CertificationType(certification_type=name))
    session.flush()
    logger.info(f"Seeded {len(DEFAULT_CERTIFICATION_TYPES)} certification types")
    return len(DEFAULT_CERTIFICATION_TYPES)


def seed_staff_roles(session):
    if session.query(StaffRole).first():
        return 0
    for name in DEFAULT_STAFF_ROLES:
        session.add(StaffRole(name=name))
    session.flush()
    logger.info(f"Seeded {len(DEFAULT_STAFF_ROLES)} staff roles")
    return len(DEFAULT_STAFF_ROLES)


def seed_pricing(session):
    pricing = session.query(Pricing).first()
    if pricing:
        return pricing
    pricing = Pricing(owner_admin_license=DEFAULT_OWNER_ADMIN_LICENSE,
                      staff_license=DEFAULT_STAFF_LICENSE)
    session.add(pricing)
    session.flush()
    logger.info("Created initial pricing row")
    return pricing


def seed_database(admin_email=None, admin_password=None):
    """
    Seed the database with default data if empty.
    Call this at application startup.
    """
    try:
        with get_db_session() as session:
            seed_default_admin(session, admin_email, admin_password)
            seed_certification_types(session)
            seed_staff_roles(session)
            seed_pricing(session)
        logger.info("Database seeding completed successfully")
        return True
    except Exception as e:
        logger.error(f"Database seeding failed: {e}")
        raise


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    seed_database()
