"""
Database package for the Home Care Licensing Platform.
Provides SQLAlchemy models, connection management, and session handling.
"""

from database.connection import (
    Base,
    configure_database,
    get_db,
    get_db_session,
    init_db,
    check_db_connection
)

from database.models import (
    UserProfile,
    Agency,
    Client,
    ClientState,
    StaffMember,
    Certification,
    CertificationType,
    StaffRole,
    LicenseType,
    LicenseRequirement,
    LicenseRequirementStep,
    LicenseRequirementDocument,
    Application,
    ApplicationStep,
    ApplicationDocument,
    License,
    LicenseDocument,
    LicensingExpert,
    ExpertState,
    Case,
    Pricing,
    Billing,
    Conversation,
    Message,
    Notification,
    EventLog
)

__all__ = [
    # Connection
    'Base',
    'configure_database',
    'get_db',
    'get_db_session',
    'init_db',
    'check_db_connection',
    # Models
    'UserProfile',
    'Agency',
    'Client',
    'ClientState',
    'StaffMember',
    'Certification',
    'CertificationType',
    'StaffRole',
    'LicenseType',
    'LicenseRequirement',
    'LicenseRequirementStep',
    'LicenseRequirementDocument',
    'Application',
    'ApplicationStep',
    'ApplicationDocument',
    'License',
    'LicenseDocument',
    'LicensingExpert',
    'ExpertState',
    'Case',
    'Pricing',
    'Billing',
    'Conversation',
    'Message',
    'Notification',
    'EventLog'
]
