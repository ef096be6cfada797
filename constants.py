"""
Shared domain constants: US states, user roles, application statuses and expert step phases.
"""

US_STATES = [
    'Alabama', 'Alaska', 'Arizona', 'Arkansas', 'California', 'Colorado',
    'Connecticut', 'Delaware', 'Florida', 'Georgia', 'Hawaii', 'Idaho',
    'Illinois', 'Indiana', 'Iowa', 'Kansas', 'Kentucky', 'Louisiana',
    'Maine', 'Maryland', 'Massachusetts', 'Michigan', 'Minnesota',
    'Mississippi', 'Missouri', 'Montana', 'Nebraska', 'Nevada',
    'New Hampshire', 'New Jersey', 'New Mexico', 'New York',
    'North Carolina', 'North Dakota', 'Ohio', 'Oklahoma', 'Oregon',
    'Pennsylvania', 'Rhode Island', 'South Carolina', 'South Dakota',
    'Tennessee', 'Texas', 'Utah', 'Vermont', 'Virginia', 'Washington',
    'West Virginia', 'Wisconsin', 'Wyoming',
]

# User roles and where each one lands after sign-in
ROLES = {
    'admin': {'name': 'Administrator', 'dashboard': '/admin'},
    'company_owner': {'name': 'Company Owner', 'dashboard': '/dashboard'},
    'staff_member': {'name': 'Staff Member', 'dashboard': '/staff-dashboard'},
    'expert': {'name': 'Licensing Expert', 'dashboard': '/expert'},
}

# Roles open to self-registration; admins and experts are created by an admin
SIGNUP_ROLES = ['company_owner', 'staff_member']

APPLICATION_STATUSES = [
    'requested',
    'in_progress',
    'under_review',
    'needs_revision',
    'approved',
    'rejected',
    'closed',
]

APPLICATION_DOCUMENT_STATUSES = ['pending', 'approved', 'rejected']

BILLING_STATUSES = ['pending', 'paid', 'overdue']

EXPERT_STATUSES = ['active', 'inactive']

EXPERT_STEP_PHASES = [
    'Client Intake',
    'Application Preparation',
    'Application Submission',
    'Survey Preparation',
    'Survey Guidance',
]

DEFAULT_EXPERT_STEP_PHASE = EXPERT_STEP_PHASES[0]

DEFAULT_EXPERT_ROLE = 'Licensing Specialist'

CERTIFICATION_STATUS_ACTIVE = 'Active'
CERTIFICATION_STATUS_EXPIRING = 'Expiring Soon'
CERTIFICATION_STATUS_EXPIRED = 'Expired'
