"""
API Blueprints Package

All HTTP route handlers for the application, organized by domain.
Each module defines a Flask Blueprint registered in app/__init__.py.

BLUEPRINT REFERENCE:
====================

Accounts:
- auth_routes.py          : Sign-in/sign-up, logout, current user, password resets (/api/auth/*)
- admin.py                : Dashboard stats, user accounts, audit trail (/api/admin/*)

Agencies & Staff:
- agencies.py             : Agencies and client records (/api/agencies, /api/clients)
- staff.py                : Staff members of a client (/api/staff)
- certifications.py       : The signed-in user's certifications (/api/certifications)
- reports.py              : Staff certification and roster reports, CSV export (/api/reports)

Licensing:
- configuration.py        : Pricing, license types, certification types, staff roles
- license_requirements.py : Requirement templates, steps, documents, expert steps
- applications.py         : License applications, steps, documents
- licenses.py             : Licenses held by company owners
- experts.py              : Licensing experts

Billing:
- billing.py              : Billing records, monthly agency billing, cases

Communication:
- messages.py             : Application conversations and in-app notifications
- notifications_email.py  : Document upload email (/api/send-email-notification)

Health checks (/api/health, /api/ready, /api/metrics, /api/ping) live in
health_checks.py at the project root.
"""

# All blueprints are imported and registered in app/__init__.py
# This file serves as documentation only

__all__ = []
