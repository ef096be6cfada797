"""
Services package for the Home Care Licensing Platform.
Contains repository classes for database access and the domain services
(reports, email, notifications) built on them.
"""

from services.users_repository import UsersRepository
from services.agencies_repository import AgenciesRepository
from services.staff_repository import StaffRepository
from services.certifications_repository import CertificationsRepository
from services.system_lists_repository import SystemListsRepository
from services.license_types_repository import LicenseTypesRepository
from services.license_requirements_repository import LicenseRequirementsRepository
from services.applications_repository import ApplicationsRepository
from services.licenses_repository import LicensesRepository
from services.experts_repository import ExpertsRepository
from services.billing_repository import BillingRepository
from services.cases_repository import CasesRepository
from services.messaging_repository import MessagingRepository
from services.notification_service import NotificationService
from services.reports_service import ReportsService
from services.email_service import EmailService
from services.event_logger import EventLogger

__all__ = [
    'UsersRepository',
    'AgenciesRepository',
    'StaffRepository',
    'CertificationsRepository',
    'SystemListsRepository',
    'LicenseTypesRepository',
    'LicenseRequirementsRepository',
    'ApplicationsRepository',
    'LicensesRepository',
    'ExpertsRepository',
    'BillingRepository',
    'CasesRepository',
    'MessagingRepository',
    'NotificationService',
    'ReportsService',
    'EmailService',
    'EventLogger',
]
