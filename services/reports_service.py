"""
Reports Service - staff certification and roster reports for company owners.

Reports are always scoped to the client record owned by the requesting user.
A user without a client record gets an empty report.
"""

import csv
import io
import logging
from datetime import date
from typing import List, Dict, Optional
from sqlalchemy.orm import Session

from constants import CERTIFICATION_STATUS_EXPIRED, CERTIFICATION_STATUS_EXPIRING
from database.models import Client, StaffMember, Certification
from services.calculations import (
    classify_certification, is_expiring_or_expired, format_report_date
)

logger = logging.getLogger(__name__)

EMPTY_CELL = '—'

STAFF_CERTIFICATION_COLUMNS = [
    ('staff_name', 'Staff Name'),
    ('contact', 'Contact'),
    ('certification', 'Certification'),
    ('cert_number', 'Cert Number'),
    ('state', 'State'),
    ('issuing_authority', 'Issuing Authority'),
    ('issue_date', 'Issue Date'),
    ('expiration', 'Expiration'),
    ('status', 'Status'),
]

EXPIRING_CERTIFICATION_COLUMNS = [
    ('staff_name', 'Staff Name'),
    ('contact', 'Contact'),
    ('certification', 'Certification'),
    ('cert_number', 'Cert Number'),
    ('expiration', 'Expiration'),
    ('status', 'Status'),
]

STAFF_ROSTER_COLUMNS = [
    ('staff_name', 'Staff Name'),
    ('email', 'Email'),
    ('phone', 'Phone'),
    ('role', 'Role'),
    ('job_title', 'Job Title'),
    ('status', 'Status'),
]


def _staff_name(staff: Optional[StaffMember]) -> str:
    return f"{staff.first_name} {staff.last_name}" if staff else 'Unknown Staff'


def _contact(staff: Optional[StaffMember]) -> str:
    if not staff:
        return 'N/A'
    phone = f"({staff.phone})" if staff.phone else ''
    return f"{staff.email} {phone}".strip()


def to_csv(rows: List[Dict], columns: List[tuple]) -> str:
    """Render report rows as CSV text with a header line."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([label for _, label in columns])
    for row in rows:
        writer.writerow([row.get(key, '') for key, _ in columns])
    return output.getvalue()


class ReportsService:

    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id

    def _client(self) -> Optional[Client]:
        return self.session.query(Client).filter(Client.company_owner_id == self.user_id).first()

    def _staff(self, client_id: str) -> List[StaffMember]:
        return self.session.query(StaffMember).filter(
            StaffMember.company_owner_id == client_id
        ).order_by(StaffMember.first_name).all()

    def _staff_certifications(self):
        """(staff by user id, certifications ordered by expiration) for the owner's staff."""
        client = self._client()
        if not client:
            return {}, []

        staff = self._staff(client.id)
        staff_by_user = {s.user_id: s for s in staff if s.user_id}
        if not staff_by_user:
            return staff_by_user, []

        certifications = self.session.query(Certification).filter(
            Certification.user_id.in_(list(staff_by_user.keys()))
        ).order_by(Certification.expiration_date).all()
        return staff_by_user, certifications

    def get_staff_certifications_report(self, today: date = None) -> List[Dict]:
        """Every certification held by the owner's staff, with its current status."""
        staff_by_user, certifications = self._staff_certifications()

        rows = []
        for cert in certifications:
            staff = staff_by_user.get(cert.user_id)
            rows.append({
                'staff_name': _staff_name(staff),
                'contact': _contact(staff),
                'certification': cert.type,
                'cert_number': cert.license_number,
                'state': cert.state or 'N/A',
                'issuing_authority': cert.issuing_authority,
                'issue_date': format_report_date(cert.issue_date),
                'expiration': format_report_date(cert.expiration_date),
                'status': classify_certification(cert.expiration_date, cert.status, today),
                'certification_id': cert.id,
                'document_url': cert.document_url
            })

        logger.debug(f"Staff certifications report for {self.user_id}: {len(rows)} rows")
        return rows

    def get_expiring_certifications_report(self, today: date = None) -> List[Dict]:
        """Certifications expiring within the warning window or already expired."""
        staff_by_user, certifications = self._staff_certifications()

        rows = []
        for cert in certifications:
            if not is_expiring_or_expired(cert.expiration_date, cert.status, today):
                continue
            staff = staff_by_user.get(cert.user_id)
            status = classify_certification(cert.expiration_date, cert.status, today)
            if status != CERTIFICATION_STATUS_EXPIRED:
                status = CERTIFICATION_STATUS_EXPIRING
            rows.append({
                'staff_name': _staff_name(staff),
                'contact': _contact(staff),
                'certification': cert.type,
                'cert_number': cert.license_number,
                'expiration': format_report_date(cert.expiration_date),
                'status': status,
                'certification_id': cert.id,
                'document_url': cert.document_url
            })
        return rows

    def get_staff_roster_report(self) -> List[Dict]:
        client = self._client()
        if not client:
            return []

        return [
            {
                'staff_name': f"{s.first_name} {s.last_name}",
                'email': s.email,
                'phone': s.phone or 'N/A',
                'role': s.role or EMPTY_CELL,
                'job_title': s.job_title or EMPTY_CELL,
                'status': s.status or EMPTY_CELL
            }
            for s in self._staff(client.id)
        ]
