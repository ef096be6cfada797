"""
SQLAlchemy models for the Home Care Licensing Platform.
Defines the tables for users, agencies, staff, certifications, license
requirements, applications, billing and messaging.
"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Text, Integer, Float, Boolean, DateTime, Date,
    ForeignKey, JSON, Index, UniqueConstraint
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from database.connection import Base

# Native UUID/JSONB on PostgreSQL, portable types elsewhere (SQLite in tests)
UUIDType = String(36).with_variant(UUID(as_uuid=False), 'postgresql')
JSONType = JSON().with_variant(JSONB(), 'postgresql')


def generate_uuid():
    """Generate a new UUID."""
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


# =============================================================================
# USERS & AUTHENTICATION
# =============================================================================

class UserProfile(Base):
    """Application users; role decides which dashboard they land on."""
    __tablename__ = 'user_profiles'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255))
    role = Column(String(50), nullable=False, default='company_owner')
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('ix_user_profiles_role', 'role'),
    )

    def to_dict(self, include_sensitive=False):
        data = {
            'id': self.id,
            'email': self.email,
            'full_name': self.full_name,
            'role': self.role,
            'is_active': self.is_active,
            'last_login': _iso(self.last_login),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
        if include_sensitive:
            data['password_hash'] = self.password_hash
        return data


# =============================================================================
# AGENCIES & CLIENTS
# =============================================================================

class Agency(Base):
    """A home-care agency; its admins are client (company owner) records."""
    __tablename__ = 'agencies'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    agency_admin_ids = Column(JSONType, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'agency_admin_ids': list(self.agency_admin_ids or []),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Client(Base):
    """A company owner's business record."""
    __tablename__ = 'clients'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_name = Column(String(255), default='')
    contact_name = Column(String(255))
    contact_email = Column(String(255))
    contact_phone = Column(String(50))
    status = Column(String(50), default='active')
    company_owner_id = Column(UUIDType, ForeignKey('user_profiles.id'))
    agency_id = Column(UUIDType, ForeignKey('agencies.id', ondelete='SET NULL'))
    expert_id = Column(UUIDType, ForeignKey('user_profiles.id'))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    states = relationship("ClientState", back_populates="client", cascade="all, delete-orphan")

    __table_args__ = (
        Index('ix_clients_company_owner', 'company_owner_id'),
        Index('ix_clients_agency', 'agency_id'),
        Index('ix_clients_expert', 'expert_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'company_name': self.company_name,
            'contact_name': self.contact_name,
            'contact_email': self.contact_email,
            'contact_phone': self.contact_phone,
            'status': self.status,
            'company_owner_id': self.company_owner_id,
            'agency_id': self.agency_id,
            'expert_id': self.expert_id,
            'states': [s.state for s in self.states],
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class ClientState(Base):
    """States a client operates in."""
    __tablename__ = 'client_states'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    client_id = Column(UUIDType, ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    state = Column(String(100), nullable=False)

    client = relationship("Client", back_populates="states")

    __table_args__ = (
        UniqueConstraint('client_id', 'state', name='uq_client_states_client_state'),
    )


# =============================================================================
# STAFF & CERTIFICATIONS
# =============================================================================

class StaffMember(Base):
    """Caregivers and office staff employed by a client."""
    __tablename__ = 'staff_members'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50))
    role = Column(String(100))
    job_title = Column(String(100))
    status = Column(String(50), default='active')
    user_id = Column(UUIDType, ForeignKey('user_profiles.id'))
    company_owner_id = Column(UUIDType, ForeignKey('clients.id'), nullable=False)
    agency_id = Column(UUIDType, ForeignKey('agencies.id', ondelete='SET NULL'))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('ix_staff_members_company_owner', 'company_owner_id'),
        Index('ix_staff_members_agency', 'agency_id'),
        Index('ix_staff_members_user', 'user_id'),
    )

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def to_dict(self):
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'email': self.email,
            'phone': self.phone,
            'role': self.role,
            'job_title': self.job_title,
            'status': self.status,
            'user_id': self.user_id,
            'company_owner_id': self.company_owner_id,
            'agency_id': self.agency_id,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Certification(Base):
    """A certification or professional license held by a user."""
    __tablename__ = 'certifications'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(UUIDType, ForeignKey('user_profiles.id'), nullable=False)
    type = Column(String(255), nullable=False)
    license_number = Column(String(100), nullable=False)
    state = Column(String(100))
    issue_date = Column(Date)
    expiration_date = Column(Date, nullable=False)
    issuing_authority = Column(String(255), nullable=False)
    status = Column(String(50), nullable=False, default='Active')
    document_url = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('ix_certifications_user', 'user_id'),
        Index('ix_certifications_expiration', 'expiration_date'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'type': self.type,
            'license_number': self.license_number,
            'state': self.state,
            'issue_date': _iso(self.issue_date),
            'expiration_date': _iso(self.expiration_date),
            'issuing_authority': self.issuing_authority,
            'status': self.status,
            'document_url': self.document_url,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class CertificationType(Base):
    __tablename__ = 'certification_types'

    id = Column(Integer, primary_key=True, autoincrement=True)
    certification_type = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'certification_type': self.certification_type,
            'created_at': _iso(self.created_at)
        }


class StaffRole(Base):
    __tablename__ = 'staff_roles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'created_at': _iso(self.created_at)
        }


# =============================================================================
# LICENSE TYPES & REQUIREMENTS
# =============================================================================

class LicenseType(Base):
    """A license offered in a state, with display strings and parsed numbers."""
    __tablename__ = 'license_types'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    state = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    cost_min = Column(Float)
    cost_max = Column(Float)
    cost_display = Column(String(100))
    service_fee = Column(Float, default=0)
    service_fee_display = Column(String(100))
    processing_time_min = Column(Integer)
    processing_time_max = Column(Integer)
    processing_time_display = Column(String(100))
    renewal_period_years = Column(Integer, default=1)
    renewal_period_display = Column(String(100))
    icon_type = Column(String(50), default='heart')
    requirements = Column(JSONType, default=list)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('ix_license_types_state', 'state'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'state': self.state,
            'name': self.name,
            'description': self.description,
            'cost_min': self.cost_min,
            'cost_max': self.cost_max,
            'cost_display': self.cost_display,
            'service_fee': self.service_fee,
            'service_fee_display': self.service_fee_display,
            'processing_time_min': self.processing_time_min,
            'processing_time_max': self.processing_time_max,
            'processing_time_display': self.processing_time_display,
            'renewal_period_years': self.renewal_period_years,
            'renewal_period_display': self.renewal_period_display,
            'icon_type': self.icon_type,
            'requirements': list(self.requirements or []),
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class LicenseRequirement(Base):
    """Template of steps and documents for a (state, license type name) pair."""
    __tablename__ = 'license_requirements'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    state = Column(String(100), nullable=False)
    license_type = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    steps = relationship("LicenseRequirementStep", back_populates="requirement",
                         cascade="all, delete-orphan", order_by="LicenseRequirementStep.step_order")
    documents = relationship("LicenseRequirementDocument", back_populates="requirement",
                             cascade="all, delete-orphan", order_by="LicenseRequirementDocument.document_name")

    __table_args__ = (
        UniqueConstraint('state', 'license_type', name='uq_license_requirements_state_type'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'state': self.state,
            'license_type': self.license_type,
            'created_at': _iso(self.created_at)
        }


class LicenseRequirementStep(Base):
    __tablename__ = 'license_requirement_steps'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    license_requirement_id = Column(UUIDType, ForeignKey('license_requirements.id', ondelete='CASCADE'),
                                    nullable=False)
    step_name = Column(String(255), nullable=False)
    step_order = Column(Integer, nullable=False, default=1)
    description = Column(Text)
    estimated_days = Column(Integer)
    is_required = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    requirement = relationship("LicenseRequirement", back_populates="steps")

    __table_args__ = (
        Index('ix_license_requirement_steps_requirement', 'license_requirement_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'license_requirement_id': self.license_requirement_id,
            'step_name': self.step_name,
            'step_order': self.step_order,
            'description': self.description,
            'estimated_days': self.estimated_days,
            'is_required': self.is_required,
            'created_at': _iso(self.created_at)
        }


class LicenseRequirementDocument(Base):
    __tablename__ = 'license_requirement_documents'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    license_requirement_id = Column(UUIDType, ForeignKey('license_requirements.id', ondelete='CASCADE'),
                                    nullable=False)
    document_name = Column(String(255), nullable=False)
    document_type = Column(String(100))
    description = Column(Text)
    is_required = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    requirement = relationship("LicenseRequirement", back_populates="documents")

    __table_args__ = (
        Index('ix_license_requirement_documents_requirement', 'license_requirement_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'license_requirement_id': self.license_requirement_id,
            'document_name': self.document_name,
            'document_type': self.document_type,
            'description': self.description,
            'is_required': self.is_required,
            'created_at': _iso(self.created_at)
        }


# =============================================================================
# APPLICATIONS
# =============================================================================

class Application(Base):
    """A license application filed by a company owner."""
    __tablename__ = 'applications'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_owner_id = Column(UUIDType, ForeignKey('user_profiles.id'), nullable=False)
    staff_member_id = Column(UUIDType, ForeignKey('staff_members.id', ondelete='SET NULL'))
    application_name = Column(String(255), nullable=False)
    state = Column(String(100), nullable=False)
    license_type_id = Column(UUIDType, ForeignKey('license_types.id', ondelete='SET NULL'))
    status = Column(String(50), nullable=False, default='requested')
    progress_percentage = Column(Integer, default=0)
    started_date = Column(Date)
    last_updated_date = Column(DateTime)
    submitted_date = Column(Date)
    assigned_expert_id = Column(UUIDType, ForeignKey('user_profiles.id'))
    revision_reason = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    license_type = relationship("LicenseType")
    steps = relationship("ApplicationStep", back_populates="application",
                         cascade="all, delete-orphan", order_by="ApplicationStep.step_order")
    documents = relationship("ApplicationDocument", back_populates="application",
                             cascade="all, delete-orphan")

    __table_args__ = (
        Index('ix_applications_company_owner', 'company_owner_id'),
        Index('ix_applications_expert', 'assigned_expert_id'),
        Index('ix_applications_status', 'status'),
        Index('ix_applications_state', 'state'),
    )

    def to_dict(self, include_children=False):
        data = {
            'id': self.id,
            'company_owner_id': self.company_owner_id,
            'staff_member_id': self.staff_member_id,
            'application_name': self.application_name,
            'state': self.state,
            'license_type_id': self.license_type_id,
            'license_type_name': self.license_type.name if self.license_type else None,
            'status': self.status,
            'progress_percentage': self.progress_percentage or 0,
            'started_date': _iso(self.started_date),
            'last_updated_date': _iso(self.last_updated_date),
            'submitted_date': _iso(self.submitted_date),
            'assigned_expert_id': self.assigned_expert_id,
            'revision_reason': self.revision_reason,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
        if include_children:
            data['steps'] = [s.to_dict() for s in self.steps]
            data['documents'] = [d.to_dict() for d in self.documents]
        return data


class ApplicationStep(Base):
    """
    A step on an application. Client-facing steps are copied from the
    requirement template; expert steps (is_expert_step) carry a phase.
    """
    __tablename__ = 'application_steps'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    application_id = Column(UUIDType, ForeignKey('applications.id', ondelete='CASCADE'), nullable=False)
    step_name = Column(String(255), nullable=False)
    step_order = Column(Integer, nullable=False, default=1)
    description = Column(Text)
    is_expert_step = Column(Boolean, default=False)
    phase = Column(String(100))
    is_completed = Column(Boolean, default=False)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)

    application = relationship("Application", back_populates="steps")

    __table_args__ = (
        Index('ix_application_steps_application', 'application_id'),
        Index('ix_application_steps_expert', 'is_expert_step'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'application_id': self.application_id,
            'step_name': self.step_name,
            'step_order': self.step_order,
            'description': self.description,
            'is_expert_step': self.is_expert_step,
            'phase': self.phase,
            'is_completed': self.is_completed,
            'completed_at': _iso(self.completed_at),
            'created_at': _iso(self.created_at)
        }


class ApplicationDocument(Base):
    __tablename__ = 'application_documents'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    application_id = Column(UUIDType, ForeignKey('applications.id', ondelete='CASCADE'), nullable=False)
    document_name = Column(String(255), nullable=False)
    document_url = Column(Text)
    document_type = Column(String(100))
    status = Column(String(50), default='pending')
    expert_review_notes = Column(Text)
    license_requirement_document_id = Column(
        UUIDType, ForeignKey('license_requirement_documents.id', ondelete='SET NULL'))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    application = relationship("Application", back_populates="documents")

    __table_args__ = (
        Index('ix_application_documents_application', 'application_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'application_id': self.application_id,
            'document_name': self.document_name,
            'document_url': self.document_url,
            'document_type': self.document_type,
            'status': self.status,
            'expert_review_notes': self.expert_review_notes,
            'license_requirement_document_id': self.license_requirement_document_id,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# ISSUED LICENSES
# =============================================================================

class License(Base):
    """A license already held by a company owner."""
    __tablename__ = 'licenses'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    company_owner_id = Column(UUIDType, ForeignKey('user_profiles.id'), nullable=False)
    license_name = Column(String(255), nullable=False)
    state = Column(String(100))
    license_number = Column(String(100))
    status = Column(String(50), default='active')
    activated_date = Column(Date)
    expiry_date = Column(Date)
    renewal_due_date = Column(Date)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    documents = relationship("LicenseDocument", back_populates="license", cascade="all, delete-orphan")

    __table_args__ = (
        Index('ix_licenses_company_owner', 'company_owner_id'),
        Index('ix_licenses_expiry', 'expiry_date'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'company_owner_id': self.company_owner_id,
            'license_name': self.license_name,
            'state': self.state,
            'license_number': self.license_number,
            'status': self.status,
            'activated_date': _iso(self.activated_date),
            'expiry_date': _iso(self.expiry_date),
            'renewal_due_date': _iso(self.renewal_due_date),
            'documents': [d.to_dict() for d in self.documents],
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class LicenseDocument(Base):
    __tablename__ = 'license_documents'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    license_id = Column(UUIDType, ForeignKey('licenses.id', ondelete='CASCADE'), nullable=False)
    document_name = Column(String(255), nullable=False)
    document_url = Column(Text)
    category = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow)

    license = relationship("License", back_populates="documents")

    def to_dict(self):
        return {
            'id': self.id,
            'license_id': self.license_id,
            'document_name': self.document_name,
            'document_url': self.document_url,
            'category': self.category,
            'created_at': _iso(self.created_at)
        }


# =============================================================================
# LICENSING EXPERTS
# =============================================================================

class LicensingExpert(Base):
    __tablename__ = 'licensing_experts'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(UUIDType, ForeignKey('user_profiles.id'), nullable=False, unique=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50))
    expertise = Column(Text)
    role = Column(String(100), default='Licensing Specialist')
    status = Column(String(50), default='active')
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    states = relationship("ExpertState", back_populates="expert", cascade="all, delete-orphan")

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'full_name': f"{self.first_name} {self.last_name}",
            'email': self.email,
            'phone': self.phone,
            'expertise': self.expertise,
            'role': self.role,
            'status': self.status,
            'states': [s.state for s in self.states],
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class ExpertState(Base):
    """States an expert is licensed to work in."""
    __tablename__ = 'expert_states'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    expert_id = Column(UUIDType, ForeignKey('licensing_experts.id', ondelete='CASCADE'), nullable=False)
    state = Column(String(100), nullable=False)

    expert = relationship("LicensingExpert", back_populates="states")

    __table_args__ = (
        UniqueConstraint('expert_id', 'state', name='uq_expert_states_expert_state'),
    )


# =============================================================================
# CASES
# =============================================================================

class Case(Base):
    """Admin-side view of a client's licensing engagement in a state."""
    __tablename__ = 'cases'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    client_id = Column(UUIDType, ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    business_name = Column(String(255))
    state = Column(String(100), nullable=False)
    status = Column(String(50), default='in_progress')
    progress_percentage = Column(Integer, default=0)
    started_date = Column(Date, nullable=False)
    last_activity = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index('ix_cases_client', 'client_id'),
        Index('ix_cases_started_date', 'started_date'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'client_id': self.client_id,
            'business_name': self.business_name,
            'state': self.state,
            'status': self.status,
            'progress_percentage': self.progress_percentage or 0,
            'started_date': _iso(self.started_date),
            'last_activity': _iso(self.last_activity),
            'created_at': _iso(self.created_at)
        }


# =============================================================================
# PRICING & BILLING
# =============================================================================

class Pricing(Base):
    """Per-seat license rates effective from a date."""
    __tablename__ = 'pricing'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    owner_admin_license = Column(Float, nullable=False, default=50)
    staff_license = Column(Float, nullable=False, default=25)
    effective_date = Column(Date, nullable=False, default=lambda: datetime.utcnow().date())
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('ix_pricing_effective_date', 'effective_date'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'owner_admin_license': self.owner_admin_license,
            'staff_license': self.staff_license,
            'effective_date': _iso(self.effective_date),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Billing(Base):
    __tablename__ = 'billing'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    client_id = Column(UUIDType, ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    billing_month = Column(Date, nullable=False)
    user_licenses_count = Column(Integer, default=0)
    user_license_rate = Column(Float, default=50.00)
    applications_count = Column(Integer, default=0)
    application_rate = Column(Float, default=500.00)
    total_amount = Column(Float, default=0)
    status = Column(String(20), default='pending')
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('ix_billing_client', 'client_id'),
        Index('ix_billing_month', 'billing_month'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'client_id': self.client_id,
            'billing_month': _iso(self.billing_month),
            'user_licenses_count': self.user_licenses_count,
            'user_license_rate': self.user_license_rate,
            'applications_count': self.applications_count,
            'application_rate': self.application_rate,
            'total_amount': self.total_amount,
            'status': self.status,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# MESSAGING & NOTIFICATIONS
# =============================================================================

class Conversation(Base):
    """One conversation per application between client, expert and admin."""
    __tablename__ = 'conversations'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    client_id = Column(UUIDType, ForeignKey('user_profiles.id'))
    expert_id = Column(UUIDType, ForeignKey('user_profiles.id'))
    admin_id = Column(UUIDType, ForeignKey('user_profiles.id'))
    application_id = Column(UUIDType, ForeignKey('applications.id', ondelete='CASCADE'), unique=True)
    last_message_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)

    messages = relationship("Message", back_populates="conversation",
                            cascade="all, delete-orphan", order_by="Message.created_at")

    def to_dict(self):
        return {
            'id': self.id,
            'client_id': self.client_id,
            'expert_id': self.expert_id,
            'admin_id': self.admin_id,
            'application_id': self.application_id,
            'last_message_at': _iso(self.last_message_at),
            'created_at': _iso(self.created_at)
        }


class Message(Base):
    __tablename__ = 'messages'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    conversation_id = Column(UUIDType, ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False)
    sender_id = Column(UUIDType, ForeignKey('user_profiles.id'), nullable=False)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    conversation = relationship("Conversation", back_populates="messages")

    __table_args__ = (
        Index('ix_messages_conversation', 'conversation_id'),
        Index('ix_messages_created_at', 'created_at'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'conversation_id': self.conversation_id,
            'sender_id': self.sender_id,
            'content': self.content,
            'is_read': self.is_read,
            'created_at': _iso(self.created_at)
        }


class Notification(Base):
    """In-app notifications shown in the dashboard header."""
    __tablename__ = 'notifications'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(UUIDType, ForeignKey('user_profiles.id', ondelete='CASCADE'), nullable=False)
    type = Column(String(50), default='info')
    title = Column(String(255), nullable=False)
    message = Column(Text)
    is_read = Column(Boolean, default=False)
    read_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index('ix_notifications_user', 'user_id'),
        Index('ix_notifications_is_read', 'is_read'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'is_read': self.is_read,
            'read_at': _iso(self.read_at),
            'created_at': _iso(self.created_at)
        }


# =============================================================================
# AUDIT TRAIL
# =============================================================================

class EventLog(Base):
    """Audit trail of changes made through the platform."""
    __tablename__ = 'event_log'

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)
    actor_type = Column(String(50))  # user, system
    actor_id = Column(UUIDType)
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(String(64), nullable=False)
    event_type = Column(String(100), nullable=False)
    description = Column(Text)
    extra_data = Column(JSONType, default=dict)

    __table_args__ = (
        Index('ix_event_log_entity', 'entity_type', 'entity_id'),
        Index('ix_event_log_timestamp', 'timestamp'),
        Index('ix_event_log_event_type', 'event_type'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'timestamp': _iso(self.timestamp),
            'actor_type': self.actor_type,
            'actor_id': self.actor_id,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'event_type': self.event_type,
            'description': self.description,
            'metadata': self.extra_data or {}
        }
