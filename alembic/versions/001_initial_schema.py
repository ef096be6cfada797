"""Initial database schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates all core tables for the Home Care Licensing Platform.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # User profiles table
    op.create_table('user_profiles',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255)),
        sa.Column('role', sa.String(50), nullable=False, server_default='company_owner'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_user_profiles_role', 'user_profiles', ['role'])

    # Agencies table
    op.create_table('agencies',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('agency_admin_ids', postgresql.JSONB, server_default='[]'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )

    # Clients table
    op.create_table('clients',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('company_name', sa.String(255), server_default=''),
        sa.Column('contact_name', sa.String(255)),
        sa.Column('contact_email', sa.String(255)),
        sa.Column('contact_phone', sa.String(50)),
        sa.Column('status', sa.String(50), server_default='active'),
        sa.Column('company_owner_id', postgresql.UUID(as_uuid=False)),
        sa.Column('agency_id', postgresql.UUID(as_uuid=False)),
        sa.Column('expert_id', postgresql.UUID(as_uuid=False)),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['company_owner_id'], ['user_profiles.id']),
        sa.ForeignKeyConstraint(['agency_id'], ['agencies.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['expert_id'], ['user_profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_clients_company_owner', 'clients', ['company_owner_id'])
    op.create_index('ix_clients_agency', 'clients', ['agency_id'])
    op.create_index('ix_clients_expert', 'clients', ['expert_id'])

    op.create_table('client_states',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('client_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('client_id', 'state', name='uq_client_states_client_state')
    )

    # Staff members table
    op.create_table('staff_members',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50)),
        sa.Column('role', sa.String(100)),
        sa.Column('job_title', sa.String(100)),
        sa.Column('status', sa.String(50), server_default='active'),
        sa.Column('user_id', postgresql.UUID(as_uuid=False)),
        sa.Column('company_owner_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('agency_id', postgresql.UUID(as_uuid=False)),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['user_profiles.id']),
        sa.ForeignKeyConstraint(['company_owner_id'], ['clients.id']),
        sa.ForeignKeyConstraint(['agency_id'], ['agencies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_staff_members_company_owner', 'staff_members', ['company_owner_id'])
    op.create_index('ix_staff_members_agency', 'staff_members', ['agency_id'])
    op.create_index('ix_staff_members_user', 'staff_members', ['user_id'])

    # Certifications table
    op.create_table('certifications',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('type', sa.String(255), nullable=False),
        sa.Column('license_number', sa.String(100), nullable=False),
        sa.Column('state', sa.String(100)),
        sa.Column('issue_date', sa.Date()),
        sa.Column('expiration_date', sa.Date(), nullable=False),
        sa.Column('issuing_authority', sa.String(255), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, server_default='Active'),
        sa.Column('document_url', sa.Text()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['user_profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_certifications_user', 'certifications', ['user_id'])
    op.create_index('ix_certifications_expiration', 'certifications', ['expiration_date'])

    # System lists
    op.create_table('certification_types',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('certification_type', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('certification_type')
    )

    op.create_table('staff_roles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    # License types table
    op.create_table('license_types',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('cost_min', sa.Float()),
        sa.Column('cost_max', sa.Float()),
        sa.Column('cost_display', sa.String(100)),
        sa.Column('service_fee', sa.Float(), server_default='0'),
        sa.Column('service_fee_display', sa.String(100)),
        sa.Column('processing_time_min', sa.Integer()),
        sa.Column('processing_time_max', sa.Integer()),
        sa.Column('processing_time_display', sa.String(100)),
        sa.Column('renewal_period_years', sa.Integer(), server_default='1'),
        sa.Column('renewal_period_display', sa.String(100)),
        sa.Column('icon_type', sa.String(50), server_default='heart'),
        sa.Column('requirements', postgresql.JSONB, server_default='[]'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_license_types_state', 'license_types', ['state'])

    # License requirement templates
    op.create_table('license_requirements',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('license_type', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('state', 'license_type', name='uq_license_requirements_state_type')
    )

    op.create_table('license_requirement_steps',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('license_requirement_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('step_name', sa.String(255), nullable=False),
        sa.Column('step_order', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('description', sa.Text()),
        sa.Column('estimated_days', sa.Integer()),
        sa.Column('is_required', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['license_requirement_id'], ['license_requirements.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_license_requirement_steps_requirement', 'license_requirement_steps',
                    ['license_requirement_id'])

    op.create_table('license_requirement_documents',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('license_requirement_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('document_name', sa.String(255), nullable=False),
        sa.Column('document_type', sa.String(100)),
        sa.Column('description', sa.Text()),
        sa.Column('is_required', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['license_requirement_id'], ['license_requirements.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_license_requirement_documents_requirement', 'license_requirement_documents',
                    ['license_requirement_id'])

    # Applications table
    op.create_table('applications',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('company_owner_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('staff_member_id', postgresql.UUID(as_uuid=False)),
        sa.Column('application_name', sa.String(255), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('license_type_id', postgresql.UUID(as_uuid=False)),
        sa.Column('status', sa.String(50), nullable=False, server_default='requested'),
        sa.Column('progress_percentage', sa.Integer(), server_default='0'),
        sa.Column('started_date', sa.Date()),
        sa.Column('last_updated_date', sa.DateTime()),
        sa.Column('submitted_date', sa.Date()),
        sa.Column('assigned_expert_id', postgresql.UUID(as_uuid=False)),
        sa.Column('revision_reason', sa.Text()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['company_owner_id'], ['user_profiles.id']),
        sa.ForeignKeyConstraint(['staff_member_id'], ['staff_members.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['license_type_id'], ['license_types.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['assigned_expert_id'], ['user_profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_applications_company_owner', 'applications', ['company_owner_id'])
    op.create_index('ix_applications_expert', 'applications', ['assigned_expert_id'])
    op.create_index('ix_applications_status', 'applications', ['status'])
    op.create_index('ix_applications_state', 'applications', ['state'])

    op.create_table('application_steps',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('application_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('step_name', sa.String(255), nullable=False),
        sa.Column('step_order', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('description', sa.Text()),
        sa.Column('is_expert_step', sa.Boolean(), server_default=sa.false()),
        sa.Column('phase', sa.String(100)),
        sa.Column('is_completed', sa.Boolean(), server_default=sa.false()),
        sa.Column('completed_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_application_steps_application', 'application_steps', ['application_id'])
    op.create_index('ix_application_steps_expert', 'application_steps', ['is_expert_step'])

    op.create_table('application_documents',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('application_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('document_name', sa.String(255), nullable=False),
        sa.Column('document_url', sa.Text()),
        sa.Column('document_type', sa.String(100)),
        sa.Column('status', sa.String(50), server_default='pending'),
        sa.Column('expert_review_notes', sa.Text()),
        sa.Column('license_requirement_document_id', postgresql.UUID(as_uuid=False)),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['license_requirement_document_id'], ['license_requirement_documents.id'],
                                ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_application_documents_application', 'application_documents', ['application_id'])

    # Licenses table
    op.create_table('licenses',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('company_owner_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('license_name', sa.String(255), nullable=False),
        sa.Column('state', sa.String(100)),
        sa.Column('license_number', sa.String(100)),
        sa.Column('status', sa.String(50), server_default='active'),
        sa.Column('activated_date', sa.Date()),
        sa.Column('expiry_date', sa.Date()),
        sa.Column('renewal_due_date', sa.Date()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['company_owner_id'], ['user_profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_licenses_company_owner', 'licenses', ['company_owner_id'])
    op.create_index('ix_licenses_expiry', 'licenses', ['expiry_date'])

    op.create_table('license_documents',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('license_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('document_name', sa.String(255), nullable=False),
        sa.Column('document_url', sa.Text()),
        sa.Column('category', sa.String(100)),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['license_id'], ['licenses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )

    # Licensing experts
    op.create_table('licensing_experts',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50)),
        sa.Column('expertise', sa.Text()),
        sa.Column('role', sa.String(100), server_default='Licensing Specialist'),
        sa.Column('status', sa.String(50), server_default='active'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['user_profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )

    op.create_table('expert_states',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('expert_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('state', sa.String(100), nullable=False),
        sa.ForeignKeyConstraint(['expert_id'], ['licensing_experts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('expert_id', 'state', name='uq_expert_states_expert_state')
    )

    # Cases table
    op.create_table('cases',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('client_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('business_name', sa.String(255)),
        sa.Column('state', sa.String(100), nullable=False),
        sa.Column('status', sa.String(50), server_default='in_progress'),
        sa.Column('progress_percentage', sa.Integer(), server_default='0'),
        sa.Column('started_date', sa.Date(), nullable=False),
        sa.Column('last_activity', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_cases_client', 'cases', ['client_id'])
    op.create_index('ix_cases_started_date', 'cases', ['started_date'])

    # Pricing and billing
    op.create_table('pricing',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('owner_admin_license', sa.Float(), nullable=False, server_default='50'),
        sa.Column('staff_license', sa.Float(), nullable=False, server_default='25'),
        sa.Column('effective_date', sa.Date(), nullable=False, server_default=sa.func.current_date()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pricing_effective_date', 'pricing', ['effective_date'])

    op.create_table('billing',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('client_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('billing_month', sa.Date(), nullable=False),
        sa.Column('user_licenses_count', sa.Integer(), server_default='0'),
        sa.Column('user_license_rate', sa.Float(), server_default='50'),
        sa.Column('applications_count', sa.Integer(), server_default='0'),
        sa.Column('application_rate', sa.Float(), server_default='500'),
        sa.Column('total_amount', sa.Float(), server_default='0'),
        sa.Column('status', sa.String(20), server_default='pending'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_billing_client', 'billing', ['client_id'])
    op.create_index('ix_billing_month', 'billing', ['billing_month'])

    # Messaging
    op.create_table('conversations',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('client_id', postgresql.UUID(as_uuid=False)),
        sa.Column('expert_id', postgresql.UUID(as_uuid=False)),
        sa.Column('admin_id', postgresql.UUID(as_uuid=False)),
        sa.Column('application_id', postgresql.UUID(as_uuid=False)),
        sa.Column('last_message_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['client_id'], ['user_profiles.id']),
        sa.ForeignKeyConstraint(['expert_id'], ['user_profiles.id']),
        sa.ForeignKeyConstraint(['admin_id'], ['user_profiles.id']),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('application_id')
    )

    op.create_table('messages',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('conversation_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('sender_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['conversation_id'], ['conversations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sender_id'], ['user_profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_messages_conversation', 'messages', ['conversation_id'])
    op.create_index('ix_messages_created_at', 'messages', ['created_at'])

    op.create_table('notifications',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('type', sa.String(50), server_default='info'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text()),
        sa.Column('is_read', sa.Boolean(), server_default=sa.false()),
        sa.Column('read_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_notifications_user', 'notifications', ['user_id'])
    op.create_index('ix_notifications_is_read', 'notifications', ['is_read'])

    # Event log (audit trail)
    op.create_table('event_log',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('actor_type', sa.String(50)),
        sa.Column('actor_id', postgresql.UUID(as_uuid=False)),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(64), nullable=False),
        sa.Column('event_type', sa.String(100), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('extra_data', postgresql.JSONB, server_default='{}'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_event_log_entity', 'event_log', ['entity_type', 'entity_id'])
    op.create_index('ix_event_log_timestamp', 'event_log', ['timestamp'])
    op.create_index('ix_event_log_event_type', 'event_log', ['event_type'])


def downgrade() -> None:
    # Drop tables in reverse order of creation (respecting foreign keys)
    op.drop_table('event_log')
    op.drop_table('notifications')
    op.drop_table('messages')
    op.drop_table('conversations')
    op.drop_table('billing')
    op.drop_table('pricing')
    op.drop_table('cases')
    op.drop_table('expert_states')
    op.drop_table('licensing_experts')
    op.drop_table('license_documents')
    op.drop_table('licenses')
    op.drop_table('application_documents')
    op.drop_table('application_steps')
    op.drop_table('applications')
    op.drop_table('license_requirement_documents')
    op.drop_table('license_requirement_steps')
    op.drop_table('license_requirements')
    op.drop_table('license_types')
    op.drop_table('staff_roles')
    op.drop_table('certification_types')
    op.drop_table('certifications')
    op.drop_table('staff_members')
    op.drop_table('client_states')
    op.drop_table('clients')
    op.drop_table('agencies')
    op.drop_table('user_profiles')
