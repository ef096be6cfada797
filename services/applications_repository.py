"""
Applications Repository - license applications and their lifecycle.

An application moves requested -> in_progress -> under_review -> approved,
with needs_revision/rejected as side exits; once all its steps are done it
can be closed.
"""

import logging
from datetime import datetime, date
from typing import List, Optional, Dict
from sqlalchemy.orm import Session

from constants import APPLICATION_STATUSES, APPLICATION_DOCUMENT_STATUSES
from database.models import (
    Application, ApplicationStep, ApplicationDocument, LicenseType, Conversation
)
from services.calculations import status_display, step_progress
from services.event_logger import EventLogger
from services.license_requirements_repository import LicenseRequirementsRepository

logger = logging.getLogger(__name__)


def application_to_dict(application: Application, include_children: bool = False) -> Dict:
    data = application.to_dict(include_children=include_children)
    data['status_display'] = status_display(application.status)
    return data


class ApplicationsRepository:
    """Repository for license application operations."""

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.actor_id = actor_id
        self.events = EventLogger(session, actor_id)

    def _get(self, application_id: str) -> Optional[Application]:
        return self.session.query(Application).filter(Application.id == application_id).first()

    def _set_status(self, application: Application, status: str) -> None:
        old_status = application.status
        application.status = status
        application.last_updated_date = datetime.utcnow()
        application.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_status_change('application', application.id, old_status, status)

    def _sync_conversation_expert(self, application: Application) -> None:
        """Keep the application conversation's expert in step with the assigned expert."""
        self.session.query(Conversation).filter(
            Conversation.application_id == application.id
        ).update({'expert_id': application.assigned_expert_id}, synchronize_session='fetch')

    # ==================== QUERIES ====================

    def list_applications(self, owner_id: str = None, expert_id: str = None,
                          status: str = None) -> List[Dict]:
        query = self.session.query(Application)
        if owner_id:
            query = query.filter(Application.company_owner_id == owner_id)
        if expert_id:
            query = query.filter(Application.assigned_expert_id == expert_id)
        if status:
            query = query.filter(Application.status == status)
        applications = query.order_by(Application.created_at.desc()).all()
        return [application_to_dict(a) for a in applications]

    def get_application(self, application_id: str) -> Optional[Dict]:
        """Application with its steps and documents."""
        application = self._get(application_id)
        return application_to_dict(application, include_children=True) if application else None

    # ==================== LIFECYCLE ====================

    def request_application(self, owner_id: str, state: str, license_type_id: str,
                            staff_member_id: str = None) -> Dict:
        """
        File a license request for a company owner.

        The requirement template's steps and documents for the state and
        license type are copied onto the application, together with the
        expert steps already used for that requirement.
        """
        if not owner_id:
            raise ValueError('You must be logged in to submit a license request')

        license_type = self.session.query(LicenseType).filter(LicenseType.id == license_type_id).first()
        if not license_type:
            raise ValueError('License type not found')

        today = date.today()
        application = Application(
            company_owner_id=owner_id,
            staff_member_id=staff_member_id,
            application_name=license_type.name,
            state=state,
            license_type_id=license_type.id,
            status='requested',
            progress_percentage=0,
            started_date=today,
            last_updated_date=datetime.utcnow(),
            submitted_date=today
        )
        self.session.add(application)
        self.session.flush()

        requirements = LicenseRequirementsRepository(self.session)
        requirement = requirements.find_requirement(state, license_type.name)
        if requirement:
            expert_steps = requirements.get_expert_steps(requirement.id)

            for step in requirement.steps:
                application.steps.append(ApplicationStep(
                    step_name=step.step_name,
                    step_order=step.step_order,
                    description=step.description,
                    is_expert_step=False
                ))
            for step in expert_steps:
                application.steps.append(ApplicationStep(
                    step_name=step['step_name'],
                    step_order=step['step_order'],
                    description=step['description'],
                    phase=step['phase'],
                    is_expert_step=True
                ))
            for document in requirement.documents:
                application.documents.append(ApplicationDocument(
                    document_name=document.document_name,
                    document_type=document.document_type,
                    status='pending',
                    license_requirement_document_id=document.id
                ))
            self.session.flush()

        self.events.log('application', application.id, 'APPLICATION_REQUESTED',
                        metadata={'state': state, 'license_type': license_type.name})
        logger.info(f"Created application: {application.id}")
        return application_to_dict(application, include_children=True)

    def assign_expert(self, application_id: str, expert_id: Optional[str]) -> Optional[Dict]:
        application = self._get(application_id)
        if not application:
            return None
        application.assigned_expert_id = expert_id
        application.last_updated_date = datetime.utcnow()
        self.session.flush()
        self._sync_conversation_expert(application)
        self.events.log('application', application_id, 'ASSIGNED', metadata={'expert_id': expert_id})
        logger.info(f"Assigned expert {expert_id} to application {application_id}")
        return application_to_dict(application)

    def approve_application(self, application_id: str, expert_id: str = None) -> Optional[Dict]:
        """Start work on a requested application. An expert must be assigned first."""
        application = self._get(application_id)
        if not application:
            return None

        if expert_id:
            application.assigned_expert_id = expert_id
        if not application.assigned_expert_id:
            raise ValueError('Please assign an expert before approving the application')
        self._sync_conversation_expert(application)

        self._set_status(application, 'in_progress')
        self.events.log('application', application_id, 'APPLICATION_APPROVED')
        logger.info(f"Approved application: {application_id}")
        return application_to_dict(application)

    def reject_application(self, application_id: str, reason: str = None) -> Optional[Dict]:
        application = self._get(application_id)
        if not application:
            return None
        if reason:
            application.revision_reason = reason
        self._set_status(application, 'rejected')
        self.events.log('application', application_id, 'APPLICATION_REJECTED',
                        metadata={'reason': reason} if reason else None)
        logger.info(f"Rejected application: {application_id}")
        return application_to_dict(application)

    def request_revision(self, application_id: str, reason: str) -> Optional[Dict]:
        application = self._get(application_id)
        if not application:
            return None
        application.revision_reason = reason
        self._set_status(application, 'needs_revision')
        logger.info(f"Revision requested for application: {application_id}")
        return application_to_dict(application)

    def submit_application(self, application_id: str) -> Optional[Dict]:
        """Hand the application to the state: under_review, stamped with today's date."""
        application = self._get(application_id)
        if not application:
            return None
        application.submitted_date = date.today()
        self._set_status(application, 'under_review')
        logger.info(f"Submitted application: {application_id}")
        return application_to_dict(application)

    def update_status(self, application_id: str, status: str) -> Optional[Dict]:
        if status not in APPLICATION_STATUSES:
            raise ValueError(f"Invalid status: {status}")
        application = self._get(application_id)
        if not application:
            return None
        self._set_status(application, status)
        return application_to_dict(application)

    def close_application(self, application_id: str) -> Optional[Dict]:
        """
        Close a finished application.

        Closing an already closed application is a no-op; anything below
        100% progress is refused.
        """
        application = self._get(application_id)
        if not application:
            return None

        if application.status == 'closed':
            return application_to_dict(application)

        if (application.progress_percentage or 0) < 100:
            raise ValueError('Application can only be closed when progress is 100%')

        self._set_status(application, 'closed')
        self.events.log('application', application_id, 'APPLICATION_CLOSED')
        logger.info(f"Closed application: {application_id}")
        return application_to_dict(application)

    def delete_application(self, application_id: str) -> bool:
        application = self._get(application_id)
        if not application:
            return False
        self.session.delete(application)
        self.session.flush()
        self.events.log_delete('application', application_id)
        logger.info(f"Deleted application: {application_id}")
        return True

    # ==================== STEPS ====================

    def recalculate_progress(self, application: Application) -> int:
        steps = self.session.query(ApplicationStep).filter(
            ApplicationStep.application_id == application.id
        ).all()
        completed = sum(1 for s in steps if s.is_completed)
        application.progress_percentage = step_progress(completed, len(steps))
        application.last_updated_date = datetime.utcnow()
        return application.progress_percentage

    def toggle_step(self, step_id: str, is_completed: bool) -> Optional[Dict]:
        """Mark a step done or not done and refresh the application's progress."""
        step = self.session.query(ApplicationStep).filter(ApplicationStep.id == step_id).first()
        if not step:
            return None

        step.is_completed = bool(is_completed)
        step.completed_at = datetime.utcnow() if step.is_completed else None
        self.session.flush()

        application = self._get(step.application_id)
        progress = self.recalculate_progress(application)
        self.session.flush()

        if step.is_completed:
            self.events.log('application', application.id, 'STEP_COMPLETED',
                            metadata={'step_id': step_id, 'step_name': step.step_name})
        logger.info(f"Step {step_id} completed={step.is_completed}; application {application.id} at {progress}%")

        result = step.to_dict()
        result['progress_percentage'] = progress
        return result

    # ==================== DOCUMENTS ====================

    def add_document(self, application_id: str, document_name: str, document_url: str = None,
                     document_type: str = None,
                     license_requirement_document_id: str = None) -> Dict:
        application = self._get(application_id)
        if not application:
            raise ValueError('Application not found')

        document = ApplicationDocument(
            application_id=application_id,
            document_name=document_name,
            document_url=document_url,
            document_type=document_type,
            status='pending',
            license_requirement_document_id=license_requirement_document_id
        )
        self.session.add(document)
        application.last_updated_date = datetime.utcnow()
        self.session.flush()

        self.events.log('application', application_id, 'DOCUMENT_UPLOADED',
                        metadata={'document_id': document.id, 'document_name': document_name})
        logger.info(f"Added document {document.id} to application {application_id}")
        return document.to_dict()

    def review_document(self, document_id: str, status: str, notes: str = None) -> Optional[Dict]:
        if status not in APPLICATION_DOCUMENT_STATUSES:
            raise ValueError(f"Invalid document status: {status}")

        document = self.session.query(ApplicationDocument).filter(ApplicationDocument.id == document_id).first()
        if not document:
            return None

        document.status = status
        document.expert_review_notes = notes
        document.updated_at = datetime.utcnow()
        self.session.flush()

        self.events.log('application', document.application_id, 'DOCUMENT_REVIEWED',
                        metadata={'document_id': document_id, 'status': status})
        return document.to_dict()

    def delete_document(self, document_id: str) -> bool:
        document = self.session.query(ApplicationDocument).filter(ApplicationDocument.id == document_id).first()
        if not document:
            return False
        self.session.delete(document)
        self.session.flush()
        self.events.log_delete('application_document', document_id)
        return True
