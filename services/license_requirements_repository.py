"""
License Requirements Repository

A license requirement is the template for one (state, license type) pair:
the client-facing steps and documents copied into every new application.
Expert steps have no template table; they live directly on the
application_steps of every application filed for the requirement's state
and license type, and are managed here as a group.
"""

import logging
from typing import List, Optional, Dict, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from constants import DEFAULT_EXPERT_STEP_PHASE
from database.models import (
    LicenseRequirement, LicenseRequirementStep, LicenseRequirementDocument,
    Application, ApplicationStep, LicenseType
)
from services.event_logger import EventLogger

logger = logging.getLogger(__name__)


def _null_safe_eq(column, value):
    """column = value, or column IS NULL when value is None."""
    return column.is_(None) if value is None else column == value


def _expert_step_key(step) -> Tuple[str, str, str]:
    return step.step_name, step.description or '', step.phase or ''


class LicenseRequirementsRepository:
    """Repository for license requirement templates and expert steps."""

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.events = EventLogger(session, actor_id)

    # ==================== REQUIREMENTS ====================

    def list_requirements(self) -> List[Dict]:
        rows = self.session.query(LicenseRequirement).order_by(
            LicenseRequirement.state, LicenseRequirement.license_type
        ).all()
        return [r.to_dict() for r in rows]

    def get_requirement(self, requirement_id: str) -> Optional[LicenseRequirement]:
        return self.session.query(LicenseRequirement).filter(
            LicenseRequirement.id == requirement_id
        ).first()

    def find_requirement(self, state: str, license_type: str) -> Optional[LicenseRequirement]:
        return self.session.query(LicenseRequirement).filter(
            LicenseRequirement.state == state,
            LicenseRequirement.license_type == license_type
        ).first()

    def get_or_create_requirement(self, state: str, license_type: str) -> str:
        """Return the requirement id for (state, license type), creating it if needed."""
        existing = self.find_requirement(state, license_type)
        if existing:
            return existing.id

        requirement = LicenseRequirement(state=state, license_type=license_type)
        self.session.add(requirement)
        self.session.flush()
        self.events.log_create('license_requirement', requirement.id,
                               {'state': state, 'license_type': license_type})
        logger.info(f"Created license requirement: {requirement.id}")
        return requirement.id

    # ==================== STEPS ====================

    def _next_step_order(self, requirement_id: str) -> int:
        current = self.session.query(func.max(LicenseRequirementStep.step_order)).filter(
            LicenseRequirementStep.license_requirement_id == requirement_id
        ).scalar()
        return (current or 0) + 1

    def get_steps(self, requirement_id: str) -> List[Dict]:
        steps = self.session.query(LicenseRequirementStep).filter(
            LicenseRequirementStep.license_requirement_id == requirement_id
        ).order_by(LicenseRequirementStep.step_order).all()
        return [s.to_dict() for s in steps]

    def create_step(self, requirement_id: str, step_name: str, description: str = None,
                    estimated_days: int = None, is_required: bool = True) -> Dict:
        step = LicenseRequirementStep(
            license_requirement_id=requirement_id,
            step_name=step_name,
            step_order=self._next_step_order(requirement_id),
            description=description or None,
            estimated_days=estimated_days,
            is_required=is_required
        )
        self.session.add(step)
        self.session.flush()
        self.events.log_create('license_requirement_step', step.id, {'step_name': step_name})
        logger.info(f"Created requirement step: {step.id}")
        return step.to_dict()

    def update_step(self, step_id: str, step_name: str, description: str = None,
                    estimated_days: int = None, is_required: bool = True) -> Optional[Dict]:
        step = self.session.query(LicenseRequirementStep).filter(LicenseRequirementStep.id == step_id).first()
        if not step:
            return None
        step.step_name = step_name
        step.description = description or None
        step.estimated_days = estimated_days
        step.is_required = is_required
        self.session.flush()
        self.events.log_update('license_requirement_step', step_id, {'step_name': step_name})
        return step.to_dict()

    def delete_step(self, step_id: str) -> bool:
        step = self.session.query(LicenseRequirementStep).filter(LicenseRequirementStep.id == step_id).first()
        if not step:
            return False
        self.session.delete(step)
        self.session.flush()
        self.events.log_delete('license_requirement_step', step_id)
        logger.info(f"Deleted requirement step: {step_id}")
        return True

    def get_all_steps_with_requirement_info(self, exclude_requirement_id: str = None) -> List[Dict]:
        """Steps of every requirement with its state and license type, for copying between templates."""
        query = self.session.query(LicenseRequirementStep, LicenseRequirement).join(
            LicenseRequirement,
            LicenseRequirementStep.license_requirement_id == LicenseRequirement.id
        )
        if exclude_requirement_id:
            query = query.filter(LicenseRequirementStep.license_requirement_id != exclude_requirement_id)
        rows = query.order_by(LicenseRequirementStep.license_requirement_id,
                              LicenseRequirementStep.step_order).all()

        result = []
        for step, requirement in rows:
            data = step.to_dict()
            data['state'] = requirement.state
            data['license_type'] = requirement.license_type
            result.append(data)
        return result

    def copy_steps(self, target_requirement_id: str, step_ids: List[str]) -> List[Dict]:
        """Append copies of the given steps to the target requirement."""
        if not step_ids:
            raise ValueError('No steps selected')

        sources = self.session.query(LicenseRequirementStep).filter(
            LicenseRequirementStep.id.in_(step_ids)
        ).order_by(LicenseRequirementStep.step_order).all()
        if not sources:
            raise ValueError('Failed to fetch source steps')

        next_order = self._next_step_order(target_requirement_id)
        copies = []
        for source in sources:
            copies.append(LicenseRequirementStep(
                license_requirement_id=target_requirement_id,
                step_name=source.step_name,
                step_order=next_order,
                description=source.description,
                estimated_days=source.estimated_days,
                is_required=source.is_required if source.is_required is not None else True
            ))
            next_order += 1

        self.session.add_all(copies)
        self.session.flush()
        logger.info(f"Copied {len(copies)} steps to requirement {target_requirement_id}")
        return [c.to_dict() for c in copies]

    # ==================== DOCUMENTS ====================

    def get_documents(self, requirement_id: str) -> List[Dict]:
        docs = self.session.query(LicenseRequirementDocument).filter(
            LicenseRequirementDocument.license_requirement_id == requirement_id
        ).order_by(LicenseRequirementDocument.document_name).all()
        return [d.to_dict() for d in docs]

    def create_document(self, requirement_id: str, document_name: str,
                        description: str = None, is_required: bool = True,
                        document_type: str = None) -> Dict:
        document = LicenseRequirementDocument(
            license_requirement_id=requirement_id,
            document_name=document_name,
            document_type=document_type,
            description=description or None,
            is_required=is_required
        )
        self.session.add(document)
        self.session.flush()
        self.events.log_create('license_requirement_document', document.id, {'document_name': document_name})
        logger.info(f"Created requirement document: {document.id}")
        return document.to_dict()

    def update_document(self, document_id: str, document_name: str,
                        description: str = None, is_required: bool = True) -> Optional[Dict]:
        document = self.session.query(LicenseRequirementDocument).filter(
            LicenseRequirementDocument.id == document_id
        ).first()
        if not document:
            return None
        document.document_name = document_name
        document.description = description or None
        document.is_required = is_required
        self.session.flush()
        self.events.log_update('license_requirement_document', document_id, {'document_name': document_name})
        return document.to_dict()

    def delete_document(self, document_id: str) -> bool:
        document = self.session.query(LicenseRequirementDocument).filter(
            LicenseRequirementDocument.id == document_id
        ).first()
        if not document:
            return False
        self.session.delete(document)
        self.session.flush()
        self.events.log_delete('license_requirement_document', document_id)
        logger.info(f"Deleted requirement document: {document_id}")
        return True

    def get_all_documents_with_requirement_info(self, exclude_requirement_id: str = None) -> List[Dict]:
        query = self.session.query(LicenseRequirementDocument, LicenseRequirement).join(
            LicenseRequirement,
            LicenseRequirementDocument.license_requirement_id == LicenseRequirement.id
        )
        if exclude_requirement_id:
            query = query.filter(LicenseRequirementDocument.license_requirement_id != exclude_requirement_id)
        rows = query.order_by(LicenseRequirementDocument.license_requirement_id,
                              LicenseRequirementDocument.document_name).all()

        result = []
        for document, requirement in rows:
            data = document.to_dict()
            data['state'] = requirement.state
            data['license_type'] = requirement.license_type
            result.append(data)
        return result

    def copy_documents(self, target_requirement_id: str, document_ids: List[str]) -> List[Dict]:
        if not document_ids:
            raise ValueError('No documents selected')

        sources = self.session.query(LicenseRequirementDocument).filter(
            LicenseRequirementDocument.id.in_(document_ids)
        ).all()
        if not sources:
            raise ValueError('Failed to fetch source documents')

        copies = [
            LicenseRequirementDocument(
                license_requirement_id=target_requirement_id,
                document_name=source.document_name,
                document_type=source.document_type,
                description=source.description,
                is_required=source.is_required
            )
            for source in sources
        ]
        self.session.add_all(copies)
        self.session.flush()
        logger.info(f"Copied {len(copies)} documents to requirement {target_requirement_id}")
        return [c.to_dict() for c in copies]

    # ==================== EXPERT STEPS ====================

    def get_application_ids_for_requirement(self, requirement_id: str) -> List[str]:
        """Applications filed in the requirement's state for a license type with the requirement's name."""
        requirement = self.get_requirement(requirement_id)
        if not requirement:
            return []

        rows = self.session.query(Application.id).join(
            LicenseType, Application.license_type_id == LicenseType.id
        ).filter(
            Application.state == requirement.state,
            LicenseType.name == requirement.license_type
        ).all()
        return [row.id for row in rows]

    def _next_expert_step_order(self, application_id: str) -> int:
        current = self.session.query(func.max(ApplicationStep.step_order)).filter(
            ApplicationStep.application_id == application_id,
            ApplicationStep.is_expert_step == True  # noqa: E712
        ).scalar()
        return (current or 0) + 1

    def _matching_expert_steps(self, application_ids: List[str], step_name: str,
                               description: Optional[str], phase: Optional[str]):
        return self.session.query(ApplicationStep).filter(
            ApplicationStep.is_expert_step == True,  # noqa: E712
            ApplicationStep.application_id.in_(application_ids),
            ApplicationStep.step_name == step_name,
            _null_safe_eq(ApplicationStep.description, description),
            _null_safe_eq(ApplicationStep.phase, phase)
        )

    def create_expert_step(self, requirement_id: str, phase: str, step_title: str,
                           description: str = None) -> Dict:
        """Add an expert step to every application of the requirement; returns the first row."""
        application_ids = self.get_application_ids_for_requirement(requirement_id)
        if not application_ids:
            raise ValueError('No applications found for this license type and state')

        inserted = []
        for application_id in application_ids:
            step = ApplicationStep(
                application_id=application_id,
                step_name=step_title,
                step_order=self._next_expert_step_order(application_id),
                description=description or None,
                is_expert_step=True,
                phase=phase or DEFAULT_EXPERT_STEP_PHASE,
                is_completed=False
            )
            self.session.add(step)
            self.session.flush()
            inserted.append(step)

        self.events.log_create('expert_step', requirement_id,
                               {'step_name': step_title, 'applications': len(inserted)})
        logger.info(f"Created expert step '{step_title}' on {len(inserted)} applications")
        return inserted[0].to_dict()

    def update_expert_step(self, step_id: str, phase: str, step_title: str,
                           description: str = None) -> Optional[Dict]:
        step = self.session.query(ApplicationStep).filter(
            ApplicationStep.id == step_id,
            ApplicationStep.is_expert_step == True  # noqa: E712
        ).first()
        if not step:
            return None
        step.step_name = step_title
        step.description = description
        step.phase = phase or None
        self.session.flush()
        self.events.log_update('expert_step', step_id, {'step_name': step_title, 'phase': phase})
        return step.to_dict()

    def delete_expert_step(self, step_id: str) -> bool:
        step = self.session.query(ApplicationStep).filter(
            ApplicationStep.id == step_id,
            ApplicationStep.is_expert_step == True  # noqa: E712
        ).first()
        if not step:
            return False
        self.session.delete(step)
        self.session.flush()
        self.events.log_delete('expert_step', step_id)
        return True

    def update_expert_step_for_requirement(self, requirement_id: str, step_name: str,
                                           description: Optional[str], phase: Optional[str],
                                           new_phase: str, new_title: str,
                                           new_description: str = None) -> int:
        """Rewrite every copy of an expert step across the requirement's applications."""
        application_ids = self.get_application_ids_for_requirement(requirement_id)
        if not application_ids:
            raise ValueError('No applications found for this requirement')

        steps = self._matching_expert_steps(application_ids, step_name, description, phase).all()
        for step in steps:
            step.step_name = new_title
            step.description = new_description
            step.phase = new_phase or None
        self.session.flush()

        self.events.log_update('expert_step', requirement_id,
                               {'step_name': new_title, 'updated': len(steps)})
        logger.info(f"Updated {len(steps)} expert steps for requirement {requirement_id}")
        return len(steps)

    def delete_expert_step_for_requirement(self, requirement_id: str, step_name: str,
                                           description: Optional[str], phase: Optional[str]) -> int:
        application_ids = self.get_application_ids_for_requirement(requirement_id)
        if not application_ids:
            return 0

        steps = self._matching_expert_steps(application_ids, step_name, description, phase).all()
        for step in steps:
            self.session.delete(step)
        self.session.flush()

        if steps:
            self.events.log_delete('expert_step', requirement_id)
        logger.info(f"Deleted {len(steps)} expert steps for requirement {requirement_id}")
        return len(steps)

    def get_expert_steps(self, requirement_id: str) -> List[Dict]:
        """Distinct expert steps across the requirement's applications, in step order."""
        application_ids = self.get_application_ids_for_requirement(requirement_id)
        if not application_ids:
            return []

        rows = self.session.query(ApplicationStep).filter(
            ApplicationStep.is_expert_step == True,  # noqa: E712
            ApplicationStep.application_id.in_(application_ids)
        ).order_by(ApplicationStep.step_order).all()

        seen = set()
        steps = []
        for row in rows:
            key = _expert_step_key(row)
            if key in seen:
                continue
            seen.add(key)
            steps.append({
                'id': row.id,
                'step_name': row.step_name,
                'step_order': row.step_order,
                'description': row.description,
                'phase': row.phase
            })
        return steps

    def get_all_expert_steps_with_requirement_info(self, exclude_requirement_id: str = None) -> List[Dict]:
        """Distinct expert steps of every requirement, tagged with state, license type and requirement id."""
        rows = self.session.query(ApplicationStep, Application.state, LicenseType.name).join(
            Application, ApplicationStep.application_id == Application.id
        ).join(
            LicenseType, Application.license_type_id == LicenseType.id
        ).filter(
            ApplicationStep.is_expert_step == True  # noqa: E712
        ).order_by(ApplicationStep.step_order).all()

        requirement_ids = {}
        seen = set()
        steps = []
        for step, state, license_type_name in rows:
            if not license_type_name:
                continue
            key = _expert_step_key(step) + (state, license_type_name)
            if key in seen:
                continue
            seen.add(key)

            pair = (state, license_type_name)
            if pair not in requirement_ids:
                requirement = self.find_requirement(state, license_type_name)
                requirement_ids[pair] = requirement.id if requirement else ''
            requirement_id = requirement_ids[pair]

            if exclude_requirement_id and requirement_id == exclude_requirement_id:
                continue

            steps.append({
                'id': step.id,
                'step_name': step.step_name,
                'step_order': step.step_order,
                'description': step.description,
                'phase': step.phase,
                'license_requirement_id': requirement_id,
                'state': state,
                'license_type': license_type_name
            })
        return steps

    def copy_expert_steps(self, target_requirement_id: str, step_ids: List[str]) -> List[Dict]:
        """Append the given expert steps to every application of the target requirement."""
        if not step_ids:
            raise ValueError('No expert steps selected')

        sources = self.session.query(ApplicationStep).filter(
            ApplicationStep.id.in_(step_ids),
            ApplicationStep.is_expert_step == True  # noqa: E712
        ).order_by(ApplicationStep.step_order).all()
        if not sources:
            raise ValueError('Failed to fetch source expert steps')

        application_ids = self.get_application_ids_for_requirement(target_requirement_id)
        if not application_ids:
            raise ValueError('No applications found for target license type and state')

        inserted = []
        for application_id in application_ids:
            next_order = self._next_expert_step_order(application_id)
            for source in sources:
                step = ApplicationStep(
                    application_id=application_id,
                    step_name=source.step_name,
                    step_order=next_order,
                    description=source.description,
                    phase=source.phase,
                    is_expert_step=True,
                    is_completed=False
                )
                self.session.add(step)
                inserted.append(step)
                next_order += 1

        self.session.flush()
        logger.info(f"Copied {len(sources)} expert steps to {len(application_ids)} applications")
        return [s.to_dict() for s in inserted]
