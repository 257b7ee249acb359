"""Sticky agent routing per contact phone, with a bounded conversation history."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from engagement.constants.engagement import (
    CONVERSATION_HISTORY_LIMIT,
    ConversationRole,
)
from engagement.core.phone import (
    normalize_phone,
    phone_filter,
    phones_match,
    require_phone,
)
from engagement.infra.logging_config import get_logger
from engagement.models.agent_assignment import AgentAssignment
from engagement.schemas.agent_assignment import HistoryEntry, HistoryMessage
from engagement.services.base_service import BaseService

logger = get_logger("agent_assignment")


class AgentAssignmentService(BaseService[AgentAssignment]):
    def __init__(self, db: Session) -> None:
        super().__init__(db, AgentAssignment)

    def _matching_assignments(self, phone: str) -> List[AgentAssignment]:
        """
        All assignments for the phone, best candidate first.

        Ordering: active before inactive, exact digit match before suffix
        match, most recently updated first.
        """
        normalized = normalize_phone(phone)
        if not normalized:
            return []
        candidates = (
            self.db.query(AgentAssignment)
            .filter(phone_filter(AgentAssignment.phone, normalized))
            .order_by(AgentAssignment.updated_at.desc())
            .all()
        )
        matches = [c for c in candidates if phones_match(c.phone, normalized)]
        return sorted(
            matches, key=lambda a: (not a.is_active, a.phone != normalized)
        )

    def _find_assignment(self, phone: str) -> Optional[AgentAssignment]:
        matches = self._matching_assignments(phone)
        return matches[0] if matches else None

    def assign(
        self,
        contact_id: str,
        phone: str,
        agent_id: str,
        agent_name: Optional[str] = None,
    ) -> AgentAssignment:
        """Assign an agent to a contact, reusing and reactivating any prior record."""
        normalized = require_phone(phone)
        matches = self._matching_assignments(normalized)

        if matches:
            assignment = matches[0]
            assignment.agent_id = agent_id
            assignment.agent_name = agent_name
            if contact_id:
                assignment.contact_id = contact_id
            assignment.is_active = True
            # Keep a single active assignment per phone.
            for other in matches[1:]:
                if other.is_active:
                    other.is_active = False
            self.save(assignment)
            logger.info("Updated agent assignment %s -> %s", normalized, agent_id)
            return assignment

        assignment = AgentAssignment(
            contact_id=contact_id or "",
            phone=normalized,
            agent_id=agent_id,
            agent_name=agent_name,
            conversation_history=[],
            is_active=True,
        )
        self.save(assignment)
        logger.info("Created agent assignment %s -> %s", normalized, agent_id)
        return assignment

    def get_agent_for_contact(self, phone: str) -> Optional[AgentAssignment]:
        """The active assignment for the phone, or None."""
        assignment = self._find_assignment(phone)
        if assignment is None or not assignment.is_active:
            return None
        return assignment

    def get_assignment(self, phone: str) -> Optional[AgentAssignment]:
        """Best matching assignment for the phone, active or not."""
        return self._find_assignment(phone)

    def get_all_contact_agents(self) -> List[AgentAssignment]:
        return (
            self.db.query(AgentAssignment)
            .order_by(AgentAssignment.updated_at.desc())
            .all()
        )

    def add_message_to_history(
        self,
        phone: str,
        role: ConversationRole,
        content: str,
        timestamp: Optional[datetime] = None,
    ) -> bool:
        """
        Append a turn to the contact's history, keeping the latest entries only.

        Returns False when the phone has no assignment; one is never created here.
        """
        normalized = require_phone(phone)
        assignment = self._find_assignment(normalized)
        if assignment is None:
            return False
        assignment = self.lock_record(assignment.id)

        entry = HistoryEntry(
            role=role,
            content=content or "",
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        history = list(assignment.conversation_history or [])
        history.append(entry.model_dump(mode="json"))
        # Reassign so the JSON column is flagged dirty.
        assignment.conversation_history = history[-CONVERSATION_HISTORY_LIMIT:]
        self.save(assignment)
        return True

    def get_history_entries(self, phone: str) -> List[HistoryEntry]:
        assignment = self._find_assignment(phone)
        if assignment is None:
            return []
        return [
            HistoryEntry.model_validate(item)
            for item in assignment.conversation_history or []
        ]

    def get_conversation_history(self, phone: str) -> List[dict[str, str]]:
        """History as {role, content} dicts, ready to hand to an LLM."""
        return [
            HistoryMessage(role=entry.role, content=entry.content).model_dump(
                mode="json"
            )
            for entry in self.get_history_entries(phone)
        ]

    def remove_agent_from_contact(self, phone: str) -> bool:
        """Deactivate the contact's assignment. History is kept."""
        normalized = require_phone(phone)
        matches = [a for a in self._matching_assignments(normalized) if a.is_active]
        if not matches:
            return False
        for assignment in matches:
            assignment.is_active = False
        self.save()
        logger.info("Deactivated agent assignment for %s", normalized)
        return True
