"""Contact agents API: inspect and manage sticky agent routing."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from engagement.db import get_db
from engagement.exceptions import NotFoundError
from engagement.models.agent_assignment import AgentAssignment
from engagement.routers.utils.dependencies import get_assignment_by_phone
from engagement.schemas.agent_assignment import (
    AgentAssignmentRead,
    AgentAssignmentUpsert,
    HistoryEntry,
)
from engagement.services.agent_assignment_service import AgentAssignmentService

router = APIRouter(
    prefix="/contact-agents",
    tags=["contact-agents"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[AgentAssignmentRead])
def list_contact_agents(db: Session = Depends(get_db)) -> List[AgentAssignmentRead]:
    return [
        AgentAssignmentRead.model_validate(a)
        for a in AgentAssignmentService(db).get_all_contact_agents()
    ]


@router.get("/{phone}", response_model=AgentAssignmentRead)
def get_contact_agent(phone: str, db: Session = Depends(get_db)) -> AgentAssignmentRead:
    """Get the active assignment for a phone."""
    assignment = AgentAssignmentService(db).get_agent_for_contact(phone)
    if assignment is None:
        raise NotFoundError("No active agent for contact")
    return AgentAssignmentRead.model_validate(assignment)


@router.get("/{phone}/history", response_model=List[HistoryEntry])
def get_contact_history(
    assignment: AgentAssignment = Depends(get_assignment_by_phone),
    db: Session = Depends(get_db),
) -> List[HistoryEntry]:
    return AgentAssignmentService(db).get_history_entries(assignment.phone)


@router.put("/{phone}", response_model=AgentAssignmentRead)
def assign_contact_agent(
    phone: str,
    data: AgentAssignmentUpsert,
    db: Session = Depends(get_db),
) -> AgentAssignmentRead:
    """Assign (or reassign) an agent to the contact."""
    assignment = AgentAssignmentService(db).assign(
        data.contact_id, phone, data.agent_id, data.agent_name
    )
    return AgentAssignmentRead.model_validate(assignment)


@router.delete("/{phone}", status_code=204)
def remove_contact_agent(phone: str, db: Session = Depends(get_db)) -> None:
    if not AgentAssignmentService(db).remove_agent_from_contact(phone):
        raise NotFoundError("No active agent for contact")
