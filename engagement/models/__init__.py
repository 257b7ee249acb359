from engagement.models.agent_assignment import AgentAssignment
from engagement.models.contact_analytics import ContactAnalytics
from engagement.models.qualification import Qualification

__all__ = [
    "AgentAssignment",
    "ContactAnalytics",
    "Qualification",
]
