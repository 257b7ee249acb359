from engagement.services.agent_assignment_service import AgentAssignmentService
from engagement.services.contact_analytics_service import ContactAnalyticsService
from engagement.services.interest_analyzer import InterestAnalyzer
from engagement.services.qualification_service import QualificationService
from engagement.services.report_service import ReportService

__all__ = [
    "AgentAssignmentService",
    "ContactAnalyticsService",
    "InterestAnalyzer",
    "QualificationService",
    "ReportService",
]
