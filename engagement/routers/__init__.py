from engagement.routers.agent_assignments_router import router as agent_assignments_router
from engagement.routers.contact_analytics_router import (
    router as contact_analytics_router,
)
from engagement.routers.qualifications_router import router as qualifications_router

__all__ = [
    "agent_assignments_router",
    "contact_analytics_router",
    "qualifications_router",
]
