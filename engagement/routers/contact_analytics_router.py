"""Contact analytics API: reports, on-demand analysis and summary."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from engagement.db import get_db
from engagement.models.contact_analytics import ContactAnalytics
from engagement.routers.utils.dependencies import (
    get_contact_report_by_phone,
    get_interest_analyzer,
)
from engagement.schemas.contact_analytics import (
    AnalyzeAllResult,
    AnalyzeContactRequest,
    ContactAnalyticsRead,
    ContactAnalyticsSummary,
    ContactReportList,
)
from engagement.services.contact_analytics_service import (
    DEFAULT_REPORT_LIMIT,
    ContactAnalyticsService,
)
from engagement.services.interest_analyzer import InterestAnalyzer
from engagement.services.report_service import ReportService

router = APIRouter(
    prefix="/contact-analytics",
    tags=["contact-analytics"],
    responses={404: {"description": "Not found"}},
)


@router.get("/reports", response_model=ContactReportList)
def list_contact_reports(
    interest_level: Optional[str] = Query(None, alias="interestLevel"),
    limit: int = Query(DEFAULT_REPORT_LIMIT, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> ContactReportList:
    """List contact reports, most recently updated first."""
    reports, total = ContactAnalyticsService(db).get_all_contact_reports(
        interest_level=interest_level, limit=limit, offset=offset
    )
    return ContactReportList(
        reports=[ContactAnalyticsRead.model_validate(r) for r in reports],
        total=total,
    )


@router.get("/summary", response_model=ContactAnalyticsSummary)
def get_contact_analytics_summary(
    db: Session = Depends(get_db),
) -> ContactAnalyticsSummary:
    return ReportService(db).get_contact_analytics_summary()


@router.get("/reports/{phone}", response_model=ContactAnalyticsRead)
def get_contact_report(
    report: ContactAnalytics = Depends(get_contact_report_by_phone),
) -> ContactAnalyticsRead:
    return ContactAnalyticsRead.model_validate(report)


@router.post("/analyze-all", response_model=AnalyzeAllResult)
async def analyze_all_contacts(
    analyzer: InterestAnalyzer = Depends(get_interest_analyzer),
    db: Session = Depends(get_db),
) -> AnalyzeAllResult:
    """Re-analyze every contact from its stored conversation history."""
    svc = ContactAnalyticsService(db, analyzer=analyzer)
    return await svc.analyze_all_contacts()


@router.post("/analyze/{phone}", response_model=ContactAnalyticsRead)
async def analyze_contact(
    phone: str,
    data: AnalyzeContactRequest,
    analyzer: InterestAnalyzer = Depends(get_interest_analyzer),
    db: Session = Depends(get_db),
) -> ContactAnalyticsRead:
    """Run interest analysis over the supplied messages and store the result."""
    svc = ContactAnalyticsService(db, analyzer=analyzer)
    record = await svc.analyze_and_update_contact(
        data.contact_id, phone, data.contact_name, data.messages
    )
    return ContactAnalyticsRead.model_validate(record)
