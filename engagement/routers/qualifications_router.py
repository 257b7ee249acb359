"""Qualifications API: list, reports, manual overrides."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi_pagination import LimitOffsetPage, LimitOffsetParams
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.orm import Session

from engagement.constants.engagement import QualificationSource
from engagement.db import get_db
from engagement.models.qualification import Qualification
from engagement.routers.utils.dependencies import get_qualification_by_id
from engagement.schemas.qualification import (
    QualificationCategoryUpdate,
    QualificationNotesUpdate,
    QualificationRead,
    QualificationReport,
    QualificationStats,
)
from engagement.services.qualification_service import QualificationService
from engagement.services.report_service import ReportService

router = APIRouter(
    prefix="/qualifications",
    tags=["qualifications"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=LimitOffsetPage[QualificationRead])
def list_qualifications(
    params: LimitOffsetParams = Depends(),
    source: Optional[QualificationSource] = Query(None),
    db: Session = Depends(get_db),
) -> LimitOffsetPage[QualificationRead]:
    """List qualifications, newest first, optionally filtered by source."""
    query = QualificationService(db).get_qualifications_query(source=source)
    return paginate(query, params=params)


@router.get("/stats", response_model=QualificationStats)
def get_qualification_stats(db: Session = Depends(get_db)) -> QualificationStats:
    return ReportService(db).get_qualification_stats()


@router.get("/report", response_model=QualificationReport)
def get_qualification_report(db: Session = Depends(get_db)) -> QualificationReport:
    """Counts and percentages by source, campaign and agent."""
    return ReportService(db).get_qualification_report()


@router.get("/{qualification_id}", response_model=QualificationRead)
def get_qualification(
    qualification: Qualification = Depends(get_qualification_by_id),
) -> QualificationRead:
    return QualificationRead.model_validate(qualification)


@router.put("/{qualification_id}/category", response_model=QualificationRead)
def update_qualification_category(
    data: QualificationCategoryUpdate,
    qualification: Qualification = Depends(get_qualification_by_id),
    db: Session = Depends(get_db),
) -> QualificationRead:
    """Manually set the category, bypassing the automatic merge rules."""
    updated = QualificationService(db).update_qualification_category(
        qualification.id, data.category, notes=data.notes
    )
    return QualificationRead.model_validate(updated)


@router.put("/{qualification_id}/notes", response_model=QualificationRead)
def update_qualification_notes(
    data: QualificationNotesUpdate,
    qualification: Qualification = Depends(get_qualification_by_id),
    db: Session = Depends(get_db),
) -> QualificationRead:
    updated = QualificationService(db).update_qualification_notes(
        qualification.id, data.notes
    )
    return QualificationRead.model_validate(updated)


@router.delete("/{qualification_id}", status_code=204)
def delete_qualification(
    qualification: Qualification = Depends(get_qualification_by_id),
    db: Session = Depends(get_db),
) -> None:
    QualificationService(db).delete_qualification(qualification.id)
