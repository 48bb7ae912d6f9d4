# file: controllers/report.py

from dataclasses import asdict
from datetime import date

import firebase_admin
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.database.connection import get_db
from quorumflow.database.models import AnnualReportAnswers, User
from quorumflow.models.report import (
    MAX_REPORT_YEAR,
    MIN_REPORT_YEAR,
    ReportAnswersPayload,
    ReportAnswersResponse,
    ReportRequest,
    ReportResponse,
)
from quorumflow.services.firebase_app import get_firebase_app
from quorumflow.services.firebase_auth import get_current_user
from quorumflow.services.report_data import load_answers
from quorumflow.services.report_service import generate_annual_report_base64
from quorumflow.services.template_store import build_template_store

router = APIRouter()


def get_template_store(app: firebase_admin.App = Depends(get_firebase_app)):
    return build_template_store(app)


def validate_year(year: int) -> int:
    if not MIN_REPORT_YEAR <= year <= MAX_REPORT_YEAR:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid year")
    return year


@router.post("/annual", response_model=ReportResponse)
async def generate_report(
        request: ReportRequest,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        template_store=Depends(get_template_store),
):
    """
    Generates the annual report DOCX for the requested year (current year by default)
    and returns it base64 encoded.
    """
    year = request.year or date.today().year
    file_contents = await generate_annual_report_base64(db, template_store, year)
    return ReportResponse(fileContents=file_contents)


@router.get("/answers/{year}", response_model=ReportAnswersResponse)
async def get_report_answers(
        year: int,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    answers = await load_answers(db, validate_year(year))
    return ReportAnswersResponse(year=year, **asdict(answers))


@router.put("/answers/{year}", response_model=ReportAnswersResponse)
async def save_report_answers(
        year: int,
        payload: ReportAnswersPayload,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    """Creates or overwrites the narrative answers for one report year."""
    row = await db.get(AnnualReportAnswers, validate_year(year))
    if row is None:
        row = AnnualReportAnswers(year=year)
        db.add(row)
    for name, value in payload.model_dump().items():
        setattr(row, name, value)
    await db.commit()
    await db.refresh(row)
    return ReportAnswersResponse.model_validate(row)
