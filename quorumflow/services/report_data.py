# file: services/report_data.py

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.database.models import Activity, AnnualReportAnswers, Baptism, FutureMember
from quorumflow.utils.dates import in_year, year_range

logger = logging.getLogger(__name__)

ANSWER_FIELDS = ("p1", "p2", "p3", "p4", "p5", "p6")


class BaptismSource(str, enum.Enum):
    MANUAL = "Manual"
    AUTOMATIC = "Automático"


@dataclass
class BaptismRecord:
    id: str
    name: str
    date: datetime
    source: BaptismSource
    photo_urls: List[str] = field(default_factory=list)


def from_manual(baptism: Baptism) -> BaptismRecord:
    return BaptismRecord(
        id=f"manual-{baptism.id}",
        name=baptism.name,
        date=baptism.date,
        source=BaptismSource.MANUAL,
        photo_urls=list(baptism.photo_urls or []),
    )


def from_future_member(member: FutureMember) -> BaptismRecord:
    return BaptismRecord(
        id=f"future-member-{member.id}",
        name=member.name,
        date=member.baptism_date,
        source=BaptismSource.AUTOMATIC,
        photo_urls=list(member.baptism_photos or []),
    )


@dataclass
class ReportAnswers:
    p1: str = ""
    p2: str = ""
    p3: str = ""
    p4: str = ""
    p5: str = ""
    p6: str = ""

    @classmethod
    def from_row(cls, row: AnnualReportAnswers | None) -> "ReportAnswers":
        if row is None:
            return cls()
        return cls(**{name: getattr(row, name) or "" for name in ANSWER_FIELDS})


@dataclass
class ReportData:
    year: int
    activities: List[Activity]
    baptisms: List[BaptismRecord]
    answers: ReportAnswers


async def load_year_activities(db: AsyncSession, year: int) -> List[Activity]:
    # Ordered query first, year filter applied in memory afterwards.
    result = await db.execute(select(Activity).order_by(Activity.date.desc()))
    return [activity for activity in result.scalars().all() if in_year(activity.date, year)]


async def load_year_baptisms(db: AsyncSession, year: int) -> List[BaptismRecord]:
    start, end = year_range(year)

    future_members = await db.execute(
        select(FutureMember).where(FutureMember.baptism_date >= start, FutureMember.baptism_date < end)
    )
    manual = await db.execute(
        select(Baptism).where(Baptism.date >= start, Baptism.date < end)
    )

    records = [from_future_member(m) for m in future_members.scalars().all()]
    records += [from_manual(b) for b in manual.scalars().all()]
    records.sort(key=lambda record: record.date, reverse=True)
    return records


async def load_answers(db: AsyncSession, year: int) -> ReportAnswers:
    return ReportAnswers.from_row(await db.get(AnnualReportAnswers, year))


async def collect_report_data(db: AsyncSession, year: int) -> ReportData:
    """Gathers everything the annual report needs for one calendar year. Query errors propagate."""
    activities = await load_year_activities(db, year)
    baptisms = await load_year_baptisms(db, year)
    answers = await load_answers(db, year)
    logger.info("Report data for %s: %d activities, %d baptisms", year, len(activities), len(baptisms))
    return ReportData(year=year, activities=activities, baptisms=baptisms, answers=answers)
