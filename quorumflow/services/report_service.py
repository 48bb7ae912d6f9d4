# file: services/report_service.py

import base64
import logging
from datetime import date, datetime
from typing import Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from quorumflow.errors import InternalError
from quorumflow.services.image_service import ImageRequest, resolve_report_images
from quorumflow.services.report_data import collect_report_data
from quorumflow.services.report_renderer import (
    ReportContext,
    build_activity_entry,
    build_baptism_entry,
    render_report,
)

logger = logging.getLogger(__name__)


async def generate_annual_report(
        db: AsyncSession,
        template_store,
        year: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
) -> bytes:
    """Aggregates the year's data, resolves every image, and renders the DOCX."""
    generated_at = now or datetime.now()
    today = today or generated_at.date()
    year = year or today.year

    data = await collect_report_data(db, year)
    template_bytes = await template_store.load()

    requests = [ImageRequest(item_id=f"activity-{a.id}", urls=list(a.image_urls or [])) for a in data.activities]
    requests += [ImageRequest(item_id=b.id, urls=b.photo_urls) for b in data.baptisms]
    images = await resolve_report_images(requests, client=http_client)

    activity_images = images[:len(data.activities)]
    baptism_images = images[len(data.activities):]

    context = ReportContext(
        report_date=today,
        year=year,
        generated_at=generated_at,
        answers=data.answers,
        activities=[build_activity_entry(a, imgs) for a, imgs in zip(data.activities, activity_images)],
        baptisms=[build_baptism_entry(b, imgs) for b, imgs in zip(data.baptisms, baptism_images)],
    )
    return render_report(template_bytes, context)


async def generate_annual_report_base64(db: AsyncSession, template_store, year: Optional[int] = None,
                                        **kwargs) -> str:
    """Report generation wrapped for API callers: every failure becomes an InternalError."""
    try:
        document = await generate_annual_report(db, template_store, year, **kwargs)
    except Exception as e:
        logger.exception("Error generating report")
        raise InternalError(str(e) or "An unknown error occurred.") from e
    return base64.b64encode(document).decode("ascii")
