# file: services/report_renderer.py

"""
Renders the annual report DOCX.

The template is maintained outside this repository and may use these
placeholders (docxtpl / Jinja2 syntax):

- ``{{ anho_reporte }}``, ``{{ fecha_reporte }}``, ``{{ fecha_generacion }}``
- ``{{ respuesta_p1 }}`` .. ``{{ respuesta_p6 }}``
- ``{{ total_actividades }}``, ``{{ total_bautismos }}``,
  ``{{ total_imagenes }}``, ``{{ actividades_con_imagenes }}``
- ``lista_actividades``: loop over entries with ``title``, ``date``,
  ``description`` and ``images`` (each image rendered with ``{{ img }}``)
- ``lista_bautismos``: loop over entries with ``name`` and ``images``
- ``actividades_por_mes``: loop over ``month``, ``count`` and ``activities``
  (same entries as ``lista_actividades``), oldest month first
- ``resumen_bautismos``: loop over ``nombre``, ``fecha`` and ``origen``
- ``galeria_actividades``: activities that have images, with ``titulo``,
  ``fecha``, ``descripcion``, ``cantidad``, ``imagen_principal`` and ``imagenes``
"""

import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional

from docx.shared import Emu
from docxtpl import DocxTemplate, InlineImage, Listing

from quorumflow.database.models import Activity
from quorumflow.services.image_service import SizedImage
from quorumflow.services.report_data import BaptismRecord, ReportAnswers
from quorumflow.utils.dates import (
    as_date,
    format_full_date,
    format_generation_time,
    format_long_date,
    format_month_year,
    format_short_date,
)

logger = logging.getLogger(__name__)

EMU_PER_PIXEL = 9525

DESCRIPTION_SECTIONS = (
    ("additional_text", "\n\nTexto Adicional: "),
    ("location", "\nLugar: "),
    ("context", "\nContexto: "),
    ("learning", "\nAprendizaje: "),
)


def compose_activity_description(activity: Activity) -> str:
    description = activity.description or ""
    for attribute, prefix in DESCRIPTION_SECTIONS:
        value = getattr(activity, attribute, None)
        if value:
            description += f"{prefix}{value}"
    return description


def format_activity_date(activity: Activity) -> str:
    time_str = f", {activity.time}" if activity.time else ""
    return f"{format_short_date(activity.date)}{time_str}"


def format_baptism_label(baptism: BaptismRecord) -> str:
    return f"{baptism.name} ({format_short_date(baptism.date)})"


@dataclass
class ActivityEntry:
    title: str
    date: str
    description: str
    images: List[SizedImage] = field(default_factory=list)
    full_date: str = ""
    month_start: Optional[date] = None


@dataclass
class BaptismEntry:
    name: str
    images: List[SizedImage] = field(default_factory=list)
    person: str = ""
    full_date: str = ""
    source: str = ""


@dataclass
class ReportContext:
    report_date: date
    answers: ReportAnswers
    activities: List[ActivityEntry]
    baptisms: List[BaptismEntry]
    year: Optional[int] = None
    generated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.year is None:
            self.year = self.report_date.year
        if self.generated_at is None:
            self.generated_at = datetime.combine(self.report_date, time())


def build_activity_entry(activity: Activity, images: List[SizedImage]) -> ActivityEntry:
    return ActivityEntry(
        title=activity.title,
        date=format_activity_date(activity),
        description=compose_activity_description(activity),
        images=images,
        full_date=format_full_date(activity.date),
        month_start=as_date(activity.date).replace(day=1),
    )


def build_baptism_entry(baptism: BaptismRecord, images: List[SizedImage]) -> BaptismEntry:
    return BaptismEntry(
        name=format_baptism_label(baptism),
        images=images,
        person=baptism.name,
        full_date=format_full_date(baptism.date),
        source=baptism.source.value,
    )


def _inline_images(doc: DocxTemplate, images: List[SizedImage]) -> List[InlineImage]:
    return [
        InlineImage(
            doc,
            io.BytesIO(image.data),
            width=Emu(round(image.width * EMU_PER_PIXEL)),
            height=Emu(round(image.height * EMU_PER_PIXEL)),
        )
        for image in images
    ]


def _activity_item(doc: DocxTemplate, entry: ActivityEntry) -> dict:
    return {
        "title": entry.title,
        "date": entry.date,
        "description": Listing(entry.description),
        "images": _inline_images(doc, entry.images),
    }


def group_activities_by_month(entries: List[ActivityEntry], items: List[dict]) -> List[dict]:
    """Groups rendered activity items by calendar month, oldest month first."""
    months = {}
    for entry, item in zip(entries, items):
        months.setdefault(entry.month_start, []).append(item)
    return [
        {
            "month": format_month_year(month_start) if month_start else "",
            "count": len(month_items),
            "activities": month_items,
        }
        for month_start, month_items in sorted(months.items(), key=lambda pair: pair[0] or date.min)
    ]


def _gallery(doc: DocxTemplate, entries: List[ActivityEntry]) -> List[dict]:
    gallery = []
    for entry in entries:
        if not entry.images:
            continue
        # separate InlineImage objects from the ones in lista_actividades
        images = _inline_images(doc, entry.images)
        gallery.append({
            "titulo": entry.title,
            "fecha": entry.full_date,
            "descripcion": Listing(entry.description),
            "cantidad": len(images),
            "imagen_principal": images[0],
            "imagenes": images,
        })
    return gallery


def build_template_context(doc: DocxTemplate, context: ReportContext) -> dict:
    answers = context.answers
    activity_items = [_activity_item(doc, entry) for entry in context.activities]
    gallery = _gallery(doc, context.activities)

    return {
        "anho_reporte": context.year,
        "fecha_reporte": format_long_date(context.report_date),
        "fecha_generacion": format_generation_time(context.generated_at),
        "respuesta_p1": answers.p1,
        "respuesta_p2": answers.p2,
        "respuesta_p3": answers.p3,
        "respuesta_p4": answers.p4,
        "respuesta_p5": answers.p5,
        "respuesta_p6": answers.p6,
        "lista_actividades": activity_items,
        "lista_bautismos": [
            {"name": entry.name, "images": _inline_images(doc, entry.images)}
            for entry in context.baptisms
        ],
        "total_actividades": len(context.activities),
        "total_bautismos": len(context.baptisms),
        "total_imagenes": sum(len(entry.images) for entry in context.activities),
        "actividades_con_imagenes": len(gallery),
        "actividades_por_mes": group_activities_by_month(context.activities, activity_items),
        "resumen_bautismos": [
            {"nombre": entry.person, "fecha": entry.full_date, "origen": entry.source}
            for entry in context.baptisms
        ],
        "galeria_actividades": gallery,
    }


def render_report(template_bytes: bytes, context: ReportContext) -> bytes:
    """Binds the context into the template and returns the rendered document. Template errors propagate."""
    doc = DocxTemplate(io.BytesIO(template_bytes))
    doc.render(build_template_context(doc, context), autoescape=True)

    output = io.BytesIO()
    doc.save(output)
    logger.info("Rendered report with %d activities and %d baptisms",
                len(context.activities), len(context.baptisms))
    return output.getvalue()
