import io
from typing import AsyncGenerator, List, Tuple

import pytest
import pytest_asyncio
from docx import Document
from PIL import Image
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from quorumflow.database.connection import Base
from quorumflow.database import models  # noqa: F401  (registers tables)

DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# === Helpers ===

def make_png(width: int, height: int, color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def build_report_template() -> bytes:
    """A minimal annual report template exposing every placeholder the renderer fills."""
    doc = Document()
    doc.add_paragraph("Informe anual - {{ fecha_reporte }}")
    for i in range(1, 7):
        doc.add_paragraph(f"Pregunta {i}: {{{{ respuesta_p{i} }}}}")
    doc.add_paragraph("Año {{ anho_reporte }} - generado el {{ fecha_generacion }}")
    doc.add_paragraph("Totales: {{ total_actividades }} actividades, {{ total_bautismos }} bautismos, "
                      "{{ total_imagenes }} imágenes en {{ actividades_con_imagenes }} actividades")
    doc.add_paragraph("{%p for m in actividades_por_mes %}")
    doc.add_paragraph("Mes {{ m.month }}: {{ m.count }}")
    doc.add_paragraph("{%p endfor %}")
    doc.add_paragraph("{%p for r in resumen_bautismos %}")
    doc.add_paragraph("Resumen {{ r.nombre }} - {{ r.fecha }} - {{ r.origen }}")
    doc.add_paragraph("{%p endfor %}")
    doc.add_paragraph("{%p for g in galeria_actividades %}")
    doc.add_paragraph("Galería {{ g.titulo }} ({{ g.cantidad }}) {{ g.fecha }}")
    doc.add_paragraph("{%p endfor %}")
    doc.add_paragraph("Actividades")
    doc.add_paragraph("{%p for a in lista_actividades %}")
    doc.add_paragraph("{{ a.title }} | {{ a.date }}")
    doc.add_paragraph("{{ a.description }}")
    doc.add_paragraph("{%p for img in a.images %}")
    doc.add_paragraph("{{ img }}")
    doc.add_paragraph("{%p endfor %}")
    doc.add_paragraph("{%p endfor %}")
    doc.add_paragraph("Bautismos")
    doc.add_paragraph("{%p for b in lista_bautismos %}")
    doc.add_paragraph("{{ b.name }}")
    doc.add_paragraph("{%p for img in b.images %}")
    doc.add_paragraph("{{ img }}")
    doc.add_paragraph("{%p endfor %}")
    doc.add_paragraph("{%p endfor %}")
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def document_text(document_bytes: bytes) -> str:
    doc = Document(io.BytesIO(document_bytes))
    return "\n".join(p.text for p in doc.paragraphs)


class FakeTemplateStore:
    def __init__(self, template: bytes):
        self.template = template
        self.loads = 0

    async def load(self) -> bytes:
        self.loads += 1
        return self.template


class RecordingPushSender:
    """Push sender double: records deliveries and fails for endpoints listed in `failures`."""

    def __init__(self, failures=None):
        self.failures = failures or {}
        self.sent: List[Tuple[str, dict]] = []

    async def send(self, subscription: dict, payload: dict) -> None:
        endpoint = subscription["endpoint"]
        if endpoint in self.failures:
            raise self.failures[endpoint]
        self.sent.append((endpoint, payload))


def subscription_blob(endpoint: str) -> dict:
    return {"endpoint": endpoint, "keys": {"p256dh": "p256dh-key", "auth": "auth-secret"}}


# === Fixtures ===

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine(DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def report_template() -> bytes:
    return build_report_template()
