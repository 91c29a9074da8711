# services/pdf_export.py
import asyncio
import io
import re
from datetime import datetime, timezone, date
from typing import List, Optional, Sequence, Tuple

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from models.measurement_schemas import MeasurementResponse
from models.student_schemas import StudentResponse
from models.view_schemas import ChartKey, Gender
from services.errors import ExportError
from services.report_layout import PAGE_HEIGHT_MM, PAGE_WIDTH_MM, render_report


def paginate(content_height: float, page_height: float = PAGE_HEIGHT_MM) -> List[float]:
    """
    Vertical offsets of the content image on each page.

    The first page shows the image at 0; every following page shifts it up
    by one more page height, until the remaining height goes negative.
    """
    offsets = [0]
    height_left = content_height - page_height
    while height_left >= 0:
        offsets.append(height_left - content_height)
        height_left -= page_height
    return offsets


def export_filename(student_name: str, today: Optional[date] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    name = re.sub(r"\s+", "_", student_name)
    return f"{name}_medicoes_{today.isoformat()}.pdf"


def build_pdf(image: Image.Image) -> bytes:
    """Slice a rendered report into A4 pages and return the PDF bytes"""
    image_height_mm = image.height * PAGE_WIDTH_MM / image.width

    png = io.BytesIO()
    image.save(png, format="PNG")
    png.seek(0)
    reader = ImageReader(png)

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    for offset in paginate(image_height_mm):
        # ReportLab measures y from the bottom of the page
        bottom = PAGE_HEIGHT_MM - offset - image_height_mm
        pdf.drawImage(reader, 0, bottom * mm, width=PAGE_WIDTH_MM * mm, height=image_height_mm * mm)
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


async def generate_student_pdf(
    student: StudentResponse,
    measurement: MeasurementResponse,
    gender: Gender = Gender.MALE,
    chart_keys: Sequence[ChartKey] = (),
    measurements: Sequence[MeasurementResponse] = ()
) -> Tuple[str, bytes]:
    """Render the report off-screen, wait for it, then paginate it into a PDF"""
    try:
        print(f"🔍 Generating PDF for student {student.id} ({len(chart_keys)} charts)")
        image = await asyncio.to_thread(render_report, student, measurement, gender, chart_keys, measurements)
        pdf_bytes = await asyncio.to_thread(build_pdf, image)
    except Exception as e:
        print(f"❌ Error generating PDF: {e}")
        raise ExportError("Falha ao gerar o PDF. Tente novamente.") from e

    filename = export_filename(student.name)
    print(f"✅ PDF generated: {filename}")
    return filename, pdf_bytes
