# api/exports.py
from fastapi import APIRouter, Depends, HTTPException, Response
from typing import Optional
from urllib.parse import quote

from api.dependencies import get_session, to_http_error
from models.auth_schemas import SessionContext
from models.view_schemas import ChartOption, ExportOptions, ExportRequest
from services.chart_selection import ChartSelection
from services.chart_series import CHART_META, MIN_POINTS, available_charts
from services.measurement_service import MeasurementService, get_measurement_service
from services.pdf_export import generate_student_pdf
from services.student_service import StudentService, get_student_service

router = APIRouter()

NO_MEASUREMENTS = "Não há medições disponíveis para gerar o PDF."
EXPORT_ERROR = "Erro ao gerar PDF. Tente novamente."


def _content_disposition(filename: str) -> str:
    fallback = filename.encode('ascii', 'ignore').decode('ascii')
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/{student_id}/export/options", response_model=ExportOptions)
async def export_options(
    student_id: str,
    session: Optional[SessionContext] = Depends(get_session),
    measurements: MeasurementService = Depends(get_measurement_service)
):
    """Charts the trainer may pick before exporting; selection is only asked for with 2+ measurements"""
    try:
        history = await measurements.list_measurements(session, student_id)
    except Exception as e:
        print(f"❌ Error loading export options: {e}")
        raise to_http_error(e)

    requires_selection = len(history) >= MIN_POINTS
    keys = available_charts(history) if requires_selection else []
    return ExportOptions(
        has_measurement=len(history) > 0,
        requires_chart_selection=requires_selection,
        available_charts=[ChartOption(key=key, title=CHART_META[key].title) for key in keys]
    )


@router.post("/{student_id}/export")
async def export_pdf(
    student_id: str,
    request: ExportRequest,
    session: Optional[SessionContext] = Depends(get_session),
    students: StudentService = Depends(get_student_service),
    measurements: MeasurementService = Depends(get_measurement_service)
):
    """Build the body-measurement report for the latest measurement and return it as a PDF"""
    try:
        student = await students.get_student(session, student_id)
        history = await measurements.list_measurements(session, student_id)
    except Exception as e:
        print(f"❌ Error loading export data: {e}")
        raise to_http_error(e)

    if not history:
        raise HTTPException(status_code=400, detail=NO_MEASUREMENTS)
    latest = history[0]

    chart_keys = []
    if len(history) >= MIN_POINTS:
        selection = ChartSelection(available_charts(history))
        try:
            selection.select(request.charts)
            chart_keys = selection.confirm()
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))

    try:
        filename, pdf_bytes = await generate_student_pdf(student, latest, request.gender, chart_keys, history)
    except Exception as e:
        raise to_http_error(e, EXPORT_ERROR)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": _content_disposition(filename)}
    )
