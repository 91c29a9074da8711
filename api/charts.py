# api/charts.py
from fastapi import APIRouter, Depends, HTTPException, Response
from typing import Optional

from api.dependencies import get_session, to_http_error
from models.auth_schemas import SessionContext
from models.view_schemas import ChartKey, ChartsTab
from services.chart_renderer import render_svg
from services.chart_series import build_chart, build_charts, summarize_trends
from services.measurement_service import MeasurementService, get_measurement_service

router = APIRouter()


@router.get("/{student_id}/charts", response_model=ChartsTab)
async def student_charts(
    student_id: str,
    session: Optional[SessionContext] = Depends(get_session),
    measurements: MeasurementService = Depends(get_measurement_service)
):
    """Every renderable evolution series plus the variation summary"""
    try:
        history = await measurements.list_measurements(session, student_id)
    except Exception as e:
        print(f"❌ Error loading charts: {e}")
        raise to_http_error(e)

    return ChartsTab(series=build_charts(list(ChartKey), history), summary=summarize_trends(history))


@router.get("/{student_id}/charts/{key}.svg")
async def student_chart_svg(
    student_id: str,
    key: ChartKey,
    session: Optional[SessionContext] = Depends(get_session),
    measurements: MeasurementService = Depends(get_measurement_service)
):
    try:
        history = await measurements.list_measurements(session, student_id)
    except Exception as e:
        print(f"❌ Error loading chart {key.value}: {e}")
        raise to_http_error(e)

    chart = build_chart(key, history)
    if chart is None:
        raise HTTPException(status_code=404, detail="Dados insuficientes para este gráfico")
    return Response(content=render_svg(chart), media_type="image/svg+xml")
