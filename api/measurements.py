# api/measurements.py
from fastapi import APIRouter, Depends
from typing import Optional

from api.dependencies import get_session, to_http_error
from models.auth_schemas import SessionContext
from models.measurement_schemas import MeasurementCreate, MeasurementUpdate, MeasurementResponse
from services.measurement_service import MeasurementService, get_measurement_service

router = APIRouter()

SAVE_ERROR = "Erro ao salvar medição. Verifique os dados e tente novamente."
DELETE_ERROR = "Erro ao excluir medição."


@router.post("", response_model=MeasurementResponse, status_code=201)
async def create_measurement(
    measurement: MeasurementCreate,
    session: Optional[SessionContext] = Depends(get_session),
    measurements: MeasurementService = Depends(get_measurement_service)
):
    try:
        return await measurements.create_measurement(session, measurement)
    except Exception as e:
        print(f"❌ Error saving measurement: {e}")
        raise to_http_error(e, SAVE_ERROR)


@router.get("/{measurement_id}", response_model=MeasurementResponse)
async def get_measurement(
    measurement_id: str,
    session: Optional[SessionContext] = Depends(get_session),
    measurements: MeasurementService = Depends(get_measurement_service)
):
    try:
        return await measurements.get_measurement(session, measurement_id)
    except Exception as e:
        print(f"❌ Error getting measurement: {e}")
        raise to_http_error(e)


@router.put("/{measurement_id}", response_model=MeasurementResponse)
async def update_measurement(
    measurement_id: str,
    updates: MeasurementUpdate,
    session: Optional[SessionContext] = Depends(get_session),
    measurements: MeasurementService = Depends(get_measurement_service)
):
    try:
        return await measurements.update_measurement(session, measurement_id, updates)
    except Exception as e:
        print(f"❌ Error updating measurement: {e}")
        raise to_http_error(e, SAVE_ERROR)


@router.delete("/{measurement_id}")
async def delete_measurement(
    measurement_id: str,
    session: Optional[SessionContext] = Depends(get_session),
    measurements: MeasurementService = Depends(get_measurement_service)
):
    try:
        await measurements.delete_measurement(session, measurement_id)
        return {"success": True}
    except Exception as e:
        print(f"❌ Error deleting measurement: {e}")
        raise to_http_error(e, DELETE_ERROR)
