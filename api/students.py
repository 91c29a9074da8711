# api/students.py
from fastapi import APIRouter, Depends
from typing import List, Optional

from api.dependencies import get_session, to_http_error
from models.auth_schemas import SessionContext
from models.measurement_schemas import MeasurementResponse
from models.student_schemas import StudentCreate, StudentUpdate, StudentResponse, StudentWithLatestMeasurement
from models.view_schemas import ChartKey, ChartsTab, ProfileHeader, ProfileResponse, ProfileTab, StudentCard
from services.chart_series import build_charts, summarize_trends
from services.measurement_service import MeasurementService, get_measurement_service
from services.student_service import StudentService, get_student_service
from utils.body_metrics import calculate_age, calculate_bmi

router = APIRouter()

SAVE_ERROR = "Erro ao salvar aluno. Verifique os dados e tente novamente."
DELETE_ERROR = "Erro ao excluir aluno."


def student_card(student: StudentWithLatestMeasurement) -> StudentCard:
    latest = student.latest_measurement
    return StudentCard(
        **student.model_dump(),
        age=calculate_age(student.date_of_birth),
        latest_bmi=calculate_bmi(latest.weight, latest.height) if latest else None
    )


@router.get("", response_model=List[StudentCard])
async def list_students(
    q: Optional[str] = None,
    session: Optional[SessionContext] = Depends(get_session),
    students: StudentService = Depends(get_student_service)
):
    """Student grid, optionally filtered by name or e-mail"""
    try:
        rows = await students.list_students(session, q)
        return [student_card(s) for s in rows]
    except Exception as e:
        print(f"❌ Error loading students: {e}")
        raise to_http_error(e)


@router.post("", response_model=StudentResponse, status_code=201)
async def create_student(
    student: StudentCreate,
    session: Optional[SessionContext] = Depends(get_session),
    students: StudentService = Depends(get_student_service)
):
    try:
        return await students.create_student(session, student)
    except Exception as e:
        print(f"❌ Error saving student: {e}")
        raise to_http_error(e, SAVE_ERROR)


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(
    student_id: str,
    session: Optional[SessionContext] = Depends(get_session),
    students: StudentService = Depends(get_student_service)
):
    try:
        return await students.get_student(session, student_id)
    except Exception as e:
        print(f"❌ Error getting student: {e}")
        raise to_http_error(e)


@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: str,
    updates: StudentUpdate,
    session: Optional[SessionContext] = Depends(get_session),
    students: StudentService = Depends(get_student_service)
):
    try:
        return await students.update_student(session, student_id, updates)
    except Exception as e:
        print(f"❌ Error updating student: {e}")
        raise to_http_error(e, SAVE_ERROR)


@router.delete("/{student_id}")
async def delete_student(
    student_id: str,
    session: Optional[SessionContext] = Depends(get_session),
    students: StudentService = Depends(get_student_service)
):
    """Delete a student together with all of its measurements"""
    try:
        await students.delete_student(session, student_id)
        return {"success": True}
    except Exception as e:
        print(f"❌ Error deleting student: {e}")
        raise to_http_error(e, DELETE_ERROR)


@router.get("/{student_id}/measurements", response_model=List[MeasurementResponse])
async def list_student_measurements(
    student_id: str,
    session: Optional[SessionContext] = Depends(get_session),
    measurements: MeasurementService = Depends(get_measurement_service)
):
    """Measurement history, newest first"""
    try:
        return await measurements.list_measurements(session, student_id)
    except Exception as e:
        print(f"❌ Error loading measurements: {e}")
        raise to_http_error(e)


@router.get("/{student_id}/profile", response_model=ProfileResponse)
async def student_profile(
    student_id: str,
    tab: ProfileTab = ProfileTab.MEASUREMENTS,
    session: Optional[SessionContext] = Depends(get_session),
    students: StudentService = Depends(get_student_service),
    measurements: MeasurementService = Depends(get_measurement_service)
):
    """Student profile with either the measurement history or the evolution charts"""
    try:
        student = await students.get_student(session, student_id)
        history = await measurements.list_measurements(session, student_id)
    except Exception as e:
        print(f"❌ Error loading profile: {e}")
        raise to_http_error(e)

    profile = ProfileResponse(
        header=ProfileHeader(
            id=student.id,
            name=student.name,
            email=student.email,
            age=calculate_age(student.date_of_birth),
            can_export=len(history) > 0
        ),
        active_tab=tab,
        measurements_count=len(history)
    )

    if tab == ProfileTab.CHARTS:
        profile.charts = ChartsTab(
            series=build_charts(list(ChartKey), history),
            summary=summarize_trends(history)
        )
    else:
        profile.measurements = history
    return profile
