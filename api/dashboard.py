# api/dashboard.py
from fastapi import APIRouter, Depends
from typing import Optional

from api.dependencies import get_session, to_http_error
from models.auth_schemas import SessionContext
from models.view_schemas import DashboardResponse
from services.stats_service import RECENT_STUDENTS, compute_dashboard_stats, stat_cards
from services.student_service import StudentService, get_student_service

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def dashboard(
    session: Optional[SessionContext] = Depends(get_session),
    students: StudentService = Depends(get_student_service)
):
    """Stat cards and the most recently registered students"""
    try:
        rows = await students.list_students(session)
    except Exception as e:
        print(f"❌ Error loading dashboard data: {e}")
        raise to_http_error(e)

    stats = compute_dashboard_stats(rows)
    return DashboardResponse(
        stats=stats,
        cards=stat_cards(stats),
        recent_students=rows[:RECENT_STUDENTS]
    )
