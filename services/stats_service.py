# services/stats_service.py
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from models.student_schemas import StudentWithLatestMeasurement
from models.view_schemas import DashboardStats, StatCard
from utils.body_metrics import parse_timestamp

RECENT_STUDENTS = 5


def compute_dashboard_stats(
    students: Sequence[StudentWithLatestMeasurement],
    now: Optional[datetime] = None
) -> DashboardStats:
    """Headline numbers for the dashboard, recomputed from the student list"""
    now = now or datetime.now(timezone.utc)
    first_day_of_month = datetime(now.year, now.month, 1, tzinfo=now.tzinfo or timezone.utc)

    new_this_month = sum(
        1 for s in students
        if s.created_at and parse_timestamp(s.created_at) >= first_day_of_month
    )

    return DashboardStats(
        total_students=len(students),
        new_this_month=new_this_month,
        total_measurements=sum(s.measurements_count for s in students),
        with_progress=sum(1 for s in students if s.measurements_count > 1)
    )


def stat_cards(stats: DashboardStats) -> List[StatCard]:
    return [
        StatCard(title='Total de Alunos', value=stats.total_students, change=f"+{stats.new_this_month} este mês"),
        StatCard(title='Medições Registradas', value=stats.total_measurements, change='Total no sistema'),
        StatCard(title='Com Progresso', value=stats.with_progress, change='Alunos com múltiplas medições'),
        StatCard(title='Este Mês', value=stats.new_this_month, change='Novos cadastros'),
    ]
