# services/student_service.py
from typing import List, Optional
from datetime import datetime, timezone

from models.auth_schemas import SessionContext
from models.measurement_schemas import MEASUREMENT_COLUMNS, MeasurementResponse
from models.student_schemas import (
    StudentCreate,
    StudentUpdate,
    StudentResponse,
    StudentWithLatestMeasurement
)
from services.errors import NotFoundError
from services.supabase_service import get_supabase_service, require_session
from utils.body_metrics import parse_timestamp

STUDENT_WITH_MEASUREMENTS = f"*, measurements!measurements_student_id_fkey({', '.join(MEASUREMENT_COLUMNS)})"

# Fields the caller may never set directly
PROTECTED_FIELDS = ('id', 'user_id', 'created_at')


def _ilike_filter(query: str) -> str:
    """PostgREST `or` filter matching name or e-mail, case-insensitive"""
    term = query.strip().replace('\\', '\\\\').replace('"', '\\"')
    return f'name.ilike."%{term}%",email.ilike."%{term}%"'


def with_latest_measurement(row: dict) -> StudentWithLatestMeasurement:
    """Reshape a student row joined with its measurements into the list aggregate"""
    student = dict(row)
    measurements = student.pop('measurements', None) or []
    latest = None
    if measurements:
        latest = max(measurements, key=lambda m: parse_timestamp(m['measured_at']))
    return StudentWithLatestMeasurement(
        **student,
        latest_measurement=MeasurementResponse(**latest) if latest else None,
        measurements_count=len(measurements)
    )


class StudentService:
    def __init__(self, supabase_service=None):
        self.supabase = supabase_service or get_supabase_service()

    async def list_students(self, session: SessionContext, query: Optional[str] = None) -> List[StudentWithLatestMeasurement]:
        """Students owned by the caller, newest first, each with its latest measurement"""
        require_session(session)
        try:
            builder = self.supabase.table(session, 'students') \
                .select(STUDENT_WITH_MEASUREMENTS) \
                .eq('user_id', session.user_id)

            if query and query.strip():
                builder = builder.or_(_ilike_filter(query))

            response = builder.order('created_at', desc=True).execute()
            return [with_latest_measurement(row) for row in response.data or []]

        except Exception as e:
            print(f"❌ Error listing students: {e}")
            raise

    async def get_student(self, session: SessionContext, student_id: str) -> StudentResponse:
        require_session(session)
        try:
            response = self.supabase.table(session, 'students') \
                .select('*') \
                .eq('id', student_id) \
                .eq('user_id', session.user_id) \
                .limit(1) \
                .execute()
        except Exception as e:
            print(f"❌ Error getting student {student_id}: {e}")
            raise

        if not response.data:
            raise NotFoundError(f"Student {student_id} not found")
        return StudentResponse(**response.data[0])

    async def create_student(self, session: SessionContext, student: StudentCreate) -> StudentResponse:
        require_session(session)
        try:
            print(f"🔍 Creating student: {student.email}")

            student_data = student.model_dump(mode='json')
            for field in PROTECTED_FIELDS:
                student_data.pop(field, None)
            student_data['user_id'] = session.user_id

            response = self.supabase.table(session, 'students').insert(student_data).execute()

            if response.data:
                print(f"✅ Student created successfully: {response.data[0]['id']}")
                return StudentResponse(**response.data[0])
            else:
                raise Exception("No data returned from Supabase")

        except Exception as e:
            print(f"❌ Error creating student: {e}")
            raise

    async def update_student(self, session: SessionContext, student_id: str, updates: StudentUpdate) -> StudentResponse:
        require_session(session)
        try:
            update_data = updates.model_dump(mode='json', exclude_unset=True)
            for field in PROTECTED_FIELDS:
                update_data.pop(field, None)
            update_data['updated_at'] = datetime.now(timezone.utc).isoformat()

            response = self.supabase.table(session, 'students') \
                .update(update_data) \
                .eq('id', student_id) \
                .eq('user_id', session.user_id) \
                .execute()

        except Exception as e:
            print(f"❌ Error updating student {student_id}: {e}")
            raise

        if not response.data:
            raise NotFoundError(f"Student {student_id} not found")
        print(f"✅ Student updated: {student_id}")
        return StudentResponse(**response.data[0])

    async def delete_student(self, session: SessionContext, student_id: str) -> None:
        """Delete a student; the backend cascades to its measurements"""
        require_session(session)
        try:
            response = self.supabase.table(session, 'students') \
                .delete() \
                .eq('id', student_id) \
                .eq('user_id', session.user_id) \
                .execute()
        except Exception as e:
            print(f"❌ Error deleting student {student_id}: {e}")
            raise

        if not response.data:
            raise NotFoundError(f"Student {student_id} not found")
        print(f"✅ Student deleted: {student_id}")


student_service = None

def get_student_service() -> StudentService:
    global student_service
    if student_service is None:
        student_service = StudentService()
    return student_service
