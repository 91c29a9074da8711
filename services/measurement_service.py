# services/measurement_service.py
from typing import List, Optional

from models.auth_schemas import SessionContext
from models.measurement_schemas import MeasurementCreate, MeasurementUpdate, MeasurementResponse
from services.errors import NotFoundError
from services.supabase_service import get_supabase_service, require_session

PROTECTED_FIELDS = ('id', 'user_id', 'created_at', 'student_id')


class MeasurementService:
    def __init__(self, supabase_service=None):
        self.supabase = supabase_service or get_supabase_service()

    async def _ensure_student_owned(self, session: SessionContext, student_id: str) -> None:
        """The student must belong to the caller before a measurement can point at it"""
        response = self.supabase.table(session, 'students') \
            .select('id') \
            .eq('id', student_id) \
            .eq('user_id', session.user_id) \
            .limit(1) \
            .execute()
        if not response.data:
            raise NotFoundError(f"Student {student_id} not found")

    async def list_measurements(self, session: SessionContext, student_id: str) -> List[MeasurementResponse]:
        """Measurement history of a student, newest first"""
        require_session(session)
        try:
            response = self.supabase.table(session, 'measurements') \
                .select('*') \
                .eq('student_id', student_id) \
                .eq('user_id', session.user_id) \
                .order('measured_at', desc=True) \
                .execute()
            return [MeasurementResponse(**row) for row in response.data or []]
        except Exception as e:
            print(f"❌ Error loading measurements for student {student_id}: {e}")
            raise

    async def get_latest_measurement(self, session: SessionContext, student_id: str) -> Optional[MeasurementResponse]:
        require_session(session)
        try:
            response = self.supabase.table(session, 'measurements') \
                .select('*') \
                .eq('student_id', student_id) \
                .eq('user_id', session.user_id) \
                .order('measured_at', desc=True) \
                .limit(1) \
                .execute()
        except Exception as e:
            print(f"❌ Error getting latest measurement for student {student_id}: {e}")
            raise

        return MeasurementResponse(**response.data[0]) if response.data else None

    async def get_measurement(self, session: SessionContext, measurement_id: str) -> MeasurementResponse:
        require_session(session)
        try:
            response = self.supabase.table(session, 'measurements') \
                .select('*') \
                .eq('id', measurement_id) \
                .eq('user_id', session.user_id) \
                .limit(1) \
                .execute()
        except Exception as e:
            print(f"❌ Error getting measurement {measurement_id}: {e}")
            raise

        if not response.data:
            raise NotFoundError(f"Measurement {measurement_id} not found")
        return MeasurementResponse(**response.data[0])

    async def create_measurement(self, session: SessionContext, measurement: MeasurementCreate) -> MeasurementResponse:
        require_session(session)
        try:
            print(f"🔍 Creating measurement for student {measurement.student_id}")
            await self._ensure_student_owned(session, measurement.student_id)

            measurement_data = measurement.model_dump(mode='json')
            measurement_data['user_id'] = session.user_id

            response = self.supabase.table(session, 'measurements').insert(measurement_data).execute()

            if response.data:
                print(f"✅ Measurement created: {response.data[0]['id']}")
                return MeasurementResponse(**response.data[0])
            else:
                raise Exception("No data returned from Supabase")

        except Exception as e:
            print(f"❌ Error creating measurement: {e}")
            raise

    async def update_measurement(self, session: SessionContext, measurement_id: str, updates: MeasurementUpdate) -> MeasurementResponse:
        require_session(session)
        try:
            update_data = updates.model_dump(mode='json', exclude_unset=True)
            for field in PROTECTED_FIELDS:
                update_data.pop(field, None)

            response = self.supabase.table(session, 'measurements') \
                .update(update_data) \
                .eq('id', measurement_id) \
                .eq('user_id', session.user_id) \
                .execute()

        except Exception as e:
            print(f"❌ Error updating measurement {measurement_id}: {e}")
            raise

        if not response.data:
            raise NotFoundError(f"Measurement {measurement_id} not found")
        print(f"✅ Measurement updated: {measurement_id}")
        return MeasurementResponse(**response.data[0])

    async def delete_measurement(self, session: SessionContext, measurement_id: str) -> None:
        require_session(session)
        try:
            response = self.supabase.table(session, 'measurements') \
                .delete() \
                .eq('id', measurement_id) \
                .eq('user_id', session.user_id) \
                .execute()
        except Exception as e:
            print(f"❌ Error deleting measurement {measurement_id}: {e}")
            raise

        if not response.data:
            raise NotFoundError(f"Measurement {measurement_id} not found")
        print(f"✅ Measurement deleted: {measurement_id}")


measurement_service = None

def get_measurement_service() -> MeasurementService:
    global measurement_service
    if measurement_service is None:
        measurement_service = MeasurementService()
    return measurement_service
