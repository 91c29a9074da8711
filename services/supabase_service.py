# services/supabase_service.py
from supabase import create_client, Client, ClientOptions
import os
from typing import Dict, Any

from services.errors import UnauthenticatedError


def require_session(session) -> None:
    """Fail before any request is issued when nobody is signed in"""
    if session is None or not getattr(session, 'user_id', None) or not getattr(session, 'access_token', None):
        raise UnauthenticatedError("Usuário não autenticado")


class SupabaseService:
    def __init__(self):
        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_ANON_KEY")

        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set in environment variables")

        self.url = url
        self.key = key
        # Anonymous client, only used for health checks
        self.client: Client = create_client(url, key)
        print("✅ Supabase client initialized")

    def _options(self, headers: Dict[str, str] = None) -> ClientOptions:
        return ClientOptions(
            headers=headers or {},
            persist_session=False,
            auto_refresh_token=False
        )

    def auth_client(self) -> Client:
        """Fresh client for a single auth call, so no session leaks between callers"""
        return create_client(self.url, self.key, options=self._options())

    def scoped_client(self, session) -> Client:
        """
        Client whose requests carry the caller's access token (row-level security applies).
        Built once per session; every query of the same request reuses it.
        """
        require_session(session)
        if session._client is None:
            session._client = create_client(
                self.url,
                self.key,
                options=self._options({"Authorization": f"Bearer {session.access_token}"})
            )
        return session._client

    def table(self, session, name: str):
        """Query builder for `name` as seen by the session's user"""
        return self.scoped_client(session).table(name)

    async def health_check(self) -> Dict[str, Any]:
        """Check the REST endpoint answers"""
        try:
            self.client.table('students').select('id').limit(1).execute()
            return {"status": "healthy", "message": "Supabase reachable"}
        except Exception as e:
            print(f"❌ Supabase health check failed: {e}")
            return {"status": "unhealthy", "message": str(e)}


# Global instance - initialized in main.py
supabase_service = None

def get_supabase_service() -> SupabaseService:
    """Get the global Supabase service instance"""
    global supabase_service
    if supabase_service is None:
        supabase_service = SupabaseService()
    return supabase_service

def init_supabase_service():
    """Initialize the global Supabase service"""
    global supabase_service
    supabase_service = SupabaseService()
