# services/auth_service.py
from typing import Optional, Dict, Any

from models.auth_schemas import SessionContext
from services.supabase_service import get_supabase_service, require_session


def display_name(user: Dict[str, Any]) -> str:
    """Name shown in the user menu: profile name, falling back to e-mail"""
    metadata = user.get('user_metadata') or {}
    return metadata.get('name') or user.get('email') or ''


def _user_dict(user) -> Dict[str, Any]:
    if user is None:
        return {}
    if isinstance(user, dict):
        return user
    return {
        'id': user.id,
        'email': getattr(user, 'email', None),
        'user_metadata': getattr(user, 'user_metadata', None) or {}
    }


class AuthService:
    """Session handling delegated to Supabase Auth (GoTrue)"""

    def __init__(self, supabase_service=None):
        self.supabase = supabase_service or get_supabase_service()

    async def sign_up(self, name: str, email: str, password: str) -> Dict[str, Any]:
        print(f"🔍 Signing up trainer: {email}")
        client = self.supabase.auth_client()
        response = client.auth.sign_up({
            "email": email,
            "password": password,
            "options": {"data": {"name": name}}
        })
        result = {'user': _user_dict(response.user), 'session': None}
        if response.session:
            result['session'] = {
                'access_token': response.session.access_token,
                'refresh_token': response.session.refresh_token
            }
        print(f"✅ Trainer signed up: {email}")
        return result

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        print(f"🔍 Sign-in attempt for: {email}")
        client = self.supabase.auth_client()
        response = client.auth.sign_in_with_password({"email": email, "password": password})
        if not response.session:
            raise Exception("No session returned from Supabase")
        print(f"✅ Signed in: {email}")
        return {
            'user': _user_dict(response.user),
            'access_token': response.session.access_token,
            'refresh_token': response.session.refresh_token
        }

    async def get_session(self, access_token: Optional[str]) -> Optional[SessionContext]:
        """Resolve a bearer token into a SessionContext, or None when it is not valid"""
        if not access_token:
            return None
        try:
            client = self.supabase.auth_client()
            response = client.auth.get_user(access_token)
        except Exception as e:
            print(f"⚠️ Could not resolve session: {e}")
            return None

        user = _user_dict(response.user if response else None)
        if not user.get('id'):
            return None
        return SessionContext(
            user_id=user['id'],
            access_token=access_token,
            email=user.get('email'),
            name=display_name(user)
        )

    async def sign_out(self, session: Optional[SessionContext]) -> None:
        require_session(session)
        client = self.supabase.auth_client()
        client.auth.admin.sign_out(session.access_token)
        print(f"✅ Signed out user {session.user_id}")


auth_service = None

def get_auth_service() -> AuthService:
    global auth_service
    if auth_service is None:
        auth_service = AuthService()
    return auth_service
