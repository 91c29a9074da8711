# models/auth_schemas.py
from pydantic import BaseModel, EmailStr, PrivateAttr
from typing import Optional, Dict, Any


class SessionContext(BaseModel):
    """Who is calling. Passed explicitly to every data-access operation."""
    user_id: str
    access_token: str
    email: Optional[str] = None
    name: Optional[str] = None

    # Supabase client scoped to this session, built on first query and reused for the rest of the request
    _client: Any = PrivateAttr(default=None)


class SignUpRequest(BaseModel):
    name: str
    email: EmailStr
    password: str


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    success: bool
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    error: Optional[str] = None


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    display_name: str
