# api/auth.py
from fastapi import APIRouter, Depends
from typing import Optional

from api.dependencies import get_session, to_http_error
from models.auth_schemas import (
    AuthResponse,
    CurrentUserResponse,
    SessionContext,
    SignInRequest,
    SignUpRequest
)
from services.auth_service import AuthService, get_auth_service
from services.errors import UnauthenticatedError

router = APIRouter()


@router.post("/sign-up", response_model=AuthResponse)
async def sign_up(request: SignUpRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Register a new trainer account"""
    try:
        result = await auth_service.sign_up(request.name, request.email, request.password)
        session = result.get('session') or {}
        return AuthResponse(
            success=True,
            access_token=session.get('access_token'),
            refresh_token=session.get('refresh_token'),
            user=result['user'],
            message="Conta criada com sucesso"
        )
    except Exception as e:
        print(f"❌ Error signing up: {e}")
        return AuthResponse(success=False, error=str(e))


@router.post("/sign-in", response_model=AuthResponse)
async def sign_in(request: SignInRequest, auth_service: AuthService = Depends(get_auth_service)):
    try:
        result = await auth_service.sign_in(request.email, request.password)
        return AuthResponse(
            success=True,
            access_token=result['access_token'],
            refresh_token=result['refresh_token'],
            user=result['user'],
            message="Login realizado com sucesso"
        )
    except Exception as e:
        print(f"❌ Error during sign-in: {e}")
        return AuthResponse(success=False, error="E-mail ou senha inválidos")


@router.post("/sign-out")
async def sign_out(
    session: Optional[SessionContext] = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service)
):
    try:
        await auth_service.sign_out(session)
        return {"success": True}
    except Exception as e:
        print(f"❌ Error signing out: {e}")
        raise to_http_error(e)


@router.get("/me", response_model=CurrentUserResponse)
async def current_user(session: Optional[SessionContext] = Depends(get_session)):
    """User shown in the top bar"""
    if session is None:
        raise to_http_error(UnauthenticatedError("Usuário não autenticado"))
    return CurrentUserResponse(
        id=session.user_id,
        email=session.email,
        display_name=session.name or session.email or ""
    )
