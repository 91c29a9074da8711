# api/dependencies.py
from fastapi import Depends, Header, HTTPException
from typing import Optional

from models.auth_schemas import SessionContext
from services.auth_service import AuthService, get_auth_service
from services.errors import EmptyChartSelectionError, ExportError, NotFoundError, UnauthenticatedError


async def get_session(
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[SessionContext]:
    """
    Resolve the caller from the `Authorization: Bearer <token>` header.
    Returns None when there is no valid session; the data services refuse to run without one.
    """
    token = None
    if authorization and authorization.lower().startswith('bearer '):
        token = authorization[7:].strip()
    return await auth_service.get_session(token)


def to_http_error(error: Exception, message: Optional[str] = None) -> HTTPException:
    """Map service errors to HTTP responses; `message` is what the user sees for anything unexpected"""
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, UnauthenticatedError):
        return HTTPException(status_code=401, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, EmptyChartSelectionError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, ExportError):
        return HTTPException(status_code=500, detail=str(error))
    return HTTPException(status_code=500, detail=message or str(error))
