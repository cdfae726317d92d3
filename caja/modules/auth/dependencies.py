"""
Dependencias de autenticación para FastAPI.
"""
from typing import Optional
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import logging

from caja.modules.auth.schemas import AuthContext
from caja.modules.auth.utils import verify_token

logger = logging.getLogger(__name__)

# auto_error=False: la ausencia de token debe responder 401, no 403
security = HTTPBearer(auto_error=False)


class AuthDependencies:
    """Dependencias de autenticación reutilizables."""

    @staticmethod
    def get_auth_context(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    ) -> AuthContext:
        """
        Obtener el usuario autenticado desde el bearer token.
        El user_id resultante es el tenant de todas las operaciones.
        """
        if credentials is None or not credentials.credentials:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token de autorización requerido",
                headers={"WWW-Authenticate": "Bearer"},
            )

        payload = verify_token(credentials.credentials)

        user_id = payload.get("sub") or payload.get("user_id") or payload.get("uid")
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="No se pudieron validar las credenciales",
                headers={"WWW-Authenticate": "Bearer"},
            )

        request.state.user_id = user_id
        return AuthContext(user_id=str(user_id), email=payload.get("email"))
