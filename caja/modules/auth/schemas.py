from pydantic import BaseModel
from typing import Optional


class AuthContext(BaseModel):
    """Usuario autenticado; su user_id es el tenant de todos los datos"""
    user_id: str
    email: Optional[str] = None
