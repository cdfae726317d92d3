"""
Envelope de respuesta común y tipos monetarios
"""
from decimal import Decimal
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Decimal en Python, número en JSON
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ApiResponse(BaseModel, Generic[T]):
    """Envelope {success, data, message} que consume el frontend"""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[list] = None


def ok(data=None, message: Optional[str] = None) -> dict:
    """Respuesta exitosa sin modelo tipado (ej. DELETE)"""
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


class CamelModel(BaseModel):
    """Base de esquemas: snake_case en Python, camelCase en JSON"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
