"""
Esquemas Pydantic para el módulo de Clientes
"""

from pydantic import Field, field_validator
from decimal import Decimal
from typing import Optional
from datetime import date, datetime
import re

from caja.common.responses import CamelModel, Money

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip():
        return v
    if not EMAIL_RE.match(v.strip()):
        raise ValueError('Email debe ser válido')
    return v.strip()


class CustomerBase(CamelModel):
    email: Optional[str] = Field(None, max_length=100, description="Email del cliente")
    phone: Optional[str] = Field(None, max_length=50, description="Teléfono")
    address: Optional[str] = Field(None, max_length=300, description="Dirección")
    tax_id: Optional[str] = Field(None, max_length=50, description="CUIT/DNI")
    credit_limit: Optional[Decimal] = Field(None, ge=0, description="Límite de crédito")
    notes: Optional[str] = Field(None, description="Notas")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)


class CustomerCreate(CustomerBase):
    name: str = Field(..., min_length=1, max_length=200, description="Nombre del cliente")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError('Nombre es requerido')
        return cleaned


class CustomerUpdate(CustomerBase):
    name: Optional[str] = Field(None, min_length=1, max_length=200)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        cleaned = v.strip()
        if not cleaned:
            raise ValueError('Nombre es requerido')
        return cleaned


class CustomerOut(CamelModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None
    credit_limit: Optional[Money] = None
    notes: Optional[str] = None
    user_id: str
    created_at: datetime
    updated_at: datetime


class CustomerBalance(CamelModel):
    """Saldo actual y últimas fechas de entrega y pago de un cliente"""
    customer: CustomerOut
    balance: Money
    last_delivery_date: Optional[date] = None
    last_payment_date: Optional[date] = None
