"""
Esquemas Pydantic para el módulo de Retiros
"""

from pydantic import Field, field_validator
from decimal import Decimal
from typing import Optional
import datetime as dt

from caja.common.responses import CamelModel, Money
from caja.common.validators import parse_calendar_day
from caja.modules.withdrawals.models import WithdrawalReason


class WithdrawalCreate(CamelModel):
    amount: Decimal = Field(..., gt=0, decimal_places=2, description="Monto retirado")
    reason: WithdrawalReason
    description: Optional[str] = Field(None, description="Detalle libre")
    date: Optional[dt.date] = Field(None, description="Día calendario YYYY-MM-DD")

    @field_validator('date', mode='before')
    @classmethod
    def empty_date_is_none(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return parse_calendar_day(v)


class WithdrawalUpdate(CamelModel):
    amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    reason: Optional[WithdrawalReason] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v):
        if v is None:
            return None
        return parse_calendar_day(v)


class WithdrawalOut(CamelModel):
    id: str
    amount: Money
    reason: WithdrawalReason
    description: str
    date: dt.date
    user_id: str
    created_at: dt.datetime
    updated_at: dt.datetime
