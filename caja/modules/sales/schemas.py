"""
Esquemas Pydantic para el módulo de Ventas
"""

from pydantic import Field, field_validator, model_validator
from decimal import Decimal
from typing import Optional
import datetime as dt

from caja.common.responses import CamelModel, Money
from caja.common.validators import parse_calendar_day
from caja.modules.commissions.models import PaymentMethod, CardBrand
from caja.modules.commissions.schemas import check_card_details


class SaleCreate(CamelModel):
    """
    Alta de venta. El monto es el total cobrado; la comisión se calcula
    según el medio de pago.
    """
    description: str = Field(..., min_length=1, description="Descripción")
    amount: Decimal = Field(..., gt=0, decimal_places=2, description="Monto total de la venta")
    payment_method: PaymentMethod
    card_brand: Optional[CardBrand] = None
    installments: Optional[int] = None
    date: Optional[dt.date] = Field(None, description="Día calendario YYYY-MM-DD")

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Descripción es requerida')
        return v

    @field_validator('date', mode='before')
    @classmethod
    def empty_date_is_none(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return parse_calendar_day(v)

    @model_validator(mode='after')
    def credit_card_details(self):
        check_card_details(self.payment_method, self.card_brand, self.installments)
        return self


class SaleUpdate(CamelModel):
    """Campos opcionales; medio de pago y tarjeta se validan contra la venta existente"""
    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    payment_method: Optional[PaymentMethod] = None
    card_brand: Optional[CardBrand] = None
    installments: Optional[int] = None
    date: Optional[dt.date] = None

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError('Descripción es requerida')
        return v

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v):
        if v is None:
            return None
        return parse_calendar_day(v)


class SaleOut(CamelModel):
    id: str
    date: dt.date
    description: str
    cash_amount: Money
    digital_amount: Money
    commission_amount: Money
    payment_method: PaymentMethod
    card_brand: Optional[CardBrand] = None
    installments: Optional[int] = None
    user_id: str
    created_at: dt.datetime
    updated_at: dt.datetime
