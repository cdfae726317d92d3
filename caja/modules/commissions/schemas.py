"""
Esquemas Pydantic para el módulo de Comisiones
"""

from pydantic import Field, model_validator
from decimal import Decimal
from typing import Optional, Dict
from datetime import datetime

from caja.common.responses import CamelModel, Money
from caja.modules.commissions.models import PaymentMethod, CardBrand, INSTALLMENT_OPTIONS


def check_card_details(payment_method, card_brand, installments):
    """Tarjeta de crédito requiere marca y cuotas válidas"""
    if payment_method == PaymentMethod.TARJETA_CREDITO:
        if not card_brand or not installments:
            raise ValueError('Para tarjetas de crédito se requiere marca y cantidad de cuotas')
        if installments not in INSTALLMENT_OPTIONS:
            raise ValueError(f'Cuotas inválidas: {installments}')


class CommissionConfigOut(CamelModel):
    id: str
    user_id: str
    payment_method: PaymentMethod
    card_brand: Optional[CardBrand] = None
    installments: Optional[int] = None
    percentage: Money
    fixed_amount: Optional[Money] = None
    is_active: bool
    updated_at: datetime


class CommissionConfigUpdate(CamelModel):
    """Sólo porcentaje, monto fijo y estado son editables"""
    percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    fixed_amount: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @model_validator(mode='after')
    def at_least_one_field(self):
        if not self.model_fields_set & {"percentage", "fixed_amount", "is_active"}:
            raise ValueError('No hay campos válidos para actualizar')
        return self


class CommissionCalculateRequest(CamelModel):
    payment_method: PaymentMethod
    amount: Decimal = Field(..., gt=0, description="Monto bruto de la venta")
    card_brand: Optional[CardBrand] = None
    installments: Optional[int] = None

    @model_validator(mode='after')
    def credit_card_details(self):
        check_card_details(self.payment_method, self.card_brand, self.installments)
        return self


class CommissionCalculation(CamelModel):
    commission: Money
    net_amount: Money


class OrganizedCommissions(CamelModel):
    """Porcentajes agrupados para la pantalla de configuración"""
    efectivo: Money = Decimal("0")
    transferencia: Money = Decimal("0")
    qr: Money = Decimal("0")
    tarjeta_debito: Money = Field(Decimal("0"), alias="tarjeta_debito")
    tarjeta_credito: Dict[CardBrand, Dict[int, Money]] = Field(..., alias="tarjeta_credito")
